"""
Envelope unwrapping for combined-stream payloads.

Combined streams wrap every event as {"stream": "<topic>", "data": <event>}.
The spot and futures pipelines unwrap that envelope slightly differently:
spot injects the topic's symbol into the event, futures only descends into
"data". Both cap how deep they will descend.
"""

from typing import Any

from binance_stream.core import get_logger

from .constants import DEFAULT_MAX_ENVELOPE_DEPTH

logger = get_logger(__name__)

STREAM_KEY = "stream"
DATA_KEY = "data"
SYMBOL_KEY = "symbol"


class EnvelopeDepthExceeded(Exception):
    """Payload nests deeper than the unwrap limit allows."""


def symbol_from_topic(topic: str) -> str:
    """
    Derive the symbol identifier from a stream topic.

    Example:
        >>> symbol_from_topic("btcusdt@ticker")
        'BTCUSDT'
    """
    return topic.split("@", 1)[0].upper()


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


class EnvelopeUnwrapper:
    """Strips the futures-style "data" wrapper without touching the payload."""

    def __init__(self, max_depth: int = DEFAULT_MAX_ENVELOPE_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth

    def unwrap(self, value: Any) -> Any:
        """
        Peel envelopes off a decoded JSON value.

        Args:
            value: Decoded JSON value

        Returns:
            The innermost payload

        Raises:
            EnvelopeDepthExceeded: If more than max_depth envelopes are nested
        """
        for _ in range(self.max_depth + 1):
            inner = self._peel(value)
            if inner is None:
                return value
            value = inner
        raise EnvelopeDepthExceeded(f"More than {self.max_depth} nested envelopes")

    def _peel(self, value: Any) -> Any:
        """Return the wrapped payload, or None when value is not an envelope."""
        if not isinstance(value, dict):
            return None
        data = value.get(DATA_KEY)
        if not _is_container(data):
            return None
        return data


class StreamEnvelopeUnwrapper(EnvelopeUnwrapper):
    """
    Strips the spot combined-stream envelope.

    Requires a string "stream" next to "data". When the data is an object,
    the topic's symbol is injected into it as "symbol".
    """

    def _peel(self, value: Any) -> Any:
        if not isinstance(value, dict):
            return None

        topic = value.get(STREAM_KEY)
        data = value.get(DATA_KEY)
        if not isinstance(topic, str) or not _is_container(data):
            return None

        if isinstance(data, dict):
            data[SYMBOL_KEY] = symbol_from_topic(topic)
        return data
