"""
Stream target resolution.

A StreamTarget describes where a session should connect: the default host
with one topic, the combined-stream host with several topics, or a
caller-supplied base URL. It resolves to the final URL per market.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .constants import (
    MULTI_STREAM_PATH,
    MULTI_STREAM_SEPARATOR,
    SINGLE_STREAM_PATH,
    WS_BASE_URLS,
    WS_TESTNET_BASE_URLS,
    Market,
)


class AddressingMode(str, Enum):
    """How the stream URL is built."""

    DEFAULT = "DEFAULT"
    MULTI_STREAM = "MULTI_STREAM"
    CUSTOM = "CUSTOM"


def base_url_for(market: Market, testnet: bool = False) -> str:
    """
    Get the fixed stream host for a market.

    Args:
        market: Product line
        testnet: Use the testnet host if True

    Returns:
        Base URL without trailing slash

    Raises:
        ValueError: If the market has no testnet host
    """
    if not testnet:
        return WS_BASE_URLS[market]
    try:
        return WS_TESTNET_BASE_URLS[market]
    except KeyError:
        raise ValueError(f"No testnet stream host for market {market.value}") from None


def single_stream_url(base_url: str, topic: str) -> str:
    """Build `<base>/ws/<topic>`."""
    return f"{base_url.rstrip('/')}{SINGLE_STREAM_PATH}{topic}"


def multi_stream_url(base_url: str, topics: Iterable[str]) -> str:
    """Build `<base>/stream?streams=<t1>/<t2>/...`."""
    joined = MULTI_STREAM_SEPARATOR.join(topics)
    return f"{base_url.rstrip('/')}{MULTI_STREAM_PATH}{joined}"


@dataclass(frozen=True)
class StreamTarget:
    """
    Resolved connection destination.

    Built per connect call and not retained by the session.

    Example:
        >>> StreamTarget.default("btcusdt@ticker").url(Market.SPOT)
        'wss://stream.binance.com:9443/ws/btcusdt@ticker'
        >>> StreamTarget.multi_stream(["btcusdt@ticker", "ethusdt@ticker"]).url(Market.USDM)
        'wss://fstream.binance.com/stream?streams=btcusdt@ticker/ethusdt@ticker'
    """

    mode: AddressingMode
    topics: tuple[str, ...]
    base_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.topics:
            raise ValueError("At least one topic is required")
        if any(not topic for topic in self.topics):
            raise ValueError("Topics must be non-empty strings")
        if self.mode == AddressingMode.DEFAULT and len(self.topics) != 1:
            raise ValueError("Default addressing takes exactly one topic")
        if self.mode == AddressingMode.CUSTOM and not self.base_url:
            raise ValueError("Custom addressing requires a base URL")

    @classmethod
    def default(cls, topic: str) -> "StreamTarget":
        """Single topic on the market's default host."""
        return cls(AddressingMode.DEFAULT, (topic,))

    @classmethod
    def multi_stream(cls, topics: Iterable[str]) -> "StreamTarget":
        """Several topics combined on the market's default host."""
        return cls(AddressingMode.MULTI_STREAM, tuple(topics))

    @classmethod
    def custom(cls, base_url: str, topics: str | Iterable[str]) -> "StreamTarget":
        """One or more topics on a caller-supplied base URL."""
        if isinstance(topics, str):
            topics = (topics,)
        return cls(AddressingMode.CUSTOM, tuple(topics), base_url)

    @property
    def is_combined(self) -> bool:
        """True if the URL uses the combined-stream shape."""
        if self.mode == AddressingMode.MULTI_STREAM:
            return True
        return self.mode == AddressingMode.CUSTOM and len(self.topics) > 1

    def url(self, market: Market = Market.SPOT, testnet: bool = False) -> str:
        """
        Resolve to the final stream URL.

        Args:
            market: Product line selecting the default host
            testnet: Use testnet hosts (ignored for custom base URLs)

        Returns:
            Full wss:// URL
        """
        if self.mode == AddressingMode.CUSTOM:
            base = self.base_url
        else:
            base = base_url_for(market, testnet)

        if self.is_combined:
            return multi_stream_url(base, self.topics)
        return single_stream_url(base, self.topics[0])
