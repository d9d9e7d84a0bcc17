"""
Tests for combined-stream envelope unwrapping.
"""

import pytest

from binance_stream.streams.envelope import (
    EnvelopeDepthExceeded,
    EnvelopeUnwrapper,
    StreamEnvelopeUnwrapper,
    symbol_from_topic,
)


class TestSymbolFromTopic:
    """Test symbol derivation from topics."""

    @pytest.mark.parametrize(
        "topic, symbol",
        [
            ("btcusdt@ticker", "BTCUSDT"),
            ("bnbbtc@depth20@100ms", "BNBBTC"),
            ("btcusdt_perpetual@continuousKline_1m", "BTCUSDT_PERPETUAL"),
            ("!ticker@arr", "!TICKER"),
            ("listenkey", "LISTENKEY"),
        ],
    )
    def test_first_segment_uppercased(self, topic, symbol):
        assert symbol_from_topic(topic) == symbol


# =============================================================================
# Spot Unwrapper Tests
# =============================================================================


class TestStreamEnvelopeUnwrapper:
    """Test spot envelope unwrapping."""

    @pytest.fixture
    def unwrapper(self) -> StreamEnvelopeUnwrapper:
        return StreamEnvelopeUnwrapper()

    def test_bare_payload_unchanged(self, unwrapper):
        payload = {"e": "trade", "s": "BNBBTC"}
        assert unwrapper.unwrap(payload) == {"e": "trade", "s": "BNBBTC"}

    def test_symbol_injected(self, unwrapper):
        result = unwrapper.unwrap({"stream": "btcusdt@ticker", "data": {"e": "24hrTicker"}})
        assert result == {"e": "24hrTicker", "symbol": "BTCUSDT"}

    def test_injected_symbol_overwrites(self, unwrapper):
        result = unwrapper.unwrap({"stream": "ethbtc@trade", "data": {"symbol": "OTHER"}})
        assert result["symbol"] == "ETHBTC"

    def test_array_data_unwrapped_without_injection(self, unwrapper):
        data = [{"e": "24hrTicker"}]
        assert unwrapper.unwrap({"stream": "!ticker@arr", "data": data}) == [{"e": "24hrTicker"}]

    def test_missing_stream_not_unwrapped(self, unwrapper):
        envelope = {"data": {"e": "trade"}}
        assert unwrapper.unwrap(envelope) is envelope

    def test_non_string_stream_not_unwrapped(self, unwrapper):
        envelope = {"stream": 1, "data": {"e": "trade"}}
        assert unwrapper.unwrap(envelope) is envelope

    @pytest.mark.parametrize("data", ["text", 5, None, True])
    def test_scalar_data_not_unwrapped(self, unwrapper, data):
        envelope = {"stream": "btcusdt@trade", "data": data}
        assert unwrapper.unwrap(envelope) is envelope

    @pytest.mark.parametrize("value", [None, 1, "x", []])
    def test_non_object_values_pass_through(self, unwrapper, value):
        assert unwrapper.unwrap(value) == value

    def test_nested_envelopes_use_innermost_topic(self, unwrapper):
        inner = {"stream": "ethusdt@trade", "data": {"e": "trade"}}
        result = unwrapper.unwrap({"stream": "btcusdt@trade", "data": inner})
        assert result == {"e": "trade", "symbol": "ETHUSDT"}


# =============================================================================
# Futures Unwrapper Tests
# =============================================================================


class TestEnvelopeUnwrapper:
    """Test futures envelope unwrapping."""

    @pytest.fixture
    def unwrapper(self) -> EnvelopeUnwrapper:
        return EnvelopeUnwrapper()

    def test_data_without_stream(self, unwrapper):
        assert unwrapper.unwrap({"data": {"e": "markPriceUpdate"}}) == {"e": "markPriceUpdate"}

    def test_no_symbol_injected(self, unwrapper):
        result = unwrapper.unwrap({"stream": "btcusdt@aggTrade", "data": {"e": "aggTrade"}})
        assert result == {"e": "aggTrade"}

    def test_array_data(self, unwrapper):
        assert unwrapper.unwrap({"data": [1, 2]}) == [1, 2]

    def test_scalar_data_not_unwrapped(self, unwrapper):
        envelope = {"data": "x"}
        assert unwrapper.unwrap(envelope) is envelope


# =============================================================================
# Depth Limit Tests
# =============================================================================


def _nest(depth: int, payload=None):
    value = payload if payload is not None else {"e": "trade"}
    for _ in range(depth):
        value = {"stream": "btcusdt@trade", "data": value}
    return value


class TestEnvelopeDepth:
    """Test the nesting limit."""

    @pytest.mark.parametrize("unwrapper_cls", [EnvelopeUnwrapper, StreamEnvelopeUnwrapper])
    def test_at_limit_unwrapped(self, unwrapper_cls):
        result = unwrapper_cls(max_depth=3).unwrap(_nest(3))
        assert result["e"] == "trade"

    @pytest.mark.parametrize("unwrapper_cls", [EnvelopeUnwrapper, StreamEnvelopeUnwrapper])
    def test_past_limit_raises(self, unwrapper_cls):
        with pytest.raises(EnvelopeDepthExceeded):
            unwrapper_cls(max_depth=3).unwrap(_nest(4))

    def test_default_limit(self):
        unwrapper = EnvelopeUnwrapper()
        assert unwrapper.unwrap(_nest(8))["e"] == "trade"
        with pytest.raises(EnvelopeDepthExceeded):
            unwrapper.unwrap(_nest(9))

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            EnvelopeUnwrapper(max_depth=0)
