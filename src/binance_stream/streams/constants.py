"""
Binance WebSocket stream constants.
"""

from enum import Enum


# =============================================================================
# Markets
# =============================================================================


class Market(str, Enum):
    """Product line served by a stream host."""

    SPOT = "SPOT"
    USDM = "USDM"  # USD-margined futures
    COINM = "COINM"  # Coin-margined futures
    VANILLA = "VANILLA"  # Vanilla options


FUTURES_MARKETS = frozenset({Market.USDM, Market.COINM, Market.VANILLA})


# =============================================================================
# Base URLs
# =============================================================================

SPOT_WS_BASE_URL = "wss://stream.binance.com:9443"
SPOT_WS_TESTNET_BASE_URL = "wss://testnet.binance.vision"

USDM_WS_BASE_URL = "wss://fstream.binance.com"
USDM_WS_TESTNET_BASE_URL = "wss://stream.binancefuture.com"

COINM_WS_BASE_URL = "wss://dstream.binance.com"
COINM_WS_TESTNET_BASE_URL = "wss://dstream.binancefuture.com"

VANILLA_WS_BASE_URL = "wss://vstream.binance.com"

WS_BASE_URLS = {
    Market.SPOT: SPOT_WS_BASE_URL,
    Market.USDM: USDM_WS_BASE_URL,
    Market.COINM: COINM_WS_BASE_URL,
    Market.VANILLA: VANILLA_WS_BASE_URL,
}

# Vanilla options have no public testnet stream
WS_TESTNET_BASE_URLS = {
    Market.SPOT: SPOT_WS_TESTNET_BASE_URL,
    Market.USDM: USDM_WS_TESTNET_BASE_URL,
    Market.COINM: COINM_WS_TESTNET_BASE_URL,
}

# Path segments of the two URL shapes
SINGLE_STREAM_PATH = "/ws/"
MULTI_STREAM_PATH = "/stream?streams="
MULTI_STREAM_SEPARATOR = "/"


# =============================================================================
# Session Defaults
# =============================================================================

DEFAULT_READ_TIMEOUT = 10.0  # seconds per frame read
DEFAULT_OPEN_TIMEOUT = 10.0  # seconds per connect stage
DEFAULT_MAX_MESSAGE_SIZE = 4 * 1024 * 1024  # all-market arrays run to hundreds of KB
DEFAULT_MAX_ENVELOPE_DEPTH = 8

# Consecutive unanswered probes before the loop is declared dead
SPOT_LIVENESS_THRESHOLD = 3
FUTURES_LIVENESS_THRESHOLD = 10

NORMAL_CLOSURE = 1000
