# Binance stream module
from .classifier import FUTURES_SHAPES, SPOT_SHAPES, EventClassifier, EventShape
from .constants import (
    DEFAULT_MAX_ENVELOPE_DEPTH,
    DEFAULT_READ_TIMEOUT,
    FUTURES_LIVENESS_THRESHOLD,
    SPOT_LIVENESS_THRESHOLD,
    WS_BASE_URLS,
    WS_TESTNET_BASE_URLS,
    Market,
)
from .endpoints import AddressingMode, StreamTarget, base_url_for
from .envelope import EnvelopeDepthExceeded, EnvelopeUnwrapper, StreamEnvelopeUnwrapper
from .events import EventKind, WebsocketEvent
from .session import (
    BaseWebSocket,
    BinanceFuturesWebSocket,
    BinanceWebSocket,
    EventHandler,
    SessionState,
    StopFlag,
)
from .topics import ContractType, KlineInterval
from .transport import FrameKind, RawFrame, WebSocketConnection, open_connection

__all__ = [
    # Sessions
    "BaseWebSocket",
    "BinanceWebSocket",
    "BinanceFuturesWebSocket",
    "EventHandler",
    "SessionState",
    "StopFlag",
    # Events
    "EventKind",
    "WebsocketEvent",
    # Classification
    "EventClassifier",
    "EventShape",
    "SPOT_SHAPES",
    "FUTURES_SHAPES",
    # Envelopes
    "EnvelopeUnwrapper",
    "StreamEnvelopeUnwrapper",
    "EnvelopeDepthExceeded",
    # Endpoints
    "Market",
    "AddressingMode",
    "StreamTarget",
    "base_url_for",
    "WS_BASE_URLS",
    "WS_TESTNET_BASE_URLS",
    # Topics
    "KlineInterval",
    "ContractType",
    # Transport
    "FrameKind",
    "RawFrame",
    "WebSocketConnection",
    "open_connection",
    # Defaults
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_MAX_ENVELOPE_DEPTH",
    "SPOT_LIVENESS_THRESHOLD",
    "FUTURES_LIVENESS_THRESHOLD",
]
