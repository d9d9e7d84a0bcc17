"""
binance-stream: asyncio client for Binance market and user data streams.

Example:
    >>> from binance_stream import BinanceWebSocket
    >>> ws = BinanceWebSocket(print)
    >>> await ws.connect("btcusdt@aggTrade")
    >>> await ws.event_loop(stop_event)
"""

from .config import AppConfig, StreamConfig, apply_logging, load_config
from .core import (
    DecodeError,
    DisconnectedError,
    HandlerError,
    LivenessError,
    NotConnectedError,
    StreamError,
    TransportError,
    configure_logging,
    get_logger,
    setup_logger,
)
from .streams import (
    BinanceFuturesWebSocket,
    BinanceWebSocket,
    EventKind,
    Market,
    SessionState,
    StreamTarget,
    WebsocketEvent,
)

__version__ = "0.1.0"

__all__ = [
    "BinanceWebSocket",
    "BinanceFuturesWebSocket",
    "Market",
    "StreamTarget",
    "SessionState",
    "EventKind",
    "WebsocketEvent",
    "StreamConfig",
    "AppConfig",
    "load_config",
    "apply_logging",
    "configure_logging",
    "setup_logger",
    "get_logger",
    "StreamError",
    "TransportError",
    "DecodeError",
    "DisconnectedError",
    "HandlerError",
    "LivenessError",
    "NotConnectedError",
]
