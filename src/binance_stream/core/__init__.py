"""
Core module for binance-stream.

Provides logging utilities, the exception hierarchy and time helpers.
"""

from .exceptions import (
    DecodeError,
    DisconnectedError,
    HandlerError,
    HandshakeError,
    LivenessError,
    NotConnectedError,
    ReadError,
    ReadTimeoutError,
    StreamError,
    TcpConnectError,
    TlsError,
    TransportError,
    UrlParseError,
    WriteError,
)
from .logger import configure_logging, get_logger, setup_logger
from .utils import datetime_to_timestamp, timestamp_to_datetime

__all__ = [
    # Logging
    "setup_logger",
    "get_logger",
    "configure_logging",
    # Exceptions
    "StreamError",
    "TransportError",
    "UrlParseError",
    "TcpConnectError",
    "TlsError",
    "HandshakeError",
    "ReadError",
    "ReadTimeoutError",
    "WriteError",
    "DecodeError",
    "DisconnectedError",
    "HandlerError",
    "LivenessError",
    "NotConnectedError",
    # Utils
    "timestamp_to_datetime",
    "datetime_to_timestamp",
]
