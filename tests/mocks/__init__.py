# Mock classes for testing
"""Scripted connection doubles for session tests."""

from .connection_mock import (
    MockConnection,
    attach_connection,
    ping_frame,
    pong_frame,
    text_frame,
)

__all__ = [
    "MockConnection",
    "attach_connection",
    "text_frame",
    "ping_frame",
    "pong_frame",
]
