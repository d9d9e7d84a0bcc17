"""
Custom exceptions for binance-stream.

Exception hierarchy:
    StreamError (base)
    ├── TransportError
    │   ├── UrlParseError
    │   ├── TcpConnectError
    │   ├── TlsError
    │   ├── HandshakeError
    │   ├── ReadError
    │   │   └── ReadTimeoutError
    │   └── WriteError
    ├── DecodeError
    ├── DisconnectedError
    ├── HandlerError
    ├── LivenessError
    └── NotConnectedError

Every one of these ends a running event loop. Messages that are valid JSON
but match no known event shape are not errors and never raise.
"""

from typing import Any


class StreamError(Exception):
    """Base exception for all streaming errors."""

    default_message = "Stream error occurred"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"[{self.code}]")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )


# Transport-related errors
class TransportError(StreamError):
    """Base exception for socket and protocol failures."""

    default_message = "Transport error occurred"


class UrlParseError(TransportError):
    """Stream URL could not be parsed."""

    default_message = "Invalid stream URL"


class TcpConnectError(TransportError):
    """TCP connection to the stream host failed."""

    default_message = "TCP connection failed"


class TlsError(TransportError):
    """TLS negotiation with the stream host failed."""

    default_message = "TLS negotiation failed"


class HandshakeError(TransportError):
    """WebSocket upgrade handshake was rejected or interrupted."""

    default_message = "WebSocket handshake failed"


class ReadError(TransportError):
    """Reading the next frame failed."""

    default_message = "Failed to read frame"


class ReadTimeoutError(ReadError):
    """No frame arrived within the read timeout."""

    default_message = "Read timed out"


class WriteError(TransportError):
    """Writing a frame failed."""

    default_message = "Failed to write frame"


# Message errors
class DecodeError(StreamError):
    """Text frame is not valid JSON."""

    default_message = "Malformed stream message"


class DisconnectedError(StreamError):
    """Remote side closed the connection."""

    default_message = "Disconnected"

    def __init__(
        self,
        message: str | None = None,
        close_code: int | None = None,
        close_reason: str = "",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
        self.close_code = close_code
        self.close_reason = close_reason

    def __str__(self) -> str:
        base = super().__str__()
        if self.close_code is None:
            return base
        if self.close_reason:
            return f"{base} (close code {self.close_code}: {self.close_reason})"
        return f"{base} (close code {self.close_code})"


class HandlerError(StreamError):
    """Caller's event handler raised; the original is the __cause__."""

    default_message = "Error on handling stream message"


class LivenessError(StreamError):
    """Connection stopped answering liveness probes."""

    default_message = "Disconnected loop is dead"

    def __init__(
        self,
        message: str | None = None,
        missed_probes: int = 0,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
        self.missed_probes = missed_probes


class NotConnectedError(StreamError):
    """Operation needs an open connection and there is none."""

    default_message = "Not able to close the connection"
