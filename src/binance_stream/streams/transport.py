"""
WebSocket transport.

Opens a stream connection in separate stages (URL parse, TCP connect, TLS,
upgrade handshake) so each failure surfaces as its own error, then exposes
the connection frame by frame. Control frames (ping, pong, close) are handed
to the caller instead of being answered behind its back, which lets the
session loop run its own liveness watchdog.

The WebSocket protocol itself is websockets' sans-I/O ClientProtocol driven
over asyncio streams.
"""

import asyncio
import ssl
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from websockets.client import ClientProtocol
from websockets.exceptions import InvalidState, InvalidURI
from websockets.frames import Close, Frame, Opcode
from websockets.http11 import Response
from websockets.protocol import State
from websockets.uri import parse_uri

from binance_stream.core import (
    HandshakeError,
    ReadError,
    ReadTimeoutError,
    TcpConnectError,
    TlsError,
    UrlParseError,
    WriteError,
    get_logger,
)

from .constants import (
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_OPEN_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    NORMAL_CLOSURE,
)

logger = get_logger(__name__)

READ_CHUNK_SIZE = 64 * 1024


# =============================================================================
# Frames
# =============================================================================


class FrameKind(str, Enum):
    """Kind of a transport-level message unit."""

    TEXT = "TEXT"
    BINARY = "BINARY"
    PING = "PING"
    PONG = "PONG"
    CLOSE = "CLOSE"


@dataclass(frozen=True)
class RawFrame:
    """One complete message or control frame read from the connection."""

    kind: FrameKind
    payload: bytes = b""
    close_code: Optional[int] = None
    close_reason: str = ""

    @property
    def text(self) -> str:
        """Payload decoded as UTF-8."""
        return self.payload.decode("utf-8")

    @classmethod
    def text_frame(cls, text: str) -> "RawFrame":
        return cls(FrameKind.TEXT, text.encode("utf-8"))

    @classmethod
    def close_frame(cls, code: Optional[int] = None, reason: str = "") -> "RawFrame":
        return cls(FrameKind.CLOSE, b"", code, reason)


# =============================================================================
# Connection
# =============================================================================


class WebSocketConnection:
    """
    Open, handshake-complete WebSocket connection.

    Owned by exactly one session. Fragmented messages are reassembled so
    recv() always returns whole TEXT/BINARY messages.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        protocol: ClientProtocol,
        response: Optional[Response] = None,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        pending_events: Iterable = (),
    ):
        self._reader = reader
        self._writer = writer
        self._protocol = protocol
        self.response = response
        self.read_timeout = read_timeout

        self._frames: deque[RawFrame] = deque()
        self._fragment_kind: Optional[FrameKind] = None
        self._fragments: list[bytes] = []
        self._eof = False

        # Pongs the protocol queued for parsed pings not yet answered via pong()
        self._queued_pongs = 0

        # Frames that arrived in the same read as the handshake response
        self._queue_events(pending_events)

    @property
    def is_open(self) -> bool:
        """True until a close frame has been sent or received."""
        return self._protocol.state is State.OPEN

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    async def recv(self) -> RawFrame:
        """
        Read the next frame.

        Waits at most read_timeout seconds for data from the socket.

        Returns:
            Next RawFrame

        Raises:
            ReadTimeoutError: If nothing arrived within read_timeout
            ReadError: If the socket failed, hit EOF or carried invalid frames
        """
        while not self._frames:
            await self._read_more()
        return self._frames.popleft()

    async def _read_more(self) -> None:
        if self._eof:
            raise ReadError("Connection closed by peer")

        try:
            data = await asyncio.wait_for(
                self._reader.read(READ_CHUNK_SIZE),
                timeout=self.read_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ReadTimeoutError(f"No data within {self.read_timeout}s") from e
        except OSError as e:
            raise ReadError(f"Socket read failed: {e}") from e

        if data:
            self._protocol.receive_data(data)
        else:
            self._eof = True
            self._protocol.receive_eof()

        self._queue_events(self._protocol.events_received())
        if self._frames:
            return

        if self._eof:
            raise ReadError("Connection closed by peer")

        parser_exc = self._protocol.parser_exc
        if parser_exc is not None:
            raise ReadError(f"Invalid frame: {parser_exc}") from parser_exc

    def _queue_events(self, events: Iterable) -> None:
        for event in events:
            if isinstance(event, Frame):
                self._queue_frame(event)

    def _queue_frame(self, frame: Frame) -> None:
        opcode = frame.opcode
        data = bytes(frame.data)

        if opcode is Opcode.TEXT or opcode is Opcode.BINARY:
            kind = FrameKind.TEXT if opcode is Opcode.TEXT else FrameKind.BINARY
            if frame.fin:
                self._frames.append(RawFrame(kind, data))
            else:
                self._fragment_kind = kind
                self._fragments = [data]

        elif opcode is Opcode.CONT:
            self._fragments.append(data)
            if frame.fin and self._fragment_kind is not None:
                self._frames.append(RawFrame(self._fragment_kind, b"".join(self._fragments)))
                self._fragment_kind = None
                self._fragments = []

        elif opcode is Opcode.PING:
            self._queued_pongs += 1
            self._frames.append(RawFrame(FrameKind.PING, data))

        elif opcode is Opcode.PONG:
            self._frames.append(RawFrame(FrameKind.PONG, data))

        elif opcode is Opcode.CLOSE:
            close = Close.parse(data)
            self._frames.append(RawFrame(FrameKind.CLOSE, data, int(close.code), close.reason))

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    async def ping(self, payload: bytes = b"") -> None:
        """
        Send a ping frame.

        Raises:
            WriteError: If the connection is closing or the write failed
        """
        try:
            self._protocol.send_ping(payload)
        except InvalidState as e:
            raise WriteError(f"Cannot send ping: {e}") from e
        await self._flush()

    async def pong(self, payload: bytes = b"") -> None:
        """
        Answer a ping frame.

        The protocol queues one pong reply for every ping it parses. Each
        call consumes one of those and writes out whatever is queued (an
        earlier call may already have written it); a fresh pong is only
        built when no parsed ping is waiting for its answer.

        Raises:
            WriteError: If the connection is closing or the write failed
        """
        if self._queued_pongs:
            self._queued_pongs -= 1
        else:
            try:
                self._protocol.send_pong(payload)
            except InvalidState as e:
                raise WriteError(f"Cannot send pong: {e}") from e
        await self._flush()

    async def flush(self) -> None:
        """
        Write frames the protocol queued on its own, such as the reply to a
        close frame.

        Raises:
            WriteError: If the write failed
        """
        await self._flush()

    async def close(self, code: int = NORMAL_CLOSURE, reason: str = "") -> None:
        """
        Send a close frame and shut the socket.

        Raises:
            WriteError: If the close frame could not be written
        """
        try:
            if self._protocol.state is State.OPEN:
                self._protocol.send_close(code, reason)
            await self._flush()
        finally:
            self._writer.close()
            try:
                await asyncio.wait_for(self._writer.wait_closed(), timeout=self.read_timeout)
            except Exception as e:
                logger.debug(f"Error closing socket: {e}")

    async def _flush(self) -> None:
        await self._write(self._protocol.data_to_send())

    async def _write(self, chunks: list[bytes]) -> None:
        try:
            for chunk in chunks:
                if chunk:
                    self._writer.write(chunk)
                elif self._writer.can_write_eof():
                    # Empty chunk is the protocol's request to half-close
                    self._writer.write_eof()
            await self._writer.drain()
        except OSError as e:
            raise WriteError(f"Socket write failed: {e}") from e


# =============================================================================
# Connector
# =============================================================================


async def _handshake(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    protocol: ClientProtocol,
) -> tuple[Response, list]:
    """Run the upgrade handshake; return the response and any early frames."""
    protocol.send_request(protocol.connect())
    for chunk in protocol.data_to_send():
        if chunk:
            writer.write(chunk)
    await writer.drain()

    while True:
        data = await reader.read(READ_CHUNK_SIZE)
        if data:
            protocol.receive_data(data)
        else:
            protocol.receive_eof()

        events = protocol.events_received()
        if protocol.handshake_exc is not None:
            raise HandshakeError(
                f"Handshake rejected: {protocol.handshake_exc}"
            ) from protocol.handshake_exc

        if events and isinstance(events[0], Response):
            return events[0], events[1:]

        if not data:
            raise HandshakeError("Connection closed during handshake")


async def open_connection(
    url: str,
    *,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
    open_timeout: float = DEFAULT_OPEN_TIMEOUT,
    ssl_context: Optional[ssl.SSLContext] = None,
    max_size: Optional[int] = DEFAULT_MAX_MESSAGE_SIZE,
) -> WebSocketConnection:
    """
    Connect to a stream URL.

    Args:
        url: ws:// or wss:// URL including the topic path/query
        read_timeout: Seconds each frame read may wait
        open_timeout: Seconds allowed for each connect stage
        ssl_context: TLS context, defaults to the system trust store
        max_size: Maximum incoming message size in bytes (None for no limit)

    Returns:
        Open WebSocketConnection

    Raises:
        UrlParseError: URL is not a valid ws/wss URL
        TcpConnectError: Host unreachable or connection refused
        TlsError: TLS negotiation failed
        HandshakeError: Server rejected or broke off the upgrade
    """
    try:
        wsuri = parse_uri(url)
    except InvalidURI as e:
        raise UrlParseError(f"Invalid stream URL: {url}", details={"url": url}) from e

    host, port = wsuri.host, wsuri.port
    logger.debug(f"Opening TCP connection to {host}:{port}")

    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=open_timeout,
        )
    except (OSError, asyncio.TimeoutError) as e:
        raise TcpConnectError(
            f"Cannot connect to {host}:{port}: {e!r}",
            details={"host": host, "port": port},
        ) from e

    if wsuri.secure:
        context = ssl_context or ssl.create_default_context()
        try:
            await asyncio.wait_for(
                writer.start_tls(context, server_hostname=host),
                timeout=open_timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            writer.close()
            raise TlsError(
                f"TLS negotiation with {host} failed: {e!r}",
                details={"host": host, "port": port},
            ) from e

    protocol = ClientProtocol(wsuri, max_size=max_size)
    try:
        response, early_events = await asyncio.wait_for(
            _handshake(reader, writer, protocol),
            timeout=open_timeout,
        )
    except HandshakeError:
        writer.close()
        raise
    except (OSError, asyncio.TimeoutError) as e:
        writer.close()
        raise HandshakeError(f"Handshake with {host} failed: {e!r}") from e

    logger.debug(f"WebSocket handshake with {host} complete (status {response.status_code})")

    return WebSocketConnection(
        reader,
        writer,
        protocol,
        response=response,
        read_timeout=read_timeout,
        pending_events=early_events,
    )
