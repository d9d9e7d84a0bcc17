"""
Binance WebSocket sessions.

A session owns one stream connection and runs the receive loop: text frames
are unwrapped, classified and handed to the caller's handler, pings are
answered, and read timeouts drive a ping/pong liveness watchdog. There is no
automatic reconnection; every loop failure raises, and the caller decides
whether to connect again.
"""

import asyncio
import json
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional, Protocol, Union

from binance_stream.config.models import StreamConfig
from binance_stream.core import (
    DecodeError,
    DisconnectedError,
    HandlerError,
    LivenessError,
    NotConnectedError,
    ReadError,
    TransportError,
    WriteError,
    get_logger,
)

from .classifier import FUTURES_SHAPES, SPOT_SHAPES, EventClassifier
from .constants import (
    FUTURES_LIVENESS_THRESHOLD,
    FUTURES_MARKETS,
    SPOT_LIVENESS_THRESHOLD,
    Market,
)
from .endpoints import StreamTarget
from .envelope import (
    EnvelopeDepthExceeded,
    EnvelopeUnwrapper,
    StreamEnvelopeUnwrapper,
)
from .events import WebsocketEvent
from .transport import FrameKind, RawFrame, WebSocketConnection, open_connection

logger = get_logger(__name__)

EventHandler = Callable[[WebsocketEvent], Union[None, Awaitable[None]]]


class StopFlag(Protocol):
    """Cooperative stop signal, e.g. threading.Event or asyncio.Event."""

    def is_set(self) -> bool:
        ...


class SessionState(str, Enum):
    """Lifecycle of a session."""

    IDLE = "IDLE"  # no connection
    CONNECTED = "CONNECTED"
    TERMINATED = "TERMINATED"  # loop exited; reconnect before reading again


class BaseWebSocket:
    """
    Shared session machinery for the spot and futures streams.

    Subclasses pick the market, the envelope unwrapper, the event shapes and
    the default liveness threshold.
    """

    default_liveness_threshold = SPOT_LIVENESS_THRESHOLD

    def __init__(
        self,
        handler: EventHandler,
        market: Market,
        classifier: EventClassifier,
        unwrapper: EnvelopeUnwrapper,
        config: Optional[StreamConfig] = None,
    ):
        self._handler = handler
        self._market = market
        self._classifier = classifier
        self._unwrapper = unwrapper
        self._config = config or StreamConfig()

        self._connection: Optional[WebSocketConnection] = None
        self._state = SessionState.IDLE

        # Consecutive unanswered liveness probes
        self._ping_counter = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def market(self) -> Market:
        """Market this session connects to."""
        return self._market

    @property
    def config(self) -> StreamConfig:
        """Session configuration."""
        return self._config

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if a connection is held."""
        return self._connection is not None

    @property
    def ping_counter(self) -> int:
        """Consecutive read failures since the last pong or text frame."""
        return self._ping_counter

    @property
    def liveness_threshold(self) -> int:
        """Unanswered probes after which the loop gives up."""
        return self._config.liveness_threshold or self.default_liveness_threshold

    # =========================================================================
    # Connection Management
    # =========================================================================

    async def connect(self, topic: str) -> None:
        """
        Connect to a single topic on the market's default host.

        Args:
            topic: Stream name (e.g., "btcusdt@ticker")
        """
        await self.connect_target(StreamTarget.default(topic))

    async def connect_multiple_streams(self, topics: Iterable[str]) -> None:
        """
        Connect to several topics on one combined stream.

        Args:
            topics: Stream names, joined with "/" in the URL
        """
        await self.connect_target(StreamTarget.multi_stream(topics))

    async def connect_custom(self, base_url: str, topics: Union[str, Iterable[str]]) -> None:
        """
        Connect to one or more topics on a caller-supplied base URL.

        Args:
            base_url: Scheme and host, e.g. "wss://stream.binance.com:443"
            topics: One stream name or several
        """
        await self.connect_target(StreamTarget.custom(base_url, topics))

    async def connect_with_config(self, topic: str, config: StreamConfig) -> None:
        """
        Connect to a single topic using the endpoint from a configuration.

        Falls back to the default host when the configuration names no
        endpoint for this market.
        """
        endpoint = self._endpoint_from(config)
        if endpoint:
            target = StreamTarget.custom(endpoint, topic)
        else:
            target = StreamTarget.default(topic)
        await self._open(target.url(self._market, config.testnet), config)

    async def connect_target(self, target: StreamTarget) -> None:
        """
        Connect to a resolved target.

        Any connection already held is replaced without being closed; call
        disconnect() first when reusing a session.

        Raises:
            TransportError: If any connect stage fails
        """
        await self._open(target.url(self._market, self._config.testnet), self._config)

    async def _open(self, url: str, config: StreamConfig) -> None:
        logger.info(f"Connecting to {url}")
        try:
            connection = await open_connection(
                url,
                read_timeout=config.read_timeout,
                open_timeout=config.open_timeout,
                max_size=config.max_message_size,
            )
        except TransportError as e:
            logger.error(f"Connection failed: {e}")
            raise

        if self._connection is not None:
            logger.warning("Replacing an open connection without closing it")

        self._connection = connection
        self._state = SessionState.CONNECTED
        self._ping_counter = 0
        logger.info("WebSocket connected")

    def _endpoint_from(self, config: StreamConfig) -> Optional[str]:
        return config.ws_endpoint

    async def disconnect(self) -> None:
        """
        Send a close frame and drop the connection.

        Raises:
            NotConnectedError: If there is no connection to close
        """
        if self._connection is None:
            raise NotConnectedError("Not able to close the connection")

        connection = self._connection
        self._connection = None
        self._state = SessionState.IDLE

        try:
            await connection.close()
        except TransportError as e:
            logger.debug(f"Error closing WebSocket: {e}")

        logger.info("WebSocket disconnected")

    # =========================================================================
    # Event Loop
    # =========================================================================

    async def event_loop(self, stop: StopFlag) -> None:
        """
        Read and dispatch frames until stopped or failed.

        The stop flag is checked once per iteration, so stopping takes effect
        after the frame being processed (or the read timeout) completes.

        Args:
            stop: Cooperative stop signal

        Returns:
            When the stop flag was observed

        Raises:
            NotConnectedError: If the session has no connection, or its last
                loop already terminated and it was not reconnected since
            DecodeError: A text frame was not valid JSON
            HandlerError: The handler raised
            DisconnectedError: The server sent a close frame
            LivenessError: Probes went unanswered or could not be sent
            WriteError: A pong could not be written (when configured fatal)
        """
        connection = self._connection
        if connection is None:
            raise NotConnectedError("Event loop needs an open connection")
        if self._state is not SessionState.CONNECTED:
            raise NotConnectedError("Session terminated; reconnect before running the event loop again")

        self._ping_counter = 0
        try:
            while not stop.is_set():
                try:
                    frame = await connection.recv()
                except ReadError as e:
                    await self._probe(connection, e)
                    continue

                await self._process_frame(connection, frame)

            logger.info("Event loop stopped by caller")

        except Exception as e:
            logger.error(f"Event loop terminated: {e}")
            raise

        finally:
            self._state = SessionState.TERMINATED

    async def _process_frame(self, connection: WebSocketConnection, frame: RawFrame) -> None:
        if frame.kind == FrameKind.TEXT:
            self._ping_counter = 0
            await self.handle_message(frame.payload)

        elif frame.kind == FrameKind.PING:
            try:
                await connection.pong(frame.payload)
            except WriteError as e:
                if self._config.pong_failure_fatal:
                    raise
                logger.warning(f"Failed to answer ping: {e}")

        elif frame.kind == FrameKind.PONG:
            self._ping_counter = 0

        elif frame.kind == FrameKind.BINARY:
            logger.debug(f"Ignoring binary frame ({len(frame.payload)} bytes)")

        elif frame.kind == FrameKind.CLOSE:
            try:
                await connection.flush()
            except TransportError as e:
                logger.debug(f"Error answering close frame: {e}")
            raise DisconnectedError(
                close_code=frame.close_code,
                close_reason=frame.close_reason,
            )

    async def _probe(self, connection: WebSocketConnection, error: ReadError) -> None:
        """Send a liveness ping after a failed read and count it."""
        try:
            await connection.ping()
        except WriteError as e:
            raise LivenessError(
                f"Disconnected loop is dead: {e} (after read error: {error})",
                missed_probes=self._ping_counter,
            ) from e

        self._ping_counter += 1
        threshold = self.liveness_threshold

        if self._ping_counter >= threshold:
            raise LivenessError(
                f"Disconnected loop is dead: {error}",
                missed_probes=self._ping_counter,
            ) from error

        if self._ping_counter > 1:
            logger.warning(f"Read failed ({self._ping_counter}/{threshold}), probing connection: {error}")
        else:
            logger.debug(f"Read failed ({self._ping_counter}/{threshold}), probing connection: {error}")

    # =========================================================================
    # Message Processing
    # =========================================================================

    async def handle_message(self, raw_message: Union[str, bytes]) -> Optional[WebsocketEvent]:
        """
        Unwrap, classify and dispatch one text message.

        Also the entry point for injecting messages without a socket.

        Args:
            raw_message: Raw JSON text, or the UTF-8 bytes of a text frame

        Returns:
            The event passed to the handler, or None if the message was dropped

        Raises:
            DecodeError: If the message is not valid UTF-8 JSON
            HandlerError: If the handler raised
        """
        try:
            if isinstance(raw_message, bytes):
                raw_message = raw_message.decode("utf-8")
            value = json.loads(raw_message)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Malformed stream message: {e}") from e

        try:
            payload = self._unwrapper.unwrap(value)
        except EnvelopeDepthExceeded as e:
            logger.debug(f"Dropping message: {e}")
            return None

        event = self._classifier.classify(payload)
        if event is None:
            logger.debug(f"Dropping unrecognized message: {_preview(raw_message)}")
            return None

        await self._dispatch(event)
        return event

    async def _dispatch(self, event: WebsocketEvent) -> None:
        """Invoke the handler, handling both sync and async callables."""
        try:
            result = self._handler(event)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            raise HandlerError(
                f"Error on handling stream message: {e}",
                details={"kind": event.kind.value},
            ) from e


def _preview(raw_message: Any, limit: int = 120) -> str:
    text = raw_message if isinstance(raw_message, str) else repr(raw_message)
    return text if len(text) <= limit else f"{text[:limit]}..."


class BinanceWebSocket(BaseWebSocket):
    """
    Spot market stream session.

    Combined-stream envelopes have the topic's symbol injected into the
    event as "symbol" (exposed as stream_symbol on the payload model).

    Example:
        >>> events = []
        >>> ws = BinanceWebSocket(events.append)
        >>> await ws.connect("btcusdt@trade")
        >>> stop = threading.Event()
        >>> await ws.event_loop(stop)
    """

    default_liveness_threshold = SPOT_LIVENESS_THRESHOLD

    def __init__(self, handler: EventHandler, config: Optional[StreamConfig] = None):
        config = config or StreamConfig()
        super().__init__(
            handler,
            Market.SPOT,
            EventClassifier(SPOT_SHAPES),
            StreamEnvelopeUnwrapper(config.max_envelope_depth),
            config,
        )


class BinanceFuturesWebSocket(BaseWebSocket):
    """
    Futures market stream session (USD-M, COIN-M or vanilla options).

    Example:
        >>> ws = BinanceFuturesWebSocket(on_event, market=Market.COINM)
        >>> await ws.connect_multiple_streams(["btcusd_perp@markPrice", "btcusd_perp@aggTrade"])
    """

    default_liveness_threshold = FUTURES_LIVENESS_THRESHOLD

    def __init__(
        self,
        handler: EventHandler,
        market: Market = Market.USDM,
        config: Optional[StreamConfig] = None,
    ):
        if market not in FUTURES_MARKETS:
            raise ValueError(f"{market.value} is not a futures market")

        config = config or StreamConfig()
        super().__init__(
            handler,
            market,
            EventClassifier(FUTURES_SHAPES),
            EnvelopeUnwrapper(config.max_envelope_depth),
            config,
        )

    def _endpoint_from(self, config: StreamConfig) -> Optional[str]:
        return config.futures_ws_endpoint
