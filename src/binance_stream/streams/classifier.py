"""
Event classification.

Decodes an unwrapped JSON value against an ordered list of known payload
shapes. The first shape that validates wins. Shapes declare the "e" event
types they accept, so most messages are tried against one or two shapes
instead of the whole list.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .events import (
    AccountUpdateEvent,
    AggrTradesEvent,
    BalanceUpdateEvent,
    BookTickerEvent,
    ContinuousKlineEvent,
    DayTickerEvent,
    DepthOrderBookEvent,
    EventKind,
    FuturesAccountUpdateEvent,
    FuturesOrderTradeEvent,
    IndexKlineEvent,
    IndexPriceEvent,
    KlineEvent,
    LiquidationEvent,
    MarkPriceEvent,
    MiniTickerEvent,
    OrderBook,
    OrderTradeEvent,
    TradeEvent,
    UserDataStreamExpiredEvent,
    WebsocketEvent,
)

EVENT_TYPE_KEY = "e"


@dataclass(frozen=True)
class EventShape:
    """
    One member of the closed set of decodable payloads.

    Attributes:
        kind: Variant produced on a match
        annotation: Model class, or list[Model] for array payloads
        event_types: "e" values this shape accepts; empty if the payload
                     has no event type field
    """

    kind: EventKind
    annotation: Any
    event_types: frozenset[str] = frozenset()
    adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "adapter", TypeAdapter(self.annotation))

    def decode(self, value: Any) -> Any:
        """Validate value against this shape, raising ValidationError on mismatch."""
        return self.adapter.validate_python(value)


def shape(kind: EventKind, annotation: Any, *event_types: str) -> EventShape:
    """Build an EventShape."""
    return EventShape(kind, annotation, frozenset(event_types))


def probe_event_type(value: Any) -> Optional[str]:
    """
    Read the "e" field of an object, or of the first element of an array.

    Returns:
        The event type string, or None if there is none
    """
    if isinstance(value, list):
        if not value:
            return None
        value = value[0]
    if isinstance(value, dict):
        event_type = value.get(EVENT_TYPE_KEY)
        if isinstance(event_type, str):
            return event_type
    return None


class EventClassifier:
    """
    Ordered untagged-union decoder.

    Example:
        >>> classifier = EventClassifier(SPOT_SHAPES)
        >>> event = classifier.classify({"e": "trade", ...})
        >>> event.kind
        <EventKind.TRADE: 'TRADE'>
    """

    def __init__(self, shapes: Sequence[EventShape]):
        if not shapes:
            raise ValueError("At least one event shape is required")
        self._shapes = tuple(shapes)

        # event type -> candidate shapes, in declaration order
        self._by_event_type: dict[str, tuple[EventShape, ...]] = {}
        for candidate in self._shapes:
            for event_type in candidate.event_types:
                existing = self._by_event_type.get(event_type, ())
                self._by_event_type[event_type] = existing + (candidate,)

    @property
    def shapes(self) -> tuple[EventShape, ...]:
        """Shapes in trial order."""
        return self._shapes

    def candidates(self, value: Any) -> tuple[EventShape, ...]:
        """Shapes worth trying for value, in trial order."""
        event_type = probe_event_type(value)
        if event_type is None:
            return self._shapes
        return self._by_event_type.get(event_type, self._shapes)

    def classify(self, value: Any) -> Optional[WebsocketEvent]:
        """
        Decode value into an event variant.

        Args:
            value: Unwrapped JSON value

        Returns:
            WebsocketEvent for the first matching shape, None if no shape matches
        """
        for candidate in self.candidates(value):
            try:
                data = candidate.decode(value)
            except ValidationError:
                continue
            return WebsocketEvent(kind=candidate.kind, data=data)
        return None


# =============================================================================
# Shape Lists
# =============================================================================

SPOT_SHAPES: tuple[EventShape, ...] = (
    shape(EventKind.DAY_TICKER_ALL, list[DayTickerEvent], "24hrTicker"),
    shape(EventKind.BALANCE_UPDATE, BalanceUpdateEvent, "balanceUpdate"),
    shape(EventKind.DAY_TICKER, DayTickerEvent, "24hrTicker"),
    shape(EventKind.BOOK_TICKER, BookTickerEvent, "bookTicker"),
    shape(EventKind.ACCOUNT_UPDATE, AccountUpdateEvent, "outboundAccountPosition"),
    shape(EventKind.ORDER_TRADE, OrderTradeEvent, "executionReport"),
    shape(EventKind.AGGR_TRADES, AggrTradesEvent, "aggTrade"),
    shape(EventKind.TRADE, TradeEvent, "trade"),
    shape(EventKind.KLINE, KlineEvent, "kline"),
    shape(EventKind.ORDER_BOOK, OrderBook),
    shape(EventKind.DEPTH_ORDER_BOOK, DepthOrderBookEvent, "depthUpdate"),
)

FUTURES_SHAPES: tuple[EventShape, ...] = (
    shape(EventKind.DAY_TICKER_ALL, list[DayTickerEvent], "24hrTicker"),
    shape(EventKind.DAY_TICKER, DayTickerEvent, "24hrTicker"),
    shape(EventKind.BOOK_TICKER, BookTickerEvent, "bookTicker"),
    shape(EventKind.MINI_TICKER, MiniTickerEvent, "24hrMiniTicker"),
    shape(EventKind.MINI_TICKER_ALL, list[MiniTickerEvent], "24hrMiniTicker"),
    shape(EventKind.ACCOUNT_UPDATE, FuturesAccountUpdateEvent, "ACCOUNT_UPDATE"),
    shape(EventKind.ORDER_TRADE, FuturesOrderTradeEvent, "ORDER_TRADE_UPDATE"),
    shape(EventKind.AGGR_TRADES, AggrTradesEvent, "aggTrade"),
    shape(EventKind.INDEX_PRICE, IndexPriceEvent, "indexPriceUpdate"),
    shape(EventKind.MARK_PRICE, MarkPriceEvent, "markPriceUpdate"),
    shape(EventKind.MARK_PRICE_ALL, list[MarkPriceEvent], "markPriceUpdate"),
    shape(EventKind.TRADE, TradeEvent, "trade"),
    shape(EventKind.KLINE, KlineEvent, "kline"),
    shape(EventKind.CONTINUOUS_KLINE, ContinuousKlineEvent, "continuous_kline"),
    shape(EventKind.INDEX_KLINE, IndexKlineEvent, "indexPriceKline"),
    shape(EventKind.LIQUIDATION, LiquidationEvent, "forceOrder"),
    shape(EventKind.ORDER_BOOK, OrderBook),
    shape(EventKind.DEPTH_ORDER_BOOK, DepthOrderBookEvent, "depthUpdate"),
    shape(EventKind.USER_DATA_STREAM_EXPIRED, UserDataStreamExpiredEvent, "listenKeyExpired"),
)
