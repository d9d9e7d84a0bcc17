"""
Stream event payload models.

Pydantic v2 models for the JSON payloads Binance pushes over its spot and
futures streams. Field aliases are the single-letter wire keys; the Python
attribute names are descriptive. Models ignore unknown keys so that new wire
fields do not break decoding.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from binance_stream.core.utils import timestamp_to_datetime


def _blank_to_none(value: Any) -> Any:
    # Delivery contracts send "" for fields that only apply to perpetuals
    if value == "":
        return None
    return value


OptionalDecimal = Annotated[Optional[Decimal], BeforeValidator(_blank_to_none)]


# =============================================================================
# Base Models
# =============================================================================


class StreamModel(BaseModel):
    """Base model with common configuration for all stream payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )


class StreamEvent(StreamModel):
    """
    Base for top-level event payloads.

    stream_symbol carries the "symbol" key injected from a combined-stream
    envelope; it is None for single-stream connections.
    """

    stream_symbol: Optional[str] = Field(default=None, alias="symbol")


class TimedStreamEvent(StreamEvent):
    """Event payload carrying the "E" event time."""

    event_time: int = Field(alias="E")

    @property
    def event_datetime(self) -> datetime:
        """Event time as UTC datetime."""
        return timestamp_to_datetime(self.event_time)


class PriceLevel(NamedTuple):
    """One [price, quantity] order book level."""

    price: Decimal
    qty: Decimal


# =============================================================================
# Account Events (user data stream)
# =============================================================================


class AccountBalance(StreamModel):
    """Asset balance inside an account position update."""

    asset: str = Field(alias="a")
    free: Decimal = Field(alias="f")
    locked: Decimal = Field(alias="l")


class AccountUpdateEvent(TimedStreamEvent):
    """Spot account position update ("outboundAccountPosition")."""

    event_type: Literal["outboundAccountPosition"] = Field(alias="e")
    last_update_time: int = Field(alias="u")
    balances: list[AccountBalance] = Field(alias="B")


class BalanceUpdateEvent(TimedStreamEvent):
    """Spot balance change from deposits, withdrawals or transfers."""

    event_type: Literal["balanceUpdate"] = Field(alias="e")
    asset: str = Field(alias="a")
    balance_delta: Decimal = Field(alias="d")
    clear_time: int = Field(alias="T")


class OrderTradeEvent(TimedStreamEvent):
    """Spot order update ("executionReport")."""

    event_type: Literal["executionReport"] = Field(alias="e")
    symbol: str = Field(alias="s")
    new_client_order_id: str = Field(alias="c")
    side: str = Field(alias="S")
    order_type: str = Field(alias="o")
    time_in_force: str = Field(alias="f")
    qty: Decimal = Field(alias="q")
    price: Decimal = Field(alias="p")
    stop_price: Decimal = Field(alias="P")
    iceberg_qty: Optional[Decimal] = Field(default=None, alias="F")
    order_list_id: Optional[int] = Field(default=None, alias="g")
    orig_client_order_id: Optional[str] = Field(default=None, alias="C")
    execution_type: str = Field(alias="x")
    order_status: str = Field(alias="X")
    order_reject_reason: str = Field(alias="r")
    order_id: int = Field(alias="i")
    qty_last_filled_trade: Decimal = Field(alias="l")
    accumulated_qty_filled_trades: Decimal = Field(alias="z")
    price_last_filled_trade: Decimal = Field(alias="L")
    commission: Decimal = Field(alias="n")
    commission_asset: Optional[str] = Field(default=None, alias="N")
    trade_order_time: int = Field(alias="T")
    trade_id: int = Field(alias="t")
    is_order_on_book: bool = Field(alias="w")
    is_buyer_maker: bool = Field(alias="m")
    order_creation_time: int = Field(alias="O")
    cumulative_quote_qty: Decimal = Field(alias="Z")
    last_quote_qty: Optional[Decimal] = Field(default=None, alias="Y")
    quote_order_qty: Optional[Decimal] = Field(default=None, alias="Q")


class FuturesBalance(StreamModel):
    """Wallet balance inside a futures account update."""

    asset: str = Field(alias="a")
    wallet_balance: Decimal = Field(alias="wb")
    cross_wallet_balance: Decimal = Field(alias="cw")
    balance_change: Optional[Decimal] = Field(default=None, alias="bc")


class FuturesPosition(StreamModel):
    """Position inside a futures account update."""

    symbol: str = Field(alias="s")
    position_amount: Decimal = Field(alias="pa")
    entry_price: Decimal = Field(alias="ep")
    breakeven_price: Optional[Decimal] = Field(default=None, alias="bep")
    accumulated_realized: Decimal = Field(alias="cr")
    unrealized_pnl: Decimal = Field(alias="up")
    margin_type: str = Field(alias="mt")
    isolated_wallet: Decimal = Field(alias="iw")
    position_side: str = Field(alias="ps")


class FuturesAccountData(StreamModel):
    """Body of a futures account update."""

    reason: str = Field(alias="m")
    balances: list[FuturesBalance] = Field(alias="B")
    positions: list[FuturesPosition] = Field(default_factory=list, alias="P")


class FuturesAccountUpdateEvent(TimedStreamEvent):
    """Futures balance and position update ("ACCOUNT_UPDATE")."""

    event_type: Literal["ACCOUNT_UPDATE"] = Field(alias="e")
    transaction_time: int = Field(alias="T")
    data: FuturesAccountData = Field(alias="a")


class FuturesOrderData(StreamModel):
    """Order body of a futures order update."""

    symbol: str = Field(alias="s")
    new_client_order_id: str = Field(alias="c")
    side: str = Field(alias="S")
    order_type: str = Field(alias="o")
    time_in_force: str = Field(alias="f")
    qty: Decimal = Field(alias="q")
    price: Decimal = Field(alias="p")
    average_price: Decimal = Field(alias="ap")
    stop_price: Decimal = Field(alias="sp")
    execution_type: str = Field(alias="x")
    order_status: str = Field(alias="X")
    order_id: int = Field(alias="i")
    qty_last_filled_trade: Decimal = Field(alias="l")
    accumulated_qty_filled_trades: Decimal = Field(alias="z")
    price_last_filled_trade: Decimal = Field(alias="L")
    commission_asset: Optional[str] = Field(default=None, alias="N")
    commission: Optional[Decimal] = Field(default=None, alias="n")
    trade_order_time: int = Field(alias="T")
    trade_id: int = Field(alias="t")
    bids_notional: Decimal = Field(alias="b")
    asks_notional: Decimal = Field(alias="a")
    is_buyer_maker: bool = Field(alias="m")
    is_reduce_only: bool = Field(alias="R")
    stop_price_working_type: str = Field(alias="wt")
    original_order_type: str = Field(alias="ot")
    position_side: str = Field(alias="ps")
    close_all: Optional[bool] = Field(default=None, alias="cp")
    activation_price: Optional[Decimal] = Field(default=None, alias="AP")
    callback_rate: Optional[Decimal] = Field(default=None, alias="cr")
    realized_profit: Decimal = Field(alias="rp")


class FuturesOrderTradeEvent(TimedStreamEvent):
    """Futures order update ("ORDER_TRADE_UPDATE")."""

    event_type: Literal["ORDER_TRADE_UPDATE"] = Field(alias="e")
    transaction_time: int = Field(alias="T")
    order: FuturesOrderData = Field(alias="o")


class UserDataStreamExpiredEvent(TimedStreamEvent):
    """The listen key behind a user data stream expired."""

    event_type: Literal["listenKeyExpired"] = Field(alias="e")
    listen_key: Optional[str] = Field(default=None, alias="listenKey")


# =============================================================================
# Trade Events
# =============================================================================


class AggrTradesEvent(TimedStreamEvent):
    """Aggregate trade."""

    event_type: Literal["aggTrade"] = Field(alias="e")
    symbol: str = Field(alias="s")
    aggregated_trade_id: int = Field(alias="a")
    price: Decimal = Field(alias="p")
    qty: Decimal = Field(alias="q")
    first_break_trade_id: int = Field(alias="f")
    last_break_trade_id: int = Field(alias="l")
    trade_order_time: int = Field(alias="T")
    is_buyer_maker: bool = Field(alias="m")


class TradeEvent(TimedStreamEvent):
    """Raw trade."""

    event_type: Literal["trade"] = Field(alias="e")
    symbol: str = Field(alias="s")
    trade_id: int = Field(alias="t")
    price: Decimal = Field(alias="p")
    qty: Decimal = Field(alias="q")
    buyer_order_id: Optional[int] = Field(default=None, alias="b")
    seller_order_id: Optional[int] = Field(default=None, alias="a")
    trade_order_time: int = Field(alias="T")
    is_buyer_maker: bool = Field(alias="m")


class LiquidationOrder(StreamModel):
    """Order body of a liquidation event."""

    symbol: str = Field(alias="s")
    side: str = Field(alias="S")
    order_type: str = Field(alias="o")
    time_in_force: str = Field(alias="f")
    original_quantity: Decimal = Field(alias="q")
    price: Decimal = Field(alias="p")
    average_price: Decimal = Field(alias="ap")
    order_status: str = Field(alias="X")
    order_last_filled_quantity: Decimal = Field(alias="l")
    order_filled_accumulated_quantity: Decimal = Field(alias="z")
    order_trade_time: int = Field(alias="T")


class LiquidationEvent(TimedStreamEvent):
    """Liquidation order ("forceOrder")."""

    event_type: Literal["forceOrder"] = Field(alias="e")
    order: LiquidationOrder = Field(alias="o")


# =============================================================================
# Ticker Events
# =============================================================================


class DayTickerEvent(TimedStreamEvent):
    """
    24hr rolling window ticker.

    Spot tickers also carry previous close and best bid/ask; futures tickers
    omit them.
    """

    event_type: Literal["24hrTicker"] = Field(alias="e")
    symbol: str = Field(alias="s")
    price_change: Decimal = Field(alias="p")
    price_change_percent: Decimal = Field(alias="P")
    average_price: Decimal = Field(alias="w")
    prev_close: Optional[Decimal] = Field(default=None, alias="x")
    current_close: Decimal = Field(alias="c")
    current_close_qty: Decimal = Field(alias="Q")
    best_bid: Optional[Decimal] = Field(default=None, alias="b")
    best_bid_qty: Optional[Decimal] = Field(default=None, alias="B")
    best_ask: Optional[Decimal] = Field(default=None, alias="a")
    best_ask_qty: Optional[Decimal] = Field(default=None, alias="A")
    open: Decimal = Field(alias="o")
    high: Decimal = Field(alias="h")
    low: Decimal = Field(alias="l")
    volume: Decimal = Field(alias="v")
    quote_volume: Decimal = Field(alias="q")
    open_time: int = Field(alias="O")
    close_time: int = Field(alias="C")
    first_trade_id: int = Field(alias="F")
    last_trade_id: int = Field(alias="L")
    num_trades: int = Field(alias="n")


class MiniTickerEvent(TimedStreamEvent):
    """24hr rolling window mini ticker."""

    event_type: Literal["24hrMiniTicker"] = Field(alias="e")
    symbol: str = Field(alias="s")
    close: Decimal = Field(alias="c")
    open: Decimal = Field(alias="o")
    high: Decimal = Field(alias="h")
    low: Decimal = Field(alias="l")
    volume: Decimal = Field(alias="v")
    quote_volume: Decimal = Field(alias="q")


class BookTickerEvent(StreamEvent):
    """
    Best bid/ask update.

    Spot book tickers carry no event type or time; futures ones do.
    """

    event_type: Optional[Literal["bookTicker"]] = Field(default=None, alias="e")
    update_id: int = Field(alias="u")
    event_time: Optional[int] = Field(default=None, alias="E")
    transaction_time: Optional[int] = Field(default=None, alias="T")
    symbol: str = Field(alias="s")
    best_bid: Decimal = Field(alias="b")
    best_bid_qty: Decimal = Field(alias="B")
    best_ask: Decimal = Field(alias="a")
    best_ask_qty: Decimal = Field(alias="A")


class MarkPriceEvent(TimedStreamEvent):
    """Mark price and funding rate (futures)."""

    event_type: Literal["markPriceUpdate"] = Field(alias="e")
    symbol: str = Field(alias="s")
    mark_price: Decimal = Field(alias="p")
    index_price: OptionalDecimal = Field(default=None, alias="i")
    estimated_settle_price: OptionalDecimal = Field(default=None, alias="P")
    funding_rate: OptionalDecimal = Field(default=None, alias="r")
    next_funding_time: Optional[int] = Field(default=None, alias="T")


class IndexPriceEvent(TimedStreamEvent):
    """Index price (coin-margined futures)."""

    event_type: Literal["indexPriceUpdate"] = Field(alias="e")
    pair: str = Field(alias="i")
    index_price: Decimal = Field(alias="p")


# =============================================================================
# Kline Events
# =============================================================================


class KlineData(StreamModel):
    """Candlestick body shared by the kline streams."""

    start_time: int = Field(alias="t")
    end_time: int = Field(alias="T")
    interval: str = Field(alias="i")
    first_trade_id: Optional[int] = Field(default=None, alias="f")
    last_trade_id: Optional[int] = Field(default=None, alias="L")
    open: Decimal = Field(alias="o")
    close: Decimal = Field(alias="c")
    high: Decimal = Field(alias="h")
    low: Decimal = Field(alias="l")
    volume: Decimal = Field(alias="v")
    number_of_trades: int = Field(alias="n")
    is_final_bar: bool = Field(alias="x")
    quote_asset_volume: Decimal = Field(alias="q")
    taker_buy_base_asset_volume: Decimal = Field(alias="V")
    taker_buy_quote_asset_volume: Decimal = Field(alias="Q")


class KlineEvent(TimedStreamEvent):
    """Kline/candlestick update."""

    event_type: Literal["kline"] = Field(alias="e")
    symbol: str = Field(alias="s")
    kline: KlineData = Field(alias="k")


class ContinuousKlineEvent(TimedStreamEvent):
    """Continuous contract kline (futures)."""

    event_type: Literal["continuous_kline"] = Field(alias="e")
    pair: str = Field(alias="ps")
    contract_type: str = Field(alias="ct")
    kline: KlineData = Field(alias="k")


class IndexKlineEvent(TimedStreamEvent):
    """Index price kline (futures)."""

    event_type: Literal["indexPriceKline"] = Field(alias="e")
    pair: str = Field(alias="ps")
    kline: KlineData = Field(alias="k")


# =============================================================================
# Order Book Events
# =============================================================================


class OrderBook(StreamEvent):
    """Partial book depth snapshot ("<symbol>@depth<levels>")."""

    last_update_id: int = Field(alias="lastUpdateId")
    bids: list[PriceLevel]
    asks: list[PriceLevel]


class DepthOrderBookEvent(TimedStreamEvent):
    """Diff depth update ("depthUpdate")."""

    event_type: Literal["depthUpdate"] = Field(alias="e")
    transaction_time: Optional[int] = Field(default=None, alias="T")
    symbol: str = Field(alias="s")
    first_update_id: int = Field(alias="U")
    final_update_id: int = Field(alias="u")
    previous_final_update_id: Optional[int] = Field(default=None, alias="pu")
    bids: list[PriceLevel] = Field(alias="b")
    asks: list[PriceLevel] = Field(alias="a")


# =============================================================================
# Event Variant
# =============================================================================


class EventKind(str, Enum):
    """Closed set of event variants delivered to handlers."""

    ACCOUNT_UPDATE = "ACCOUNT_UPDATE"
    BALANCE_UPDATE = "BALANCE_UPDATE"
    ORDER_TRADE = "ORDER_TRADE"
    AGGR_TRADES = "AGGR_TRADES"
    TRADE = "TRADE"
    ORDER_BOOK = "ORDER_BOOK"
    DAY_TICKER = "DAY_TICKER"
    DAY_TICKER_ALL = "DAY_TICKER_ALL"
    MINI_TICKER = "MINI_TICKER"
    MINI_TICKER_ALL = "MINI_TICKER_ALL"
    KLINE = "KLINE"
    CONTINUOUS_KLINE = "CONTINUOUS_KLINE"
    INDEX_KLINE = "INDEX_KLINE"
    INDEX_PRICE = "INDEX_PRICE"
    MARK_PRICE = "MARK_PRICE"
    MARK_PRICE_ALL = "MARK_PRICE_ALL"
    LIQUIDATION = "LIQUIDATION"
    DEPTH_ORDER_BOOK = "DEPTH_ORDER_BOOK"
    BOOK_TICKER = "BOOK_TICKER"
    USER_DATA_STREAM_EXPIRED = "USER_DATA_STREAM_EXPIRED"


@dataclass(frozen=True)
class WebsocketEvent:
    """
    One classified stream event.

    data is the decoded payload model, or a list of models for the
    all-market array kinds (DAY_TICKER_ALL, MINI_TICKER_ALL, MARK_PRICE_ALL).
    """

    kind: EventKind
    data: Any
