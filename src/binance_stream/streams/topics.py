"""
Stream topic names.

Helpers that build the subscription keys Binance expects, e.g.
"btcusdt@kline_1h". Symbols are lowercased as the stream API requires.
"""

from enum import Enum
from typing import Optional


class KlineInterval(str, Enum):
    """Kline/candlestick interval."""

    s1 = "1s"
    m1 = "1m"
    m3 = "3m"
    m5 = "5m"
    m15 = "15m"
    m30 = "30m"
    h1 = "1h"
    h2 = "2h"
    h4 = "4h"
    h6 = "6h"
    h8 = "8h"
    h12 = "12h"
    d1 = "1d"
    d3 = "3d"
    w1 = "1w"
    M1 = "1M"


class ContractType(str, Enum):
    """Futures contract type for continuous klines."""

    PERPETUAL = "perpetual"
    CURRENT_QUARTER = "current_quarter"
    NEXT_QUARTER = "next_quarter"


PARTIAL_DEPTH_LEVELS = (5, 10, 20)

ALL_TICKERS_TOPIC = "!ticker@arr"
ALL_MINI_TICKERS_TOPIC = "!miniTicker@arr"
ALL_BOOK_TICKERS_TOPIC = "!bookTicker"
ALL_LIQUIDATIONS_TOPIC = "!forceOrder@arr"


def _interval(interval: KlineInterval | str) -> str:
    return interval.value if isinstance(interval, KlineInterval) else interval


def ticker_topic(symbol: str) -> str:
    """24hr rolling ticker for one symbol."""
    return f"{symbol.lower()}@ticker"


def mini_ticker_topic(symbol: str) -> str:
    """24hr mini ticker for one symbol."""
    return f"{symbol.lower()}@miniTicker"


def book_ticker_topic(symbol: str) -> str:
    """Best bid/ask updates for one symbol."""
    return f"{symbol.lower()}@bookTicker"


def trade_topic(symbol: str) -> str:
    """Raw trades for one symbol."""
    return f"{symbol.lower()}@trade"


def agg_trade_topic(symbol: str) -> str:
    """Aggregate trades for one symbol."""
    return f"{symbol.lower()}@aggTrade"


def kline_topic(symbol: str, interval: KlineInterval | str) -> str:
    """
    Kline stream for one symbol.

    Args:
        symbol: Trading pair (e.g., "BTCUSDT")
        interval: Kline interval (e.g., KlineInterval.h1 or "1h")

    Returns:
        Topic such as "btcusdt@kline_1h"
    """
    return f"{symbol.lower()}@kline_{_interval(interval)}"


def depth_topic(
    symbol: str,
    levels: Optional[int] = None,
    update_speed_ms: Optional[int] = None,
) -> str:
    """
    Order book stream for one symbol.

    Args:
        symbol: Trading pair
        levels: Partial book depth (5, 10 or 20). None for the diff stream
        update_speed_ms: Update speed suffix, e.g. 100 for "@100ms"

    Returns:
        Topic such as "btcusdt@depth20@100ms" or "btcusdt@depth"

    Raises:
        ValueError: If levels is not a supported partial depth
    """
    if levels is not None and levels not in PARTIAL_DEPTH_LEVELS:
        raise ValueError(f"Unsupported depth level {levels}, expected one of {PARTIAL_DEPTH_LEVELS}")

    topic = f"{symbol.lower()}@depth{levels or ''}"
    if update_speed_ms is not None:
        topic = f"{topic}@{update_speed_ms}ms"
    return topic


def mark_price_topic(symbol: Optional[str] = None, every_second: bool = False) -> str:
    """
    Mark price stream (futures).

    Without a symbol, subscribes to the all-market array.
    """
    topic = f"{symbol.lower()}@markPrice" if symbol else "!markPrice@arr"
    if every_second:
        topic = f"{topic}@1s"
    return topic


def index_price_topic(pair: str, every_second: bool = False) -> str:
    """Index price stream (coin-margined futures)."""
    topic = f"{pair.lower()}@indexPrice"
    if every_second:
        topic = f"{topic}@1s"
    return topic


def continuous_kline_topic(
    pair: str,
    contract_type: ContractType | str,
    interval: KlineInterval | str,
) -> str:
    """Continuous contract kline, e.g. "btcusdt_perpetual@continuousKline_1m"."""
    ct = contract_type.value if isinstance(contract_type, ContractType) else contract_type
    return f"{pair.lower()}_{ct}@continuousKline_{_interval(interval)}"


def index_kline_topic(pair: str, interval: KlineInterval | str) -> str:
    """Index price kline, e.g. "btcusd@indexPriceKline_1m"."""
    return f"{pair.lower()}@indexPriceKline_{_interval(interval)}"


def liquidation_topic(symbol: Optional[str] = None) -> str:
    """Liquidation orders for one symbol, or the all-market stream."""
    if symbol is None:
        return ALL_LIQUIDATIONS_TOPIC
    return f"{symbol.lower()}@forceOrder"


def user_data_topic(listen_key: str) -> str:
    """
    Account event stream.

    The listen key is issued and kept alive over REST outside this package;
    it is used verbatim as the topic.
    """
    if not listen_key:
        raise ValueError("Listen key must not be empty")
    return listen_key
