"""
Pytest configuration and fixtures for binance-stream tests.

Payload fixtures follow the documented Binance wire format and return a
fresh dict on every use, since the spot unwrapper mutates envelopes.
"""

import threading

import pytest

from binance_stream.streams import BinanceFuturesWebSocket, BinanceWebSocket


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def received() -> list:
    """Events recorded by the handler fixture."""
    return []


@pytest.fixture
def handler(received):
    """Handler that records every dispatched event."""
    return received.append


@pytest.fixture
def stop() -> threading.Event:
    """Cross-thread stop flag."""
    return threading.Event()


@pytest.fixture
def spot_ws(handler) -> BinanceWebSocket:
    return BinanceWebSocket(handler)


@pytest.fixture
def futures_ws(handler) -> BinanceFuturesWebSocket:
    return BinanceFuturesWebSocket(handler)


# =============================================================================
# Trade Payloads
# =============================================================================


@pytest.fixture
def trade_payload() -> dict:
    return {
        "e": "trade",
        "E": 123456789,
        "s": "BNBBTC",
        "t": 12345,
        "p": "0.001",
        "q": "100",
        "b": 88,
        "a": 50,
        "T": 123456785,
        "m": True,
        "M": True,
    }


@pytest.fixture
def agg_trade_payload() -> dict:
    return {
        "e": "aggTrade",
        "E": 1704067200000,
        "s": "BTCUSDT",
        "a": 12345,
        "p": "40000.00",
        "q": "0.5",
        "f": 100,
        "l": 105,
        "T": 1704067200000,
        "m": False,
        "M": True,
    }


# =============================================================================
# Ticker Payloads
# =============================================================================


@pytest.fixture
def spot_ticker_payload() -> dict:
    return {
        "e": "24hrTicker",
        "E": 1704067200000,
        "s": "BTCUSDT",
        "p": "1000.00",
        "P": "2.500",
        "w": "40250.12",
        "x": "39000.00",
        "c": "40000.00",
        "Q": "0.010",
        "b": "39999.00",
        "B": "1.5",
        "a": "40001.00",
        "A": "1.0",
        "o": "39000.00",
        "h": "41000.00",
        "l": "38800.00",
        "v": "10000.00",
        "q": "402501200.00",
        "O": 1703980800000,
        "C": 1704067200000,
        "F": 1000,
        "L": 25000,
        "n": 24001,
    }


@pytest.fixture
def futures_ticker_payload() -> dict:
    return {
        "e": "24hrTicker",
        "E": 1704067200000,
        "s": "BTCUSDT",
        "p": "1000.00",
        "P": "2.500",
        "w": "40250.12",
        "c": "40000.00",
        "Q": "0.010",
        "o": "39000.00",
        "h": "41000.00",
        "l": "38800.00",
        "v": "10000.00",
        "q": "402501200.00",
        "O": 1703980800000,
        "C": 1704067200000,
        "F": 1000,
        "L": 25000,
        "n": 24001,
    }


@pytest.fixture
def mini_ticker_payload() -> dict:
    return {
        "e": "24hrMiniTicker",
        "E": 1704067200000,
        "s": "ETHUSDT",
        "c": "2300.10",
        "o": "2250.00",
        "h": "2310.00",
        "l": "2240.00",
        "v": "50000",
        "q": "114000000",
    }


@pytest.fixture
def spot_book_ticker_payload() -> dict:
    return {
        "u": 400900217,
        "s": "BNBUSDT",
        "b": "25.35190000",
        "B": "31.21000000",
        "a": "25.36520000",
        "A": "40.66000000",
    }


@pytest.fixture
def futures_book_ticker_payload() -> dict:
    return {
        "e": "bookTicker",
        "u": 400900217,
        "E": 1568014460893,
        "T": 1568014460891,
        "s": "BNBUSDT",
        "b": "25.35190000",
        "B": "31.21000000",
        "a": "25.36520000",
        "A": "40.66000000",
    }


@pytest.fixture
def mark_price_payload() -> dict:
    return {
        "e": "markPriceUpdate",
        "E": 1562305380000,
        "s": "BTCUSDT",
        "p": "11794.15000000",
        "i": "11784.62659091",
        "P": "11784.25641265",
        "r": "0.00038167",
        "T": 1562306400000,
    }


@pytest.fixture
def index_price_payload() -> dict:
    return {
        "e": "indexPriceUpdate",
        "E": 1591261236000,
        "i": "BTCUSD",
        "p": "9636.57860000",
    }


# =============================================================================
# Kline Payloads
# =============================================================================


def _kline_body(interval: str = "1m") -> dict:
    return {
        "t": 1704067200000,
        "T": 1704067259999,
        "s": "BTCUSDT",
        "i": interval,
        "f": 100,
        "L": 200,
        "o": "40000.00",
        "c": "40050.00",
        "h": "40100.00",
        "l": "39950.00",
        "v": "12.5",
        "n": 101,
        "x": False,
        "q": "500625.00",
        "V": "6.2",
        "Q": "248310.00",
        "B": "0",
    }


@pytest.fixture
def kline_payload() -> dict:
    return {
        "e": "kline",
        "E": 1704067230000,
        "s": "BTCUSDT",
        "k": _kline_body("1m"),
    }


@pytest.fixture
def continuous_kline_payload() -> dict:
    return {
        "e": "continuous_kline",
        "E": 1607443058651,
        "ps": "BTCUSDT",
        "ct": "PERPETUAL",
        "k": _kline_body("1m"),
    }


@pytest.fixture
def index_kline_payload() -> dict:
    body = _kline_body("1m")
    # Index klines carry placeholder trade fields
    body.update({"s": 0, "v": "0", "n": 0, "q": "0", "V": "0", "Q": "0"})
    return {
        "e": "indexPriceKline",
        "E": 1591267070033,
        "ps": "BTCUSD",
        "k": body,
    }


# =============================================================================
# Order Book Payloads
# =============================================================================


@pytest.fixture
def partial_depth_payload() -> dict:
    return {
        "lastUpdateId": 160,
        "bids": [["0.0024", "10"], ["0.0023", "5"]],
        "asks": [["0.0026", "100"]],
    }


@pytest.fixture
def depth_update_payload() -> dict:
    return {
        "e": "depthUpdate",
        "E": 123456789,
        "s": "BNBBTC",
        "U": 157,
        "u": 160,
        "b": [["0.0024", "10"]],
        "a": [["0.0026", "100"]],
    }


# =============================================================================
# Account Payloads
# =============================================================================


@pytest.fixture
def account_position_payload() -> dict:
    return {
        "e": "outboundAccountPosition",
        "E": 1564034571105,
        "u": 1564034571073,
        "B": [{"a": "ETH", "f": "10000.000000", "l": "0.000000"}],
    }


@pytest.fixture
def balance_update_payload() -> dict:
    return {
        "e": "balanceUpdate",
        "E": 1573200697110,
        "a": "BTC",
        "d": "100.00000000",
        "T": 1573200697068,
    }


@pytest.fixture
def execution_report_payload() -> dict:
    return {
        "e": "executionReport",
        "E": 1499405658658,
        "s": "ETHBTC",
        "c": "mUvoqJxFIILMdfAW5iGSOW",
        "S": "BUY",
        "o": "LIMIT",
        "f": "GTC",
        "q": "1.00000000",
        "p": "0.10264410",
        "P": "0.00000000",
        "F": "0.00000000",
        "g": -1,
        "C": "",
        "x": "NEW",
        "X": "NEW",
        "r": "NONE",
        "i": 4293153,
        "l": "0.00000000",
        "z": "0.00000000",
        "L": "0.00000000",
        "n": "0",
        "N": None,
        "T": 1499405658657,
        "t": -1,
        "I": 8641984,
        "w": True,
        "m": False,
        "M": False,
        "O": 1499405658657,
        "Z": "0.00000000",
        "Y": "0.00000000",
        "Q": "0.00000000",
    }


@pytest.fixture
def futures_account_update_payload() -> dict:
    return {
        "e": "ACCOUNT_UPDATE",
        "E": 1564745798939,
        "T": 1564745798938,
        "a": {
            "m": "ORDER",
            "B": [{"a": "USDT", "wb": "122624.12345678", "cw": "100.12345678", "bc": "50.12345678"}],
            "P": [
                {
                    "s": "BTCUSDT",
                    "pa": "0",
                    "ep": "0.00000",
                    "bep": "0",
                    "cr": "200",
                    "up": "0",
                    "mt": "isolated",
                    "iw": "0.00000000",
                    "ps": "BOTH",
                }
            ],
        },
    }


@pytest.fixture
def futures_order_update_payload() -> dict:
    return {
        "e": "ORDER_TRADE_UPDATE",
        "E": 1568879465651,
        "T": 1568879465650,
        "o": {
            "s": "BTCUSDT",
            "c": "TEST",
            "S": "SELL",
            "o": "TRAILING_STOP_MARKET",
            "f": "GTC",
            "q": "0.001",
            "p": "0",
            "ap": "0",
            "sp": "7103.04",
            "x": "NEW",
            "X": "NEW",
            "i": 8886774,
            "l": "0",
            "z": "0",
            "L": "0",
            "N": "USDT",
            "n": "0",
            "T": 1568879465650,
            "t": 0,
            "b": "0",
            "a": "9.91",
            "m": False,
            "R": False,
            "wt": "CONTRACT_PRICE",
            "ot": "TRAILING_STOP_MARKET",
            "ps": "LONG",
            "cp": False,
            "AP": "7476.89",
            "cr": "5.0",
            "rp": "0",
        },
    }


@pytest.fixture
def liquidation_payload() -> dict:
    return {
        "e": "forceOrder",
        "E": 1568014460893,
        "o": {
            "s": "BTCUSDT",
            "S": "SELL",
            "o": "LIMIT",
            "f": "IOC",
            "q": "0.014",
            "p": "9910",
            "ap": "9910",
            "X": "FILLED",
            "l": "0.014",
            "z": "0.014",
            "T": 1568014460893,
        },
    }


@pytest.fixture
def listen_key_expired_payload() -> dict:
    return {
        "e": "listenKeyExpired",
        "E": 1576653824250,
        "listenKey": "WsCMN0a4KHUPTQuX6IUnqEZfB1inxmv1qR4kbf1LuEjur5VdbzqvyxqG9TSjVVxv",
    }
