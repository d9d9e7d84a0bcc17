"""
Tests for stream event payload models.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from binance_stream.core import datetime_to_timestamp, timestamp_to_datetime
from binance_stream.streams.events import (
    AggrTradesEvent,
    DayTickerEvent,
    DepthOrderBookEvent,
    FuturesOrderTradeEvent,
    IndexKlineEvent,
    KlineEvent,
    LiquidationEvent,
    MarkPriceEvent,
    OrderTradeEvent,
    PriceLevel,
    TradeEvent,
)


class TestTimeHelpers:
    """Test timestamp conversion."""

    def test_timestamp_to_datetime(self):
        assert timestamp_to_datetime(1704067200000) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert timestamp_to_datetime(1704067200, unit="s") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_datetime_to_timestamp(self):
        assert datetime_to_timestamp(datetime(2024, 1, 1)) == 1704067200000
        assert datetime_to_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc), unit="s") == 1704067200


class TestTradeModels:
    """Test trade payload decoding."""

    def test_trade_aliases(self, trade_payload):
        trade = TradeEvent.model_validate(trade_payload)

        assert trade.event_type == "trade"
        assert trade.price == Decimal("0.001")
        assert trade.event_datetime == timestamp_to_datetime(123456789)

    def test_trade_without_order_ids(self, trade_payload):
        """Futures trades omit buyer and seller order ids."""
        del trade_payload["b"]
        del trade_payload["a"]

        trade = TradeEvent.model_validate(trade_payload)

        assert trade.buyer_order_id is None
        assert trade.seller_order_id is None

    def test_wrong_event_type_rejected(self, trade_payload):
        trade_payload["e"] = "aggTrade"
        with pytest.raises(ValidationError):
            TradeEvent.model_validate(trade_payload)

    def test_unknown_fields_ignored(self, agg_trade_payload):
        agg_trade_payload["newField"] = "value"

        trade = AggrTradesEvent.model_validate(agg_trade_payload)

        assert trade.aggregated_trade_id == 12345
        assert not hasattr(trade, "newField")

    def test_models_frozen(self, trade_payload):
        trade = TradeEvent.model_validate(trade_payload)
        with pytest.raises(ValidationError):
            trade.price = Decimal("1")

    def test_injected_symbol(self, trade_payload):
        trade_payload["symbol"] = "BNBBTC"
        assert TradeEvent.model_validate(trade_payload).stream_symbol == "BNBBTC"


class TestTickerModels:
    """Test ticker payload decoding."""

    def test_spot_ticker(self, spot_ticker_payload):
        ticker = DayTickerEvent.model_validate(spot_ticker_payload)

        assert ticker.current_close == Decimal("40000.00")
        assert ticker.prev_close == Decimal("39000.00")
        assert ticker.best_bid == Decimal("39999.00")
        assert ticker.num_trades == 24001

    def test_futures_ticker_optional_fields(self, futures_ticker_payload):
        ticker = DayTickerEvent.model_validate(futures_ticker_payload)

        assert ticker.prev_close is None
        assert ticker.best_bid is None
        assert ticker.best_ask_qty is None

    def test_mark_price_blank_fields(self, mark_price_payload):
        mark_price_payload["i"] = ""

        mark = MarkPriceEvent.model_validate(mark_price_payload)

        assert mark.index_price is None
        assert mark.next_funding_time == 1562306400000


class TestKlineModels:
    """Test kline payload decoding."""

    def test_kline(self, kline_payload):
        kline = KlineEvent.model_validate(kline_payload)

        assert kline.symbol == "BTCUSDT"
        assert kline.kline.interval == "1m"
        assert kline.kline.close == Decimal("40050.00")
        assert kline.kline.is_final_bar is False
        assert kline.kline.number_of_trades == 101

    def test_index_kline_placeholder_fields(self, index_kline_payload):
        kline = IndexKlineEvent.model_validate(index_kline_payload)

        assert kline.pair == "BTCUSD"
        assert kline.kline.volume == Decimal("0")


class TestOrderBookModels:
    """Test depth payload decoding."""

    def test_depth_update_levels(self, depth_update_payload):
        depth = DepthOrderBookEvent.model_validate(depth_update_payload)

        assert depth.first_update_id == 157
        assert depth.final_update_id == 160
        assert depth.previous_final_update_id is None
        assert depth.bids == [PriceLevel(Decimal("0.0024"), Decimal("10"))]
        assert depth.asks[0].price == Decimal("0.0026")

    def test_futures_depth_update(self, depth_update_payload):
        depth_update_payload.update({"T": 123456788, "pu": 149})

        depth = DepthOrderBookEvent.model_validate(depth_update_payload)

        assert depth.transaction_time == 123456788
        assert depth.previous_final_update_id == 149

    def test_malformed_level_rejected(self, depth_update_payload):
        depth_update_payload["b"] = [["0.0024"]]
        with pytest.raises(ValidationError):
            DepthOrderBookEvent.model_validate(depth_update_payload)


class TestOrderModels:
    """Test order update payload decoding."""

    def test_execution_report(self, execution_report_payload):
        report = OrderTradeEvent.model_validate(execution_report_payload)

        assert report.symbol == "ETHBTC"
        assert report.side == "BUY"
        assert report.order_id == 4293153
        assert report.commission_asset is None
        assert report.is_order_on_book is True

    def test_futures_order_update(self, futures_order_update_payload):
        update = FuturesOrderTradeEvent.model_validate(futures_order_update_payload)

        assert update.transaction_time == 1568879465650
        assert update.order.order_type == "TRAILING_STOP_MARKET"
        assert update.order.stop_price == Decimal("7103.04")
        assert update.order.callback_rate == Decimal("5.0")
        assert update.order.position_side == "LONG"

    def test_liquidation(self, liquidation_payload):
        liquidation = LiquidationEvent.model_validate(liquidation_payload)

        assert liquidation.order.symbol == "BTCUSDT"
        assert liquidation.order.average_price == Decimal("9910")
