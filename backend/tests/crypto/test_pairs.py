"""Tests for TradingPair and the symbol table."""

import pytest

from app.crypto.pairs import HISTORY_WINDOW_MS, PAIR_TABLE, TradingPair


class TestTradingPair:
    """Unit tests for the TradingPair enum."""

    def test_exactly_three_pairs(self):
        assert len(TradingPair) == 3

    def test_declaration_order(self):
        assert [p.display for p in TradingPair] == ["ETH/USDC", "ETH/USDT", "ETH/BTC"]

    def test_slots_are_contiguous(self):
        assert [int(p) for p in TradingPair] == [0, 1, 2]

    def test_from_display(self):
        assert TradingPair.from_display("ETH/USDT") is TradingPair.ETH_USDT

    def test_from_display_unknown(self):
        with pytest.raises(KeyError):
            TradingPair.from_display("BTC/USDT")

    def test_coerce_accepts_both_forms(self):
        assert TradingPair.coerce("ETH/BTC") is TradingPair.ETH_BTC
        assert TradingPair.coerce(TradingPair.ETH_BTC) is TradingPair.ETH_BTC

    def test_str_is_display_name(self):
        assert str(TradingPair.ETH_USDC) == "ETH/USDC"


class TestPairTable:
    """Tests for the upstream symbol mapping."""

    def test_maps_finnhub_symbols(self):
        assert PAIR_TABLE["BINANCE:ETHUSDC"] is TradingPair.ETH_USDC
        assert PAIR_TABLE["BINANCE:ETHUSDT"] is TradingPair.ETH_USDT
        assert PAIR_TABLE["BINANCE:ETHBTC"] is TradingPair.ETH_BTC

    def test_order_matches_enum(self):
        assert list(PAIR_TABLE.values()) == list(TradingPair)

    def test_is_immutable(self):
        with pytest.raises(TypeError):
            PAIR_TABLE["BINANCE:BTCUSDT"] = TradingPair.ETH_USDC  # type: ignore[index]

    def test_window_is_one_hour(self):
        assert HISTORY_WINDOW_MS == 60 * 60 * 1000
