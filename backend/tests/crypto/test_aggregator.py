"""Tests for PriceAggregator."""

import pytest

from app.crypto.aggregator import PriceAggregator
from app.crypto.pairs import TradingPair

HOUR_MS = 3_600_000


class TestPriceAggregator:
    """Unit tests for the PriceAggregator."""

    def test_defaults_to_zero(self, aggregator):
        """Test that untraded pairs report zero price and average."""
        for pair in TradingPair:
            assert aggregator.get_current_price(pair) == 0
            assert aggregator.get_hourly_average(pair) == 0

    def test_handle_trade_updates_price(self, aggregator, clock):
        aggregator.handle_trade("ETH/USDC", 2500.5, clock.now_ms)
        assert aggregator.get_current_price("ETH/USDC") == 2500.5
        assert aggregator.get_current_price(TradingPair.ETH_USDC) == 2500.5

    def test_last_write_wins(self, aggregator, clock):
        """Test that the latest call wins even if its timestamp is older."""
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms)
        aggregator.handle_trade("ETH/USDC", 2400, clock.now_ms - 10_000)
        assert aggregator.get_current_price("ETH/USDC") == 2400

    def test_pairs_are_independent(self, aggregator, clock):
        aggregator.handle_trade("ETH/USDC", 2500.5, clock.now_ms)
        aggregator.handle_trade("ETH/USDT", 2501.0, clock.now_ms)
        aggregator.handle_trade("ETH/BTC", 0.055, clock.now_ms)
        assert aggregator.get_current_price("ETH/USDC") == 2500.5
        assert aggregator.get_current_price("ETH/USDT") == 2501.0
        assert aggregator.get_current_price("ETH/BTC") == 0.055

    def test_hourly_average(self, aggregator, clock):
        t = clock.now_ms
        aggregator.handle_trade("ETH/USDC", 2500, t)
        aggregator.handle_trade("ETH/USDC", 2600, t + 1000)
        aggregator.handle_trade("ETH/USDC", 2700, t + 2000)
        assert aggregator.get_hourly_average("ETH/USDC") == 2600.0
        assert aggregator.get_current_price("ETH/USDC") == 2700

    def test_hourly_average_with_wall_clock(self, now_ms):
        """Same scenario against the real clock."""
        aggregator = PriceAggregator()
        aggregator.handle_trade("ETH/USDC", 2500, now_ms)
        aggregator.handle_trade("ETH/USDC", 2600, now_ms + 1000)
        aggregator.handle_trade("ETH/USDC", 2700, now_ms + 2000)
        assert aggregator.get_hourly_average("ETH/USDC") == 2600.0
        assert aggregator.get_current_price("ETH/USDC") == 2700

    def test_average_is_unweighted(self, aggregator, clock):
        """A burst of trades pulls the mean toward the burst price."""
        aggregator.handle_trade("ETH/USDT", 1000, clock.now_ms - 30 * 60_000)
        for i in range(3):
            aggregator.handle_trade("ETH/USDT", 2000, clock.now_ms + i)
        assert aggregator.get_hourly_average("ETH/USDT") == 1750.0

    def test_old_trades_pruned(self, aggregator, clock):
        """Test that trades older than one hour drop out of the average."""
        aggregator.handle_trade("ETH/USDC", 2000, clock.now_ms - 2 * HOUR_MS)
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms)
        assert aggregator.get_hourly_average("ETH/USDC") == 2500
        assert aggregator.history_size("ETH/USDC") == 1

    def test_stale_trade_still_sets_price(self, aggregator, clock):
        """Test that a trade outside the window updates price but not history."""
        aggregator.handle_trade("ETH/USDC", 2000, clock.now_ms - 2 * HOUR_MS)
        assert aggregator.get_current_price("ETH/USDC") == 2000
        assert aggregator.get_hourly_average("ETH/USDC") == 0
        assert aggregator.history_size("ETH/USDC") == 0

    def test_boundary_is_exclusive(self, aggregator, clock):
        aggregator.handle_trade("ETH/BTC", 0.05, clock.now_ms - HOUR_MS)
        aggregator.handle_trade("ETH/BTC", 0.06, clock.now_ms - HOUR_MS + 1)
        assert aggregator.history_size("ETH/BTC") == 1
        assert aggregator.get_hourly_average("ETH/BTC") == 0.06

    def test_cutoff_uses_wall_clock(self, aggregator, clock):
        """Test that pruning is driven by the clock, not trade timestamps."""
        aggregator.handle_trade("ETH/USDC", 2000, clock.now_ms)
        clock.advance(HOUR_MS + 1)
        # New trade carries an old timestamp; the first entry still expires
        aggregator.handle_trade("ETH/USDC", 3000, clock.now_ms - 1000)
        assert aggregator.history_size("ETH/USDC") == 1
        assert aggregator.get_hourly_average("ETH/USDC") == 3000

    def test_reads_do_not_prune(self, aggregator, clock):
        """Test that a quiet pair keeps its stale average until the next trade."""
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms)
        clock.advance(2 * HOUR_MS)
        assert aggregator.get_hourly_average("ETH/USDC") == 2500
        assert aggregator.history_size("ETH/USDC") == 1

    def test_pruning_is_per_pair(self, aggregator, clock):
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms)
        aggregator.handle_trade("ETH/USDT", 2501, clock.now_ms)
        clock.advance(2 * HOUR_MS)
        aggregator.handle_trade("ETH/USDC", 2600, clock.now_ms)
        assert aggregator.history_size("ETH/USDC") == 1
        assert aggregator.history_size("ETH/USDT") == 1

    def test_unknown_pair_raises(self, aggregator):
        with pytest.raises(KeyError):
            aggregator.get_current_price("BTC/USDT")


class TestGetAllData:
    """Tests for get_all_data() snapshots."""

    def test_three_zero_snapshots_without_trades(self, aggregator):
        data = aggregator.get_all_data()
        assert len(data) == 3
        assert [s.pair.display for s in data] == ["ETH/USDC", "ETH/USDT", "ETH/BTC"]
        assert all(s.price == 0 and s.average == 0 for s in data)

    def test_fixed_order_regardless_of_trade_order(self, aggregator, clock):
        aggregator.handle_trade("ETH/BTC", 0.055, clock.now_ms)
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms)
        data = aggregator.get_all_data()
        assert [s.pair for s in data] == list(TradingPair)
        assert data[0].price == 2500
        assert data[1].price == 0
        assert data[2].price == 0.055

    def test_timestamp_is_read_time(self, aggregator, clock):
        aggregator.handle_trade("ETH/USDC", 2500, clock.now_ms - 5000)
        clock.advance(1234)
        data = aggregator.get_all_data()
        assert all(s.timestamp_ms == clock.now_ms for s in data)

    def test_snapshot_carries_average(self, aggregator, clock):
        aggregator.handle_trade("ETH/USDT", 2500, clock.now_ms)
        aggregator.handle_trade("ETH/USDT", 2700, clock.now_ms)
        snapshot = aggregator.get_all_data()[1]
        assert snapshot.price == 2700
        assert snapshot.average == 2600
