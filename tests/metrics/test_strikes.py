"""Tests for strike aggregation and whale classification."""

import pytest

from flow_app.config.defaults import WhaleParams
from flow_app.data.models import Metric, OptionType
from flow_app.errors import InvalidParameterError
from flow_app.metrics.strikes import aggregate_by_strike, filter_trades, is_whale


class TestFilterTrades:
    """Test the shared trade filter."""

    def test_expiry_filter(self, sample_dataset):
        """Test only the selected expiry is kept."""
        kept = filter_trades(sample_dataset.records, expiry="11/19/2025")
        assert sorted(record.strike for record in kept) == [659.0, 662.0]

    def test_all_expiries(self, sample_dataset):
        assert len(filter_trades(sample_dataset.records, expiry="All")) == 6

    def test_min_value_is_inclusive(self, trade_factory):
        """Test a trade exactly at the minimum passes."""
        records = [trade_factory(premium=10_000.0), trade_factory(premium=9_999.0)]
        kept = filter_trades(records, metric=Metric.PREMIUM, min_value=10_000)
        assert [record.premium for record in kept] == [10_000.0]

    def test_min_value_uses_metric(self, trade_factory):
        """Test the size metric filters on contracts."""
        records = [trade_factory(size=500.0, premium=1.0), trade_factory(size=50.0, premium=1e9)]
        kept = filter_trades(records, metric=Metric.SIZE, min_value=100)
        assert [record.size for record in kept] == [500.0]

    def test_non_participating_dropped(self, trade_factory):
        """Test trades without strike or option type are excluded."""
        records = [trade_factory(), trade_factory(strike=None), trade_factory(put_call=None),
                   trade_factory(strike=0.0)]
        assert len(filter_trades(records)) == 1

    def test_metric_name_accepted(self, trade_factory):
        assert len(filter_trades([trade_factory()], metric="size")) == 1

    def test_unknown_metric_rejected(self, trade_factory):
        with pytest.raises(InvalidParameterError):
            filter_trades([trade_factory()], metric="volume")


class TestWhaleClassification:
    """Test whale thresholds."""

    def test_premium_threshold_inclusive(self, trade_factory):
        assert is_whale(trade_factory(premium=1_000_000.0), Metric.PREMIUM)
        assert not is_whale(trade_factory(premium=999_999.0), Metric.PREMIUM)

    def test_size_threshold_inclusive(self, trade_factory):
        assert is_whale(trade_factory(size=1000.0), Metric.SIZE)
        assert not is_whale(trade_factory(size=999.0), Metric.SIZE)

    def test_custom_thresholds(self, trade_factory):
        thresholds = WhaleParams(premium_threshold=40_000.0, size_threshold=50.0)
        assert is_whale(trade_factory(), Metric.PREMIUM, thresholds)
        assert is_whale(trade_factory(), Metric.SIZE, thresholds)


class TestAggregateByStrike:
    """Test the per-strike fold."""

    def test_sample_premium_mode(self, sample_dataset):
        """Test totals, ordering and whale tiers on the sample data."""
        result = aggregate_by_strike(sample_dataset.records, metric=Metric.PREMIUM)

        assert [agg.strike for agg in result.aggregates] == [700.0, 665.0, 662.0, 659.0, 645.0, 640.0]
        assert result.totals.call_premium == pytest.approx(153_200)
        assert result.totals.put_premium == pytest.approx(3_124_200)
        assert result.totals.put_size == 1400.0

        whale_strike = result.get(665.0)
        assert whale_strike.put_premium_whale == -3_000_000
        assert whale_strike.put_size_whale == -1000
        assert whale_strike.put_premium_normal == 0
        assert whale_strike.call_premium_normal == 0

        assert result.get(640.0).put_premium_normal == pytest.approx(-85_700)
        assert result.get(659.0).call_premium_normal == 83_000
        assert result.get(659.0).call_size_normal == 201

    def test_sample_spot(self, sample_dataset):
        """Test latest spot is taken from the last trade in time."""
        result = aggregate_by_strike(sample_dataset.records)

        assert result.latest_spot == pytest.approx(659.74)
        assert result.avg_spot == pytest.approx(3958.48 / 6)

    def test_size_mode_whales(self, sample_dataset):
        """Test the size metric classifies the 1000-lot as whale."""
        result = aggregate_by_strike(sample_dataset.records, metric=Metric.SIZE)
        assert result.get(665.0).put_size_whale == -1000
        assert result.get(665.0).put_premium_whale == -3_000_000
        assert result.metric is Metric.SIZE

    def test_tiers_and_signs(self, trade_factory):
        """Test normal calls and a whale put at one strike."""
        records = [
            trade_factory(premium=50_000.0),
            trade_factory(premium=50_000.0),
            trade_factory(premium=2_000_000.0, put_call=OptionType.PUT),
        ]
        result = aggregate_by_strike(records)

        assert len(result.aggregates) == 1
        aggregate = result.aggregates[0]
        assert aggregate.strike == 650.0
        assert aggregate.call_premium_normal == 100_000
        assert aggregate.call_premium_whale == 0
        assert aggregate.put_premium_whale == -2_000_000
        assert aggregate.put_premium_normal == 0
        assert aggregate.call_size_normal == 200
        assert aggregate.put_size_whale == -100

    def test_put_sums_never_positive(self, sample_dataset):
        result = aggregate_by_strike(sample_dataset.records)
        for aggregate in result.aggregates:
            assert aggregate.put_premium_normal <= 0
            assert aggregate.put_premium_whale <= 0
            assert aggregate.call_premium_normal >= 0
            assert aggregate.call_premium_whale >= 0

    def test_empty_input(self):
        """Test no trades gives an empty aggregation."""
        result = aggregate_by_strike([])

        assert result.aggregates == ()
        assert result.totals.call_premium == 0
        assert result.avg_spot == 0
        assert result.latest_spot == 0

    def test_missing_spot_excluded_from_average(self, trade_factory):
        records = [trade_factory(spot=None), trade_factory(spot=600.0), trade_factory(spot=700.0)]
        result = aggregate_by_strike(records)

        assert result.avg_spot == 650.0
        assert result.latest_spot == 700.0

    def test_latest_spot_tie_keeps_input_order(self, trade_factory):
        """Test equal timestamps resolve to the later input trade."""
        records = [trade_factory(timestamp=5, spot=600.0), trade_factory(timestamp=5, spot=610.0)]
        assert aggregate_by_strike(records).latest_spot == 610.0
