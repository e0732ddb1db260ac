"""Strike-level aggregation with whale classification"""

from collections.abc import Iterable
from typing import Optional

from ..config.defaults import WhaleParams
from ..data.merger import ALL_EXPIRIES
from ..data.models import Metric, OptionType, TradeRecord, coerce_metric
from ..logging.config import get_logger
from ..models.metrics import FlowTotals, StrikeAggregate, StrikeAggregation

logger = get_logger(__name__)


def filter_trades(records: Iterable[TradeRecord], expiry: str = ALL_EXPIRIES,
                  metric: Metric = Metric.PREMIUM, min_value: float = 0) -> list[TradeRecord]:
    """
    Select the trades that feed both the strike and the flow views.

    A trade passes when its expiry matches (or expiry is 'All'), its value
    for the selected metric is at least min_value, and it has both a strike
    and an option type.
    """
    metric = coerce_metric(metric)
    return [
        record for record in records
        if (expiry == ALL_EXPIRIES or record.expiry == expiry)
        and record.metric_value(metric) >= min_value
        and record.participates
    ]


def is_whale(record: TradeRecord, metric: Metric,
             thresholds: Optional[WhaleParams] = None) -> bool:
    """
    Classify a trade as whale flow using the selected metric's threshold.

    The same classification applies to the premium and size tracks.
    """
    thresholds = thresholds or WhaleParams()
    if metric == Metric.PREMIUM:
        return record.premium >= thresholds.premium_threshold
    return record.size >= thresholds.size_threshold


def aggregate_by_strike(records: Iterable[TradeRecord], expiry: str = ALL_EXPIRIES,
                        metric: Metric = Metric.PREMIUM, min_value: float = 0,
                        thresholds: Optional[WhaleParams] = None) -> StrikeAggregation:
    """
    Fold filtered trades into per-strike aggregates and running totals.

    Args:
        records: Working trade set
        expiry: Exact expiry to keep, or 'All'
        metric: Metric used for the value filter and whale classification
        min_value: Minimum metric value a trade must reach
        thresholds: Whale thresholds, defaults when omitted

    Returns:
        StrikeAggregation with strikes in descending order, totals, the
        average spot of trades carrying one and the spot of the
        chronologically last trade
    """
    metric = coerce_metric(metric)
    thresholds = thresholds or WhaleParams()
    filtered = filter_trades(records, expiry, metric, min_value)

    by_strike: dict[float, StrikeAggregate] = {}
    call_premium = put_premium = call_size = put_size = 0.0
    spot_total = 0.0
    spot_count = 0

    for record in filtered:
        if record.spot is not None:
            spot_total += record.spot
            spot_count += 1

        whale = is_whale(record, metric, thresholds)
        current = by_strike.get(record.strike) or StrikeAggregate(strike=record.strike)
        by_strike[record.strike] = current.add(record.put_call, record.premium, record.size, whale)

        if record.put_call is OptionType.CALL:
            call_premium += record.premium
            call_size += record.size
        else:
            put_premium += record.premium
            put_size += record.size

    chronological = sorted(filtered, key=lambda record: record.timestamp)
    latest_spot = 0.0
    if chronological and chronological[-1].spot is not None:
        latest_spot = chronological[-1].spot

    aggregation = StrikeAggregation(
        metric=metric,
        aggregates=tuple(sorted(by_strike.values(), key=lambda agg: agg.strike, reverse=True)),
        totals=FlowTotals(
            call_premium=call_premium,
            put_premium=put_premium,
            call_size=call_size,
            put_size=put_size,
        ),
        avg_spot=spot_total / spot_count if spot_count else 0.0,
        latest_spot=latest_spot,
    )

    logger.debug(
        "Aggregated trades by strike",
        metric=metric.value,
        expiry=expiry,
        min_value=min_value,
        trades=len(filtered),
        strikes=len(aggregation.aggregates)
    )

    return aggregation
