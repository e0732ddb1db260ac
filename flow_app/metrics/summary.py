"""Headline flow figures: put/call ratio, sentiment, top strike and trend"""

from collections.abc import Sequence
from typing import Optional

from ..data.models import Metric, coerce_metric
from ..models.metrics import (
    FlowSummary,
    FlowTotals,
    MomentumPoint,
    StrikeAggregate,
    StrikeAggregation,
    TrendAnalysis,
)

BULLISH = "Bullish"
BEARISH = "Bearish"


def put_call_ratio(totals: FlowTotals, metric: Metric) -> Optional[float]:
    """
    Calculate the put/call ratio for the selected metric.

    Returns:
        Puts divided by calls, or None when the call total is zero
    """
    calls = totals.calls(metric)
    if calls <= 0:
        return None
    return totals.puts(metric) / calls


def sentiment(pcr: Optional[float]) -> Optional[str]:
    """Bearish above a ratio of 1, bullish otherwise, None without a ratio."""
    if pcr is None:
        return None
    return BEARISH if pcr > 1 else BULLISH


def call_put_split(totals: FlowTotals, metric: Metric) -> tuple[float, float]:
    """Percentages of the combined total on the call and put side."""
    calls = totals.calls(metric)
    puts = totals.puts(metric)
    total = calls + puts
    if total <= 0:
        return 0.0, 0.0
    return calls / total * 100, puts / total * 100


def top_strike(aggregation: StrikeAggregation) -> Optional[StrikeAggregate]:
    """Strike with the largest gross activity; the first one wins ties."""
    top = None
    for aggregate in aggregation.aggregates:
        if top is None or aggregate.gross_total(aggregation.metric) > top.gross_total(aggregation.metric):
            top = aggregate
    return top


def analyze_trend(momentum: Sequence[MomentumPoint]) -> TrendAnalysis:
    """
    Compare the first and last momentum points.

    Flow rising while spot falls is a bullish divergence; flow falling while
    spot rises is a bearish divergence. Fewer than two points is flat.
    """
    if len(momentum) < 2:
        return TrendAnalysis()

    start, end = momentum[0], momentum[-1]

    net_flow_trend = "Flat"
    if end.net_cumulative > start.net_cumulative:
        net_flow_trend = "Accumulating (Bullish)"
    elif end.net_cumulative < start.net_cumulative:
        net_flow_trend = "Distributing (Bearish)"

    spot_trend = "Flat"
    if end.spot > start.spot:
        spot_trend = "Increasing"
    elif end.spot < start.spot:
        spot_trend = "Decreasing"

    divergence = "None"
    if spot_trend == "Decreasing" and BULLISH in net_flow_trend:
        divergence = "Bullish Divergence (Price Down, Flow Up)"
    elif spot_trend == "Increasing" and BEARISH in net_flow_trend:
        divergence = "Bearish Divergence (Price Up, Flow Down)"

    return TrendAnalysis(
        net_flow_trend=net_flow_trend,
        spot_trend=spot_trend,
        divergence=divergence,
    )


def summarize(aggregation: StrikeAggregation,
              momentum: Sequence[MomentumPoint]) -> FlowSummary:
    """Collect the headline figures for an aggregation and its momentum series."""
    metric = coerce_metric(aggregation.metric)
    totals = aggregation.totals
    pcr = put_call_ratio(totals, metric)
    call_pct, put_pct = call_put_split(totals, metric)
    top = top_strike(aggregation)

    return FlowSummary(
        metric=metric,
        total_calls=totals.calls(metric),
        total_puts=totals.puts(metric),
        put_call_ratio=pcr,
        sentiment=sentiment(pcr),
        call_pct=call_pct,
        put_pct=put_pct,
        top_strike=top.strike if top else None,
        top_strike_value=top.gross_total(metric) if top else 0.0,
        trend=analyze_trend(momentum),
    )


def _format_strike(strike: float) -> str:
    return f"{strike:g}"


def build_context(summary: FlowSummary, aggregation: StrikeAggregation,
                  symbol: Optional[str], min_value: float) -> str:
    """
    Render the flow context handed to the summarization service.

    Lists the mode, spot, totals, put/call ratio, the five highest strikes
    and the trend analysis on one line.
    """
    totals = aggregation.totals
    if summary.metric == Metric.PREMIUM:
        calls = f"${totals.call_premium / 1e6:.2f}M"
        puts = f"${totals.put_premium / 1e6:.2f}M"
    else:
        calls = f"{totals.call_size:g}"
        puts = f"{totals.put_size:g}"

    top_strikes = "; ".join(
        f"Strike ${_format_strike(aggregate.strike)}" for aggregate in aggregation.aggregates[:5]
    )
    trend = summary.trend

    return (
        f"Mode: {summary.metric.value.upper()} (Filter: {min_value:g}) "
        f"Ticker: {symbol or 'N/A'} | Spot: ${aggregation.latest_spot:.2f} "
        f"Calls: {calls} Puts: {puts} PCR: {summary.put_call_ratio_display} "
        f"Top Strikes: {top_strikes} --- TREND ANALYSIS --- "
        f"Net Flow Trend: {trend.net_flow_trend} Spot Price Trend: {trend.spot_trend} "
        f"Divergence Detected: {trend.divergence}"
    )
