"""Data models for flow analytics results"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..config.defaults import HOUR_MS, MINUTE_MS
from ..data.models import Metric, OptionType


@dataclass(frozen=True)
class StrikeAggregate:
    """
    Per-strike call/put totals split into normal and whale tiers.

    Sign convention: call sums are positive and put sums are stored as
    negative values, on both the premium and the size track. Renderers
    draw the two sides as diverging bars directly from these values.
    """
    strike: float
    call_premium_normal: float = 0.0
    call_premium_whale: float = 0.0
    put_premium_normal: float = 0.0
    put_premium_whale: float = 0.0
    call_size_normal: float = 0.0
    call_size_whale: float = 0.0
    put_size_normal: float = 0.0
    put_size_whale: float = 0.0

    def add(self, option_type: OptionType, premium: float, size: float,
            whale: bool) -> "StrikeAggregate":
        """Return a copy with one trade folded in; puts are subtracted."""
        if option_type is OptionType.CALL:
            if whale:
                return replace(self,
                               call_premium_whale=self.call_premium_whale + premium,
                               call_size_whale=self.call_size_whale + size)
            return replace(self,
                           call_premium_normal=self.call_premium_normal + premium,
                           call_size_normal=self.call_size_normal + size)

        if whale:
            return replace(self,
                           put_premium_whale=self.put_premium_whale - premium,
                           put_size_whale=self.put_size_whale - size)
        return replace(self,
                       put_premium_normal=self.put_premium_normal - premium,
                       put_size_normal=self.put_size_normal - size)

    def call_total(self, metric: Metric) -> float:
        if metric == Metric.PREMIUM:
            return self.call_premium_normal + self.call_premium_whale
        return self.call_size_normal + self.call_size_whale

    def put_total(self, metric: Metric) -> float:
        """Put total for the metric, negative by convention."""
        if metric == Metric.PREMIUM:
            return self.put_premium_normal + self.put_premium_whale
        return self.put_size_normal + self.put_size_whale

    def gross_total(self, metric: Metric) -> float:
        """Call plus absolute put activity for the metric."""
        return self.call_total(metric) + abs(self.put_total(metric))


@dataclass(frozen=True)
class FlowTotals:
    """Running totals over the filtered trades, as positive magnitudes."""
    call_premium: float = 0.0
    put_premium: float = 0.0
    call_size: float = 0.0
    put_size: float = 0.0

    def calls(self, metric: Metric) -> float:
        return self.call_premium if metric == Metric.PREMIUM else self.call_size

    def puts(self, metric: Metric) -> float:
        return self.put_premium if metric == Metric.PREMIUM else self.put_size


@dataclass(frozen=True)
class StrikeAggregation:
    """Result of a strike aggregation pass."""
    metric: Metric
    aggregates: tuple[StrikeAggregate, ...] = ()     # Highest strike first
    totals: FlowTotals = FlowTotals()
    avg_spot: float = 0.0
    latest_spot: float = 0.0

    def get(self, strike: float) -> Optional[StrikeAggregate]:
        for aggregate in self.aggregates:
            if aggregate.strike == strike:
                return aggregate
        return None


@dataclass(frozen=True)
class FlowPoint:
    """Unsigned per-trade value tagged with its option type, for bucketing."""
    timestamp: int
    time_str: str
    full_date: str
    value: float
    put_call: OptionType
    spot: float = 0.0

    @property
    def signed_value(self) -> float:
        return self.value if self.put_call is OptionType.CALL else -self.value


class BucketResolution(Enum):
    """Time bucket widths used for level-of-detail bucketing."""
    MINUTE = ("1m", MINUTE_MS)
    QUARTER_HOUR = ("15m", 15 * MINUTE_MS)
    HOUR = ("1h", HOUR_MS)

    def __init__(self, label: str, width_ms: int):
        self.label = label
        self.width_ms = width_ms

    def bucket_key(self, timestamp: int) -> int:
        """Start of the bucket containing timestamp."""
        return (timestamp // self.width_ms) * self.width_ms


@dataclass(frozen=True)
class TimeBucket:
    """
    Fixed-width time bucket of signed net flow.

    net_value adds call values and subtracts put values, matching the
    StrikeAggregate sign convention.
    """
    bucket_time: int
    resolution: BucketResolution
    time_str: str = ""
    full_date: str = ""
    net_value: float = 0.0
    spot_sum: float = 0.0
    count: int = 0

    def add(self, point: FlowPoint) -> "TimeBucket":
        """Return a copy with one trade folded in."""
        return replace(self,
                       net_value=self.net_value + point.signed_value,
                       spot_sum=self.spot_sum + point.spot,
                       count=self.count + 1)

    @property
    def avg_spot(self) -> float:
        return self.spot_sum / self.count if self.count else 0.0


class Signal(str, Enum):
    """Crossover direction of cumulative flow against its moving average."""
    BULLISH = "bullish"
    BEARISH = "bearish"


@dataclass(frozen=True)
class MomentumPoint:
    """Cumulative net flow at one bucket with its moving average and signal."""
    timestamp: int
    net_cumulative: float
    spot: float
    resolution: BucketResolution
    time_str: str = ""
    full_date: str = ""
    ma: Optional[float] = None          # None until the window is full
    signal: Optional[Signal] = None


@dataclass(frozen=True)
class TrendAnalysis:
    """Start-to-end direction of cumulative flow and spot."""
    net_flow_trend: str = "Flat"
    spot_trend: str = "Flat"
    divergence: str = "None"


@dataclass(frozen=True)
class FlowSummary:
    """Headline figures derived from an aggregation and momentum series."""
    metric: Metric
    total_calls: float
    total_puts: float
    put_call_ratio: Optional[float]     # None when calls total is zero
    sentiment: Optional[str]
    call_pct: float
    put_pct: float
    top_strike: Optional[float]
    top_strike_value: float
    trend: TrendAnalysis

    @property
    def put_call_ratio_display(self) -> str:
        if self.put_call_ratio is None:
            return "N/A"
        return f"{self.put_call_ratio:.2f}"
