"""Default configuration parameters for the options flow engine."""

from dataclasses import dataclass
from typing import Optional

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


@dataclass(frozen=True)
class WhaleParams:
    """Large-trade thresholds, one per metric."""
    premium_threshold: float = 1_000_000.0           # Dollars
    size_threshold: float = 1_000.0                  # Contracts


@dataclass(frozen=True)
class BucketParams:
    """Level-of-detail span limits for time bucketing."""
    hourly_span_ms: int = 7 * DAY_MS                 # Above this span use 1h buckets
    quarter_hour_span_ms: int = DAY_MS               # Above this span use 15m buckets


@dataclass(frozen=True)
class MomentumParams:
    """Moving-average window parameters."""
    default_window: int = 30
    min_window: int = 2
    max_window: Optional[int] = None                # No upper bound unless configured


@dataclass(frozen=True)
class TimeParams:
    """Time-based parameters."""
    timezone: str = "UTC"                            # Zone for wall-clock trade times


@dataclass(frozen=True)
class FilterParams:
    """Minimum-value presets offered per metric."""
    premium_presets: tuple = (0, 10_000, 100_000, 500_000, 1_000_000)
    size_presets: tuple = (0, 100, 500, 1_000, 5_000)


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    whale: WhaleParams
    buckets: BucketParams
    momentum: MomentumParams
    time: TimeParams
    filters: FilterParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        whale=WhaleParams(),
        buckets=BucketParams(),
        momentum=MomentumParams(),
        time=TimeParams(),
        filters=FilterParams(),
    )


def config_from_dict(data: dict) -> DefaultConfig:
    """Build a DefaultConfig from a merged configuration dictionary."""
    filters = dict(data.get("filters", {}))
    for key in ("premium_presets", "size_presets"):
        if key in filters:
            filters[key] = tuple(filters[key])

    return DefaultConfig(
        whale=WhaleParams(**data.get("whale", {})),
        buckets=BucketParams(**data.get("buckets", {})),
        momentum=MomentumParams(**data.get("momentum", {})),
        time=TimeParams(**data.get("time", {})),
        filters=FilterParams(**filters),
    )
