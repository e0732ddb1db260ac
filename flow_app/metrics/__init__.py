"""Flow analytics: strike aggregation, time bucketing, momentum and summary"""

from .buckets import bucket_flow, bucket_trades, extract_flow_points, select_resolution
from .momentum import compute_momentum, cumulative_flow, detect_signals, moving_average
from .strikes import aggregate_by_strike, filter_trades, is_whale
from .summary import analyze_trend, build_context, put_call_ratio, summarize

__all__ = [
    "aggregate_by_strike",
    "filter_trades",
    "is_whale",
    "extract_flow_points",
    "select_resolution",
    "bucket_flow",
    "bucket_trades",
    "cumulative_flow",
    "moving_average",
    "detect_signals",
    "compute_momentum",
    "put_call_ratio",
    "analyze_trend",
    "summarize",
    "build_context",
]
