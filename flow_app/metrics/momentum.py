"""Cumulative net flow, trailing moving average and crossover signals"""

from collections.abc import Sequence
from typing import Optional

from ..config.defaults import MomentumParams
from ..errors import InvalidParameterError
from ..logging.config import get_logger
from ..models.metrics import MomentumPoint, Signal, TimeBucket

logger = get_logger(__name__)


def validate_window_length(window_length: int, params: Optional[MomentumParams] = None) -> int:
    """
    Check a moving-average window length against the configured bounds.

    The window must be an integer of at least min_window; max_window only
    applies when configured.

    Raises:
        InvalidParameterError: If window_length is not an integer within bounds
    """
    params = params or MomentumParams()
    if isinstance(window_length, bool) or not isinstance(window_length, int):
        raise InvalidParameterError(
            f"Window length must be an integer, got {window_length!r}",
            parameter="window_length",
            value=window_length
        )
    if window_length < params.min_window:
        raise InvalidParameterError(
            f"Window length must be at least {params.min_window}, got {window_length}",
            parameter="window_length",
            value=window_length
        )
    if params.max_window is not None and window_length > params.max_window:
        raise InvalidParameterError(
            f"Window length must not exceed {params.max_window}, got {window_length}",
            parameter="window_length",
            value=window_length
        )
    return window_length


def cumulative_flow(buckets: Sequence[TimeBucket]) -> list[float]:
    """Running total of bucket net values across the whole series."""
    running = 0.0
    cumulative = []
    for bucket in buckets:
        running += bucket.net_value
        cumulative.append(running)
    return cumulative


def moving_average(values: Sequence[float], window_length: int) -> list[Optional[float]]:
    """
    Calculate the trailing simple moving average of a series.

    SMA[i] = mean(values[i - N + 1 .. i]) for i >= N - 1

    Args:
        values: Series in chronological order
        window_length: Window size N

    Returns:
        One entry per value; None where fewer than N values exist
    """
    averages: list[Optional[float]] = []
    for i in range(len(values)):
        if i < window_length - 1:
            averages.append(None)
            continue
        window = values[i - window_length + 1:i + 1]
        averages.append(sum(window) / window_length)
    return averages


def detect_signals(cumulative: Sequence[float], averages: Sequence[Optional[float]],
                   window_length: int) -> list[Optional[Signal]]:
    """
    Detect crossovers of cumulative flow through its moving average.

    A signal needs the previous bucket's average too, so the first possible
    signal is at index N. Bullish when flow moves from below to above its
    average; bearish for the reverse. Touching the average is not a cross.
    """
    signals: list[Optional[Signal]] = [None] * len(cumulative)

    for i in range(window_length, len(cumulative)):
        ma = averages[i]
        prev_ma = averages[i - 1]
        if ma is None or prev_ma is None:
            continue

        prev_value = cumulative[i - 1]
        value = cumulative[i]
        if prev_value < prev_ma and value > ma:
            signals[i] = Signal.BULLISH
        elif prev_value > prev_ma and value < ma:
            signals[i] = Signal.BEARISH

    return signals


def compute_momentum(buckets: Sequence[TimeBucket], window_length: int,
                     params: Optional[MomentumParams] = None) -> list[MomentumPoint]:
    """
    Build the momentum series for a bucketed flow sequence.

    Args:
        buckets: Time buckets in chronological order
        window_length: Moving-average window, an integer >= 2
        params: Window bounds, defaults when omitted

    Returns:
        One MomentumPoint per bucket

    Raises:
        InvalidParameterError: If window_length is out of bounds
    """
    window_length = validate_window_length(window_length, params)

    cumulative = cumulative_flow(buckets)
    averages = moving_average(cumulative, window_length)
    signals = detect_signals(cumulative, averages, window_length)

    points = [
        MomentumPoint(
            timestamp=bucket.bucket_time,
            net_cumulative=cumulative[i],
            spot=bucket.avg_spot,
            resolution=bucket.resolution,
            time_str=bucket.time_str,
            full_date=bucket.full_date,
            ma=averages[i],
            signal=signals[i],
        )
        for i, bucket in enumerate(buckets)
    ]

    logger.debug(
        "Computed momentum",
        buckets=len(buckets),
        window_length=window_length,
        signals=sum(1 for signal in signals if signal is not None)
    )

    return points
