"""Level-of-detail time bucketing of net option flow"""

from collections.abc import Iterable, Sequence
from typing import Optional

from ..config.defaults import BucketParams
from ..data.models import Metric, TradeRecord, coerce_metric
from ..logging.config import get_logger
from ..models.metrics import BucketResolution, FlowPoint, TimeBucket

logger = get_logger(__name__)


def extract_flow_points(records: Iterable[TradeRecord],
                        metric: Metric = Metric.PREMIUM) -> list[FlowPoint]:
    """
    Convert filtered trades into unsigned flow points in time order.

    Trades without a strike or option type are skipped. The sort is stable,
    so trades sharing a timestamp keep their input order.
    """
    metric = coerce_metric(metric)
    points = [
        FlowPoint(
            timestamp=record.timestamp,
            time_str=record.time,
            full_date=record.full_date,
            value=record.metric_value(metric),
            put_call=record.put_call,
            spot=record.spot or 0.0,
        )
        for record in records
        if record.participates
    ]
    points.sort(key=lambda point: point.timestamp)
    return points


def select_resolution(points: Sequence[FlowPoint],
                      params: Optional[BucketParams] = None) -> BucketResolution:
    """
    Choose a bucket width from the time span of sorted flow points.

    Spans over 7 days use 1 hour buckets, spans over 1 day use 15 minute
    buckets and anything shorter uses 1 minute buckets.

    Args:
        points: Flow points sorted ascending by timestamp
        params: Span limits, defaults when omitted

    Returns:
        Selected BucketResolution
    """
    params = params or BucketParams()
    if not points:
        return BucketResolution.MINUTE

    span = points[-1].timestamp - points[0].timestamp
    if span > params.hourly_span_ms:
        return BucketResolution.HOUR
    if span > params.quarter_hour_span_ms:
        return BucketResolution.QUARTER_HOUR
    return BucketResolution.MINUTE


def bucket_flow(points: Sequence[FlowPoint],
                resolution: Optional[BucketResolution] = None,
                params: Optional[BucketParams] = None) -> list[TimeBucket]:
    """
    Fold time-ordered flow points into fixed-width buckets.

    A bucket closes exactly when the floor-division key of the next point
    differs from the open bucket's key. Calls add to the bucket's net value
    and puts subtract from it.

    Args:
        points: Flow points sorted ascending by timestamp
        resolution: Bucket width; selected from the span when omitted
        params: Span limits used when selecting the resolution

    Returns:
        Buckets in time order; empty for no points
    """
    if not points:
        return []

    resolution = resolution or select_resolution(points, params)
    buckets: list[TimeBucket] = []
    current: Optional[TimeBucket] = None

    for point in points:
        key = resolution.bucket_key(point.timestamp)
        if current is None or current.bucket_time != key:
            if current is not None:
                buckets.append(current)
            current = TimeBucket(
                bucket_time=key,
                resolution=resolution,
                time_str=point.time_str,
                full_date=point.full_date,
            )
        current = current.add(point)

    buckets.append(current)

    logger.debug(
        "Bucketed flow",
        resolution=resolution.label,
        points=len(points),
        buckets=len(buckets)
    )

    return buckets


def bucket_trades(records: Iterable[TradeRecord], metric: Metric = Metric.PREMIUM,
                  params: Optional[BucketParams] = None) -> list[TimeBucket]:
    """Extract flow points from filtered trades and bucket them."""
    return bucket_flow(extract_flow_points(records, metric), params=params)
