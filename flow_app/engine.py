"""
Main flow analytics engine coordinator.

Orchestrates the analytics pipeline: raw text normalization, dataset
merging, strike aggregation, time bucketing and momentum signals. Every
call is a pure function of its arguments and the engine's immutable
configuration; filters, metric and window length are always passed in.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .config.defaults import DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.merger import ALL_DATASETS, ALL_EXPIRIES, available_expiries, merge_datasets
from .data.models import Dataset, Metric, TradeRecord, coerce_metric
from .data.normalizer import TradeNormalizer
from .errors import InvalidParameterError
from .logging.config import get_flow_logger
from .metrics.buckets import bucket_flow, extract_flow_points
from .metrics.momentum import compute_momentum, validate_window_length
from .metrics.strikes import aggregate_by_strike, filter_trades
from .metrics.summary import build_context, summarize
from .models.metrics import FlowSummary, MomentumPoint, StrikeAggregation, TimeBucket

logger = structlog.get_logger(__name__)
flow_logger = get_flow_logger(__name__)


@dataclass(frozen=True)
class FlowAnalysis:
    """Every derived view of one working record set under one set of filters."""
    records: tuple[TradeRecord, ...]
    expiries: tuple[str, ...]
    aggregation: StrikeAggregation
    buckets: tuple[TimeBucket, ...]
    momentum: tuple[MomentumPoint, ...]
    summary: FlowSummary
    context: str


class FlowAnalyticsEngine:
    """
    Coordinator for the options flow analytics pipeline.

    Raw Text → Normalization → Merge → (Strike Aggregation | Buckets → Momentum)
    """

    def __init__(self, config: Optional[DefaultConfig] = None) -> None:
        """Initialize the engine with an immutable configuration."""
        self.logger = flow_logger
        self.config = config or get_default_config()
        self.normalizer = TradeNormalizer(self.config.time.timezone)

        self.logger.info(
            "Flow analytics engine initialized",
            timezone=self.config.time.timezone,
            whale_premium=self.config.whale.premium_threshold,
            whale_size=self.config.whale.size_threshold
        )

    @classmethod
    def from_config_dir(
        cls,
        config_dir: Optional[Union[str, Path]] = None,
        symbol: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> "FlowAnalyticsEngine":
        """
        Build an engine from YAML configuration with 3-tier precedence.

        Raises:
            InvalidParameterError: If the merged configuration is invalid
        """
        loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        merged = loader.merge_config(symbol, overrides)

        validation_errors = ConfigValidator.validate_config(merged)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            logger.error("Configuration validation failed", symbol=symbol, errors=error_msgs)
            raise InvalidParameterError(
                "Invalid configuration: " + "; ".join(error_msgs),
                parameter="config",
                value=error_msgs
            )

        return cls(loader.load(symbol, overrides))

    def normalize(self, raw_text: str) -> list[TradeRecord]:
        """Parse tabular flow text into normalized trade records."""
        return list(self.normalizer.normalize(raw_text).records)

    def merge_datasets(self, datasets: Sequence[Dataset],
                       selection: str = ALL_DATASETS) -> list[TradeRecord]:
        """Build the working record set: the deduplicated union or one dataset."""
        return merge_datasets(datasets, selection)

    def aggregate_by_strike(self, records: Sequence[TradeRecord], expiry: str = ALL_EXPIRIES,
                            metric: Union[Metric, str] = Metric.PREMIUM,
                            min_value: float = 0) -> StrikeAggregation:
        """Fold filtered trades into per-strike aggregates and totals."""
        return aggregate_by_strike(records, expiry, coerce_metric(metric), min_value,
                                   self.config.whale)

    def bucket_flow(self, records: Sequence[TradeRecord],
                    metric: Union[Metric, str] = Metric.PREMIUM,
                    expiry: str = ALL_EXPIRIES, min_value: float = 0) -> list[TimeBucket]:
        """Filter trades and fold them into level-of-detail time buckets."""
        metric = coerce_metric(metric)
        filtered = filter_trades(records, expiry, metric, min_value)
        return bucket_flow(extract_flow_points(filtered, metric), params=self.config.buckets)

    def compute_momentum(self, records: Sequence[TradeRecord],
                         metric: Union[Metric, str] = Metric.PREMIUM,
                         window_length: Optional[int] = None,
                         expiry: str = ALL_EXPIRIES,
                         min_value: float = 0) -> list[MomentumPoint]:
        """
        Compute the cumulative net-flow series with moving average and signals.

        Args:
            records: Working trade set
            metric: Metric the flow is measured in
            window_length: Moving-average window; configured default when omitted
            expiry: Exact expiry to keep, or 'All'
            min_value: Minimum metric value a trade must reach

        Raises:
            InvalidParameterError: If metric or window_length is invalid
        """
        if window_length is None:
            window_length = self.config.momentum.default_window

        buckets = self.bucket_flow(records, metric, expiry, min_value)
        return compute_momentum(buckets, window_length, self.config.momentum)

    def analyze(self, datasets: Sequence[Dataset], selection: str = ALL_DATASETS,
                expiry: str = ALL_EXPIRIES, metric: Union[Metric, str] = Metric.PREMIUM,
                min_value: float = 0, window_length: Optional[int] = None) -> FlowAnalysis:
        """Run the full pipeline for one selection and set of filters."""
        metric = coerce_metric(metric)
        if window_length is None:
            window_length = self.config.momentum.default_window
        validate_window_length(window_length, self.config.momentum)

        records = self.merge_datasets(datasets, selection)
        aggregation = self.aggregate_by_strike(records, expiry, metric, min_value)
        buckets = self.bucket_flow(records, metric, expiry, min_value)
        momentum = compute_momentum(buckets, window_length, self.config.momentum)
        summary = summarize(aggregation, momentum)
        symbol = records[0].symbol if records else None

        self.logger.info(
            "Flow analysis complete",
            selection=selection,
            expiry=expiry,
            metric=metric.value,
            min_value=min_value,
            window_length=window_length,
            records=len(records),
            strikes=len(aggregation.aggregates),
            buckets=len(buckets),
            put_call_ratio=summary.put_call_ratio_display
        )

        return FlowAnalysis(
            records=tuple(records),
            expiries=tuple(available_expiries(records)),
            aggregation=aggregation,
            buckets=tuple(buckets),
            momentum=tuple(momentum),
            summary=summary,
            context=build_context(summary, aggregation, symbol, min_value),
        )
