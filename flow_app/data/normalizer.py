"""
Normalization pipeline converting raw flow rows into TradeRecords.

This module provides the TradeNormalizer class that drives parsing of
tabular text and keyed row mappings (including compact project rows) into
immutable TradeRecord objects. Malformed fields degrade to defaults and are
counted; a normalization pass never aborts because of a single bad field.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import tzinfo
from typing import Any, Optional

from ..logging.config import get_logger, log_degraded_parse
from ..utils.time import resolve_timezone
from .models import NormalizationResult, NormalizationStats, OptionType, TradeRecord
from .parsers import (
    parse_csv,
    parse_datetime,
    parse_optional_number,
    parse_optional_premium,
)

logger = get_logger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def rehydrate_compact(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> list[dict[str, Any]]:
    """
    Zip compact project rows back into keyed row mappings.

    Rows shorter than the header list leave the trailing fields as None;
    extra values are ignored.
    """
    keyed = []
    for row in rows:
        keyed.append({
            key: (row[index] if index < len(row) else None)
            for index, key in enumerate(headers)
        })
    return keyed


class TradeNormalizer:
    """
    Converts raw flow rows into TradeRecords.

    Holds only the timezone wall-clock trade times are interpreted in.
    """

    def __init__(self, timezone_name: str = "UTC"):
        self.timezone_name = timezone_name
        self.tz: tzinfo = resolve_timezone(timezone_name)

    def normalize(self, raw_text: str) -> NormalizationResult:
        """
        Normalize tabular flow text.

        Args:
            raw_text: Comma-separated text with a header row

        Returns:
            NormalizationResult, empty when the text has fewer than two lines
        """
        rows = parse_csv(raw_text, self.tz)
        if not rows:
            logger.info("No data rows found in tabular input")
            return NormalizationResult()
        return self._normalize(rows, source="csv")

    def normalize_rows(self, rows: Iterable[Mapping[str, Any]],
                       source: str = "rows") -> NormalizationResult:
        """Normalize already-keyed rows, e.g. the data of a project dataset."""
        return self._normalize(rows, source=source)

    def normalize_record(self, row: Mapping[str, Any],
                         stats: Optional[NormalizationStats] = None) -> TradeRecord:
        """Normalize a single keyed row into a TradeRecord."""
        stats = stats if stats is not None else NormalizationStats()
        stats.rows += 1

        date = _text(row.get("date"))
        time = _text(row.get("time"))

        timestamp = row.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not timestamp:
            timestamp = parse_datetime(date, time, self.tz)
        timestamp = int(timestamp)
        if timestamp == 0:
            stats.zero_timestamps += 1

        raw_premium = row.get("premium")
        premium = parse_optional_premium(raw_premium)
        if premium is None and not _is_blank(raw_premium):
            stats.malformed_premium += 1

        strike = self._number(row.get("strike"), stats)
        spot = self._number(row.get("spot"), stats)
        size = self._number(row.get("size"), stats)
        raw_price = row.get("price")
        price = parse_optional_premium(raw_price)
        if price is None and not _is_blank(raw_price):
            stats.malformed_numbers += 1
        volume = self._number(row.get("volume"), stats)
        open_interest = self._number(row.get("open_int"), stats)

        put_call = self._option_type(row.get("put_call"), stats)

        record = TradeRecord(
            date=date,
            time=time,
            timestamp=timestamp,
            symbol=_text(row.get("symbol")),
            expiry=_text(row.get("expiry")),
            strike=strike,
            put_call=put_call,
            side=_text(row.get("side")),
            spot=spot,
            size=size if size is not None else 0.0,
            price=price if price is not None else 0.0,
            premium=premium if premium is not None else 0.0,
            sweep_block_split=_text(row.get("sweep_block_split")),
            volume=volume,
            open_interest=open_interest,
            conditions=_text(row.get("conds")),
        )

        if not record.participates:
            stats.non_participating += 1

        return record

    def _normalize(self, rows: Iterable[Mapping[str, Any]], source: str) -> NormalizationResult:
        stats = NormalizationStats()
        records = tuple(self.normalize_record(row, stats) for row in rows)

        log_degraded_parse(logger, source, stats.as_counters(), {"rows": stats.rows})
        logger.debug("Normalized trade rows", source=source, rows=stats.rows)

        return NormalizationResult(records=records, stats=stats)

    @staticmethod
    def _number(value: Any, stats: NormalizationStats) -> Optional[float]:
        result = parse_optional_number(value)
        if result is None and not _is_blank(value):
            stats.malformed_numbers += 1
        return result

    @staticmethod
    def _option_type(value: Any, stats: NormalizationStats) -> Optional[OptionType]:
        text = _text(value).lower()
        if not text:
            return None
        try:
            return OptionType(text)
        except ValueError:
            stats.unknown_put_call += 1
            return None
