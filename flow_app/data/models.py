"""
Canonical data models for normalized trade records.

This module defines immutable data structures that represent clean, typed
options trades after normalization from raw CSV or project-file rows.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..errors import InvalidParameterError


class Metric(str, Enum):
    """Value a trade is measured by."""
    PREMIUM = "premium"
    SIZE = "size"


def coerce_metric(value: Any) -> Metric:
    """Accept a Metric or its name, rejecting anything else."""
    try:
        return Metric(value)
    except ValueError:
        raise InvalidParameterError(
            f"Unknown metric {value!r}, expected 'premium' or 'size'",
            parameter="metric",
            value=value
        ) from None


class OptionType(str, Enum):
    """Option side of a trade."""
    CALL = "call"
    PUT = "put"


# Column order of the tabular export format.
CSV_FIELDS = (
    "date", "time", "symbol", "expiry", "strike", "put_call", "side", "spot",
    "size", "price", "premium", "sweep_block_split", "volume", "open_int", "conds",
)


@dataclass(frozen=True)
class TradeRecord:
    """Single normalized options trade."""
    date: str                              # MM/DD/YYYY
    time: str                              # HH:MM:SS AM|PM
    timestamp: int                         # Epoch ms, 0 when date/time unparseable
    symbol: str = ""
    expiry: str = ""
    strike: Optional[float] = None
    put_call: Optional[OptionType] = None
    side: str = ""
    spot: Optional[float] = None           # Underlying price at trade time
    size: float = 0.0                      # Contracts
    price: float = 0.0
    premium: float = 0.0                   # Dollars
    sweep_block_split: str = ""
    volume: Optional[float] = None
    open_interest: Optional[float] = None
    conditions: str = ""

    @property
    def participates(self) -> bool:
        """True if the trade has both a non-zero strike and an option type."""
        return bool(self.strike) and self.put_call is not None

    @property
    def full_date(self) -> str:
        return f"{self.date} {self.time}"

    def metric_value(self, metric: Metric) -> float:
        """Value of the trade for the selected metric."""
        return self.premium if metric == Metric.PREMIUM else self.size

    def dedup_key(self) -> tuple:
        """Composite identity used when merging datasets."""
        return (
            self.date,
            self.time,
            self.timestamp,
            self.symbol,
            self.expiry,
            self.strike,
            self.put_call,
            self.size,
            self.price,
            self.premium,
        )

    def to_row(self) -> dict[str, Any]:
        """Row keyed by the tabular export headers."""
        return {
            "date": self.date,
            "time": self.time,
            "symbol": self.symbol,
            "expiry": self.expiry,
            "strike": self.strike,
            "put_call": self.put_call.value if self.put_call else None,
            "side": self.side,
            "spot": self.spot,
            "size": self.size,
            "price": self.price,
            "premium": self.premium,
            "sweep_block_split": self.sweep_block_split,
            "volume": self.volume,
            "open_int": self.open_interest,
            "conds": self.conditions,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Dataset:
    """Imported trade set with identity metadata. Owned by the caller."""
    id: str
    name: str
    file_name: str
    records: tuple[TradeRecord, ...] = ()
    upload_time: str = ""

    def __len__(self) -> int:
        return len(self.records)

    @property
    def first_date(self) -> Optional[str]:
        if self.records and self.records[0].date:
            return self.records[0].date
        return None


@dataclass
class NormalizationStats:
    """Counters for fields that fell back to defaults during one parse."""
    rows: int = 0
    malformed_premium: int = 0
    malformed_numbers: int = 0
    zero_timestamps: int = 0
    non_participating: int = 0
    unknown_put_call: int = 0

    def as_counters(self) -> dict[str, int]:
        return {
            "malformed_premium": self.malformed_premium,
            "malformed_numbers": self.malformed_numbers,
            "zero_timestamps": self.zero_timestamps,
            "non_participating": self.non_participating,
            "unknown_put_call": self.unknown_put_call,
        }


@dataclass(frozen=True)
class NormalizationResult:
    """Result of a normalization pass."""
    records: tuple[TradeRecord, ...] = ()
    stats: NormalizationStats = field(default_factory=NormalizationStats)

    @property
    def success(self) -> bool:
        return len(self.records) > 0
