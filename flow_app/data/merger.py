"""Dataset merging, deduplication and dataset-level descriptors."""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

from ..logging.config import get_logger
from ..utils.time import parse_calendar_date
from .models import Dataset, TradeRecord

logger = get_logger(__name__)

ALL_DATASETS = "all"
ALL_EXPIRIES = "All"


def deduplicate(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """
    Drop repeated trades, keeping the first occurrence.

    Identity is TradeRecord.dedup_key(). Survivors keep their input order.
    """
    seen = set()
    unique = []
    for record in records:
        key = record.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def merge_datasets(datasets: Sequence[Dataset], selection: str = ALL_DATASETS) -> list[TradeRecord]:
    """
    Build the working record set from imported datasets.

    Args:
        datasets: Imported datasets in import order
        selection: 'all' for the deduplicated union, otherwise a dataset id

    Returns:
        Working records. A single dataset passes through unchanged; an
        unknown id yields an empty list.
    """
    if selection == ALL_DATASETS:
        combined = [record for dataset in datasets for record in dataset.records]
        merged = deduplicate(combined)
        logger.debug(
            "Merged datasets",
            datasets=len(datasets),
            records=len(combined),
            duplicates=len(combined) - len(merged)
        )
        return merged

    for dataset in datasets:
        if dataset.id == selection:
            return list(dataset.records)

    logger.warning("Unknown dataset selection", selection=selection)
    return []


def available_expiries(records: Iterable[TradeRecord]) -> list[str]:
    """
    List the expiry filter choices for a record set.

    Returns 'All' followed by distinct expiries in calendar order. Expiries
    that are not MM/DD/YYYY dates sort after the rest, lexically.
    """
    expiries = {record.expiry for record in records if record.expiry}
    if not expiries:
        return []

    def sort_key(expiry: str) -> tuple[int, datetime, str]:
        parsed = parse_calendar_date(expiry)
        if parsed is None:
            return (1, datetime.min, expiry)
        return (0, parsed, expiry)

    return [ALL_EXPIRIES, *sorted(expiries, key=sort_key)]


def dataset_display_name(records: Sequence[TradeRecord], file_name: str) -> str:
    """Derive a display name for an imported dataset from its first trade."""
    if not records:
        return file_name

    first = records[0]
    if first.date and first.time and first.symbol:
        return f"{first.symbol} - {first.date} {first.time}"
    if first.date:
        return f"{first.symbol or 'Data'} - {first.date}"
    return file_name


def describe_datasets(datasets: Sequence[Dataset]) -> str:
    """Summarize the loaded datasets by count and first trade date."""
    if not datasets:
        return "0 Datasets Loaded"

    count_text = f"{len(datasets)} Dataset{'s' if len(datasets) != 1 else ''} Loaded"
    dates: list[str] = []
    for dataset in datasets:
        first_date: Optional[str] = dataset.first_date
        if first_date and first_date not in dates:
            dates.append(first_date)

    if len(dates) == 1:
        parsed = parse_calendar_date(dates[0])
        if parsed is None:
            return f"{dates[0]} ({count_text})"
        return f"{parsed.day} {parsed:%B %Y} ({count_text})"
    if len(dates) > 1:
        return f"Multiple Dates ({count_text})"
    return count_text
