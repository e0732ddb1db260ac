"""
Field parsers for raw options-flow exports.

This module converts the textual fields of a flow export (premium strings
with K/M suffixes, 12-hour date/time pairs, numeric strings) into typed
values and splits tabular text into keyed rows. Malformed fields never
raise: they fall back to a safe default so one bad field cannot abort an
import.
"""

import math
from datetime import timezone, tzinfo
from typing import Any, Optional, Union

from ..utils.time import wall_clock_to_epoch_ms

_THOUSAND = 1_000
_MILLION = 1_000_000


def parse_optional_premium(value: Any) -> Optional[float]:
    """Parse a premium field, returning None when empty or malformed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    clean = str(value).replace("$", "").replace(",", "")
    multiplier = 1
    if "K" in clean:
        multiplier = _THOUSAND
    elif "M" in clean:
        multiplier = _MILLION
    clean = clean.replace("K", "").replace("M", "").strip()
    if not clean:
        return None

    try:
        result = float(clean) * multiplier
    except ValueError:
        return None

    return result if math.isfinite(result) else None


def parse_premium(value: Any) -> float:
    """
    Parse a premium field into dollars.

    Numbers pass through unchanged. Strings have every '$' and grouping
    comma removed; a 'K' multiplies by 1,000, otherwise an 'M' by 1,000,000.
    Both letters are stripped before the numeric parse, so only one suffix
    should be present.

    Examples:
        "$85.7K" -> 85700.0
        "$3M" -> 3000000.0
        "1,250" -> 1250.0

    Returns:
        Premium in dollars, 0.0 for empty, missing or unparseable input
    """
    result = parse_optional_premium(value)
    return 0.0 if result is None else result


def parse_optional_number(value: Any) -> Optional[float]:
    """Parse a numeric field, returning None when empty or malformed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    clean = str(value).replace(",", "").strip()
    if not clean:
        return None

    try:
        result = float(clean)
    except ValueError:
        return None

    return result if math.isfinite(result) else None


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a numeric field, returning default when empty or malformed."""
    result = parse_optional_number(value)
    return default if result is None else result


def parse_datetime(date_str: Optional[str], time_str: Optional[str],
                   tz: tzinfo = timezone.utc) -> int:
    """
    Convert an MM/DD/YYYY date and HH:MM:SS AM|PM time to epoch milliseconds.

    Hour 12 maps to 0 before a PM marker adds 12, so 12:xx AM is hour 0,
    12:xx PM is hour 12 and 01:xx PM is hour 13. Seconds default to 0.

    Args:
        date_str: Calendar date, month first
        time_str: 12-hour wall-clock time with meridiem marker
        tz: Zone the wall-clock time is expressed in

    Returns:
        Epoch milliseconds, or 0 when either part is missing or malformed
    """
    if not date_str or not time_str:
        return 0

    try:
        month, day, year = (int(part) for part in date_str.strip().split("/"))

        parts = time_str.strip().split(" ")
        time_parts = parts[0].split(":")
        hours = int(time_parts[0])
        minutes = int(time_parts[1])
        seconds = int(time_parts[2]) if len(time_parts) > 2 and time_parts[2] else 0
        modifier = parts[1].upper() if len(parts) > 1 else None

        if hours == 12:
            hours = 0
        if modifier == "PM":
            hours += 12

        return wall_clock_to_epoch_ms(year, month, day, hours, minutes, seconds, tz)
    except (ValueError, IndexError, OverflowError):
        return 0


def split_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into raw field values.

    Double quotes toggle quoted mode and are dropped; commas inside quotes
    are kept literally. A doubled quote is not an escape.
    """
    values = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            continue
        if char == "," and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)

    values.append("".join(current))
    return values


def parse_csv(text: str, tz: tzinfo = timezone.utc) -> list[dict[str, Union[str, int, None]]]:
    """
    Parse tabular flow text into rows keyed by header name.

    The first non-blank line holds the field names. Blank lines are skipped.
    Each row gets a derived 'timestamp' from its date and time fields.

    Returns:
        List of row dicts, empty when fewer than two non-blank lines exist
    """
    if not text:
        return []

    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        return []

    headers = [header.strip() for header in lines[0].split(",")]
    rows = []

    for line in lines[1:]:
        values = split_csv_line(line)
        row: dict[str, Union[str, int, None]] = {}
        for i, header in enumerate(headers):
            row[header] = values[i].strip() if i < len(values) else None
        row["timestamp"] = parse_datetime(row.get("date"), row.get("time"), tz)
        rows.append(row)

    return rows
