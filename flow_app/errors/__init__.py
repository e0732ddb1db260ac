"""
Error classification for trade record processing.

Malformed single fields never raise; they fall back to safe defaults. The
exceptions below cover structurally invalid input and caller contract
violations.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
    ProjectFormatError,
    InvalidParameterError,
)

__all__ = [
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    "ProjectFormatError",
    "InvalidParameterError",
]
