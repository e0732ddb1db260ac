"""
Data quality error classifications for trade record processing.

These exceptions categorize the structural problems that can surface while
importing trade sets or project files. Single malformed fields never raise;
they degrade to a default value and are only counted.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """Required data is completely missing."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedDataError(DataQualityError):
    """Data exists but is in incorrect format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class ProjectFormatError(MalformedDataError):
    """Project file is not a JSON array of datasets."""

    def __init__(self, message: str, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, raw_data=raw_data,
                         expected_format="JSON array of datasets", **kwargs)


class InvalidParameterError(ValueError):
    """Caller supplied an analysis parameter outside its contract."""

    def __init__(self, message: str, parameter: Optional[str] = None,
                 value: Any = None):
        super().__init__(message)
        self.parameter = parameter
        self.value = value
