"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .defaults import BucketParams, FilterParams, MomentumParams, TimeParams, WhaleParams


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


_SECTIONS = {
    "whale": WhaleParams,
    "buckets": BucketParams,
    "momentum": MomentumParams,
    "time": TimeParams,
    "filters": FilterParams,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_whale_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate whale threshold parameters."""
        errors = []

        for field in ("premium_threshold", "size_threshold"):
            if field in params:
                value = params[field]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_bucket_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate bucketing span limits."""
        errors = []

        for field in ("hourly_span_ms", "quarter_hour_span_ms"):
            if field in params:
                value = params[field]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive integer",
                        value=value
                    ))

        hourly = params.get("hourly_span_ms")
        quarter = params.get("quarter_hour_span_ms")
        if not errors and hourly is not None and quarter is not None and hourly <= quarter:
            errors.append(ValidationError(
                field="hourly_span_ms",
                message="Must be greater than quarter_hour_span_ms",
                value=hourly
            ))

        return errors

    @staticmethod
    def validate_momentum_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate moving-average window parameters; max_window may be None."""
        errors = []

        for field in ("default_window", "min_window", "max_window"):
            if field in params:
                value = params[field]
                if field == "max_window" and value is None:
                    continue
                if not isinstance(value, int) or isinstance(value, bool) or value < 2:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be an integer of at least 2",
                        value=value
                    ))

        if errors:
            return errors

        min_window = params.get("min_window", 2)
        max_window = params.get("max_window")
        if max_window is not None and min_window > max_window:
            errors.append(ValidationError(
                field="min_window",
                message="Must not exceed max_window",
                value=min_window
            ))

        if "default_window" in params:
            value = params["default_window"]
            if value < min_window or (max_window is not None and value > max_window):
                bounds = f"between {min_window} and {max_window}" if max_window is not None \
                    else f"at least {min_window}"
                errors.append(ValidationError(
                    field="default_window",
                    message=f"Must be {bounds}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_time_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate time parameters."""
        errors = []

        if "timezone" in params:
            value = params["timezone"]
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError, TypeError):
                errors.append(ValidationError(
                    field="timezone",
                    message="Must be a valid IANA timezone name",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_known_fields(config: dict[str, Any]) -> list[ValidationError]:
        """Report sections and fields the configuration dataclasses do not define."""
        errors = []

        for section, value in config.items():
            params_class = _SECTIONS.get(section)
            if params_class is None:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=value
                ))
                continue
            if not isinstance(value, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=value
                ))
                continue

            known = {f.name for f in fields(params_class)}
            for key in value:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration field",
                        value=value[key]
                    ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration dictionary."""
        errors = cls.validate_known_fields(config)
        if errors:
            return errors

        errors.extend(cls.validate_whale_params(config.get("whale", {})))
        errors.extend(cls.validate_bucket_params(config.get("buckets", {})))
        errors.extend(cls.validate_momentum_params(config.get("momentum", {})))
        errors.extend(cls.validate_time_params(config.get("time", {})))
        return errors
