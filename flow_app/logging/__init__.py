"""
Logging configuration and utilities for the options flow engine.
"""
from .config import configure_logging, get_flow_logger, get_logger, log_degraded_parse

__all__ = ["configure_logging", "get_logger", "get_flow_logger", "log_degraded_parse"]
