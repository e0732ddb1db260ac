"""
Utility functions module.

Time handling shared across the system.

Time Semantics:
- Trade feeds carry wall-clock date and time strings without a zone
- Wall-clock times are interpreted in the configured timezone (UTC by default)
- Epoch milliseconds are the only time representation used by the analytics
- Unparseable date/time pairs map to timestamp 0 rather than failing
"""
