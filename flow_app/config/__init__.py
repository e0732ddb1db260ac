"""
Configuration module.

Frozen dataclass defaults, YAML overrides with 3-tier precedence and
parameter validation.
"""
