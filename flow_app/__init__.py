"""
Flow App - Options Flow Analytics Engine

Turns imported options-trade tick records into derived views for
visualization: per-strike call/put aggregates split into normal and whale
tiers, and a time-bucketed cumulative net-flow series with a moving-average
crossover signal.
"""

__version__ = "0.1.0"
__author__ = "Flow App Team"
