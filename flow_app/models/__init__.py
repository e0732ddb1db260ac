"""
Analytics result models.

Immutable data structures for strike aggregates, time buckets, momentum
points and flow summaries. Follows functional programming principles with
frozen dataclasses.
"""
