"""
Data ingestion and normalization module.

Handles parsing of raw flow exports, normalization into immutable trade
records, and merging of imported datasets into one working set.
"""
