"""Record ingestion and pipeline orchestration.

This package reads input records, resolves data sources and drives each
record through its configured text groups.
"""
