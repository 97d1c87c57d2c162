"""Identifier, aggregation, parsing, error and logging helpers."""
