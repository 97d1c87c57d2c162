"""Pydantic models for index records and run reports."""
