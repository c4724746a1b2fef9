"""Reusable building blocks: sets, validation, clocks, retries, IDs and file, string and JSON helpers."""

__version__ = "0.1.0"