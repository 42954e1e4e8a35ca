"""Shared, deterministic timestamps for tests."""

from datetime import datetime


# Fixed "generated at" time so rendered reports are stable across runs.
FIXED_NOW = datetime(2025, 3, 14, 9, 26, 0)


def fixed_clock() -> datetime:
    """Clock stub returning FIXED_NOW."""
    return FIXED_NOW
