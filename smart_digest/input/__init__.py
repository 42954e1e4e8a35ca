"""Job input parsing."""

from smart_digest.errors import InputError
from smart_digest.input.parser import JobParser


__all__ = ["InputError", "JobParser"]
