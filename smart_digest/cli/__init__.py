"""Command-line interface."""

from smart_digest.cli.digest import main


__all__ = ["main"]
