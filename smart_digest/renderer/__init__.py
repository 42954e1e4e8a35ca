"""Digest report rendering (Markdown via Jinja2, and JSON)."""

from smart_digest.renderer.report import (
    DigestSelection,
    ReportRenderer,
    score_badge,
)


__all__ = [
    "DigestSelection",
    "ReportRenderer",
    "score_badge",
]
