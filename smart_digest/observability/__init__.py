"""Observability: structured logging and in-process metrics."""

from smart_digest.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from smart_digest.observability.metrics import PipelineMetrics


__all__ = [
    "PipelineMetrics",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
]
