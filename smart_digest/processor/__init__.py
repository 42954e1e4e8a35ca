"""Concurrent processing pipeline.

Jobs flow from intake through a shared rate gate into a fixed-size
worker pool; every job yields exactly one Result.
"""

from smart_digest.processor.models import Job, Result
from smart_digest.processor.processor import ProgressCallback, Processor
from smart_digest.processor.rate_gate import RateGate
from smart_digest.processor.worker import WorkerPool


__all__ = [
    "Job",
    "Processor",
    "ProgressCallback",
    "RateGate",
    "Result",
    "WorkerPool",
]
