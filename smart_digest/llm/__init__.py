"""LLM scoring backends.

Provides the ``ScoringBackend`` protocol, OpenAI / Ollama / Gemini
implementations, and robust parsing of their JSON replies.
"""

from smart_digest.llm.base import BaseScoringBackend
from smart_digest.llm.factory import create_scoring_backend
from smart_digest.llm.models import UNCATEGORIZED, AnalysisResult
from smart_digest.llm.parser import parse_analysis_result
from smart_digest.llm.protocols import ScoringBackend


__all__ = [
    "UNCATEGORIZED",
    "AnalysisResult",
    "BaseScoringBackend",
    "ScoringBackend",
    "create_scoring_backend",
    "parse_analysis_result",
]
