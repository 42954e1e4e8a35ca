"""Configuration loading and validation."""

from smart_digest.config.loader import ConfigLoader
from smart_digest.config.schemas import DigestConfig, LlmProvider


__all__ = [
    "ConfigLoader",
    "DigestConfig",
    "LlmProvider",
]
