"""Article fetch layer: HTTP download plus readability extraction.

This module provides:
- ``ArticleFetcher``, the HTTP-backed ``ContentSource``
- Scheme, redirect, size, and content-length validation
- Credential redaction for logging
"""

from smart_digest.fetch.client import ArticleFetcher
from smart_digest.fetch.config import FetchConfig
from smart_digest.fetch.extract import (
    ExtractedDocument,
    ExtractionError,
    clean_text,
    extract_document,
)
from smart_digest.fetch.models import Article
from smart_digest.fetch.protocols import ContentSource
from smart_digest.fetch.redact import (
    mask_secret,
    redact_headers,
    redact_url_credentials,
)


__all__ = [
    # Client
    "ArticleFetcher",
    "ContentSource",
    # Config
    "FetchConfig",
    # Models
    "Article",
    # Extraction
    "ExtractedDocument",
    "ExtractionError",
    "clean_text",
    "extract_document",
    # Redaction
    "mask_secret",
    "redact_headers",
    "redact_url_credentials",
]
