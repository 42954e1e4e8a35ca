"""Data models for the fetch layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Article:
    """Readable content extracted from a web page.

    Attributes:
        url: Source URL as requested.
        title: Document title, empty if none was found.
        content: Cleaned body text, truncated to the configured limit.
        excerpt: Short excerpt for previews.
    """

    url: str
    title: str
    content: str
    excerpt: str = ""
