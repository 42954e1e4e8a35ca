"""Protocol interface for content sources."""

import threading
from typing import Protocol, runtime_checkable

from smart_digest.fetch.models import Article


@runtime_checkable
class ContentSource(Protocol):
    """Protocol for turning a URL into readable article text.

    Implementations are invoked from several worker threads at once and
    must be safe for concurrent use.
    """

    def fetch(self, url: str, cancel: threading.Event | None = None) -> Article:
        """Fetch a URL and extract its article content.

        Args:
            url: Absolute http(s) URL.
            cancel: Event that, once set, aborts the fetch.

        Returns:
            Extracted Article.

        Raises:
            FetchError: If the content is unreachable or unextractable.
            CancellationError: If ``cancel`` was set before completion.
        """
        ...
