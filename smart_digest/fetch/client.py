"""HTTP article fetcher with readability extraction."""

import threading
import time
from io import BytesIO
from types import TracebackType
from urllib.parse import urlparse

import httpx
import structlog

from smart_digest.errors import CancellationError, FetchError
from smart_digest.fetch.config import FetchConfig
from smart_digest.fetch.constants import (
    ALLOWED_SCHEMES,
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from smart_digest.fetch.extract import (
    ExtractionError,
    extract_document,
    truncate_content,
    truncate_excerpt,
)
from smart_digest.fetch.models import Article
from smart_digest.fetch.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()


class ArticleFetcher:
    """Fetches web pages and extracts their readable article text.

    Provides:
    - http/https scheme validation
    - Redirect limit and request timeout
    - Streaming body reads with a size cap and cancellation checks
    - Readability extraction with minimum and maximum length bounds

    One underlying ``httpx.Client`` is shared across worker threads.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Fetch configuration (defaults apply when omitted).
            transport: Optional transport, used by tests to mock HTTP.
        """
        self._config = config or FetchConfig()
        self._client = httpx.Client(
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
            max_redirects=self._config.max_redirects,
            headers=self._config.request_headers(),
            transport=transport,
        )
        self._log = logger.bind(component="fetch")

    def __enter__(self) -> "ArticleFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def fetch(self, url: str, cancel: threading.Event | None = None) -> Article:
        """Fetch a URL and extract clean article content.

        Args:
            url: The URL to fetch.
            cancel: Event that aborts the download once set.

        Returns:
            Article with cleaned, length-bounded content.

        Raises:
            FetchError: On invalid URL, redirect overflow, non-2xx status,
                oversized or unparseable content, or too little text.
            CancellationError: If ``cancel`` is set during the fetch.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=redact_url_credentials(url))

        self._validate_url(url)
        _check_cancelled(cancel)

        log.debug(
            "fetch_started",
            headers=redact_headers(self._config.request_headers()),
        )
        html_text = self._download(url, cancel)

        try:
            document = extract_document(html_text)
        except ExtractionError as e:
            msg = f"failed to parse content from {url}: {e}"
            raise FetchError(msg, url=url) from e

        if len(document.text) < self._config.min_content_length:
            msg = (
                f"extracted content too short from {url} "
                f"(got {len(document.text)} chars)"
            )
            raise FetchError(msg, url=url)

        article = Article(
            url=url,
            title=document.title,
            content=truncate_content(document.text, self._config.max_content_length),
            excerpt=truncate_excerpt(document.excerpt, self._config.max_excerpt_length),
        )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "fetch_complete",
            chars=len(article.content),
            duration_ms=round(duration_ms, 2),
        )
        return article

    def _validate_url(self, url: str) -> None:
        """Reject URLs without an http(s) scheme and host.

        Raises:
            FetchError: If the URL cannot be fetched by this client.
        """
        try:
            parsed = urlparse(url)
        except ValueError as e:
            msg = f"invalid URL {url}: {e}"
            raise FetchError(msg, url=url) from e

        if parsed.scheme not in ALLOWED_SCHEMES:
            msg = f"unsupported URL scheme: {parsed.scheme or '(none)'}"
            raise FetchError(msg, url=url)
        if not parsed.netloc:
            msg = f"invalid URL {url}: missing host"
            raise FetchError(msg, url=url)

    def _download(self, url: str, cancel: threading.Event | None) -> str:
        """Download and decode the response body.

        Args:
            url: URL to fetch.
            cancel: Cancellation event checked between chunks.

        Returns:
            Decoded response text.

        Raises:
            FetchError: On transport failure or non-2xx status.
            CancellationError: If cancelled mid-download.
        """
        try:
            with self._client.stream("GET", url) as response:
                status = response.status_code
                if not HTTP_STATUS_OK_MIN <= status < HTTP_STATUS_OK_MAX:
                    msg = f"HTTP {status} for URL {url}"
                    raise FetchError(msg, url=url, status_code=status)

                body = self._read_body_with_limit(response, url, cancel)
                encoding = response.encoding or "utf-8"
        except httpx.TooManyRedirects as e:
            msg = f"too many redirects for URL {url}"
            raise FetchError(msg, url=url) from e
        except httpx.TimeoutException as e:
            msg = f"request timed out for URL {url}: {e}"
            raise FetchError(msg, url=url) from e
        except httpx.HTTPError as e:
            msg = f"failed to fetch URL {url}: {e}"
            raise FetchError(msg, url=url) from e

        return body.decode(encoding, errors="replace")

    def _read_body_with_limit(
        self,
        response: httpx.Response,
        url: str,
        cancel: threading.Event | None,
    ) -> bytes:
        """Read the streamed body, enforcing the size cap.

        Raises:
            FetchError: If the body exceeds the configured limit.
            CancellationError: If cancelled between chunks.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            _check_cancelled(cancel)
            total_read += len(chunk)
            if total_read > max_size:
                msg = f"response from {url} exceeded limit of {max_size} bytes"
                raise FetchError(msg, url=url, status_code=response.status_code)
            buffer.write(chunk)

        return buffer.getvalue()


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        msg = "fetch cancelled"
        raise CancellationError(msg)
