"""Error types shared by the pipeline and its collaborators."""

from enum import Enum


class ErrorClass(str, Enum):
    """Classification of per-job errors.

    - FETCH: Content could not be fetched or extracted
    - ANALYSIS: Scoring backend unreachable or returned unusable output
    - CANCELLED: Job aborted by the shutdown signal
    """

    FETCH = "FETCH"
    ANALYSIS = "ANALYSIS"
    CANCELLED = "CANCELLED"


class DigestError(Exception):
    """Base exception for smart-digest errors."""


class FetchError(DigestError):
    """Article content is unreachable or unextractable.

    Attributes:
        url: URL that failed, if known.
        status_code: HTTP status code, if the server answered.
    """

    error_class = ErrorClass.FETCH

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AnalysisError(DigestError):
    """Scoring backend failed or returned an unusable response.

    Attributes:
        status_code: HTTP status code from the backend, 0 if unknown.
    """

    error_class = ErrorClass.ANALYSIS

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class CancellationError(DigestError):
    """Operation aborted because cancellation was requested."""

    error_class = ErrorClass.CANCELLED


class ConfigurationError(DigestError):
    """Invalid configuration, raised at construction time.

    Attributes:
        errors: Individual validation messages, if any.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InputError(DigestError):
    """Job input could not be parsed.

    Attributes:
        line_number: 1-based line of the offending input, if known.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number
