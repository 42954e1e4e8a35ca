"""Constants for the fetch layer.

Centralizes HTTP and extraction limits to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300

# Redirects followed before giving up
MAX_REDIRECTS = 10

# Request timeout (seconds)
DEFAULT_TIMEOUT_SECONDS = 30.0

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

# Extraction limits (characters)
MIN_CONTENT_LENGTH = 100
MAX_CONTENT_LENGTH = 15000
MAX_EXCERPT_LENGTH = 300
TRUNCATION_MARKER = "\n...[truncated]"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (compatible; SmartDigest/1.0; +https://github.com/smart-digest)"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.5,ja;q=0.3"

ALLOWED_SCHEMES = frozenset({"http", "https"})
