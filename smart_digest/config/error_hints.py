"""Error hints for configuration validation errors.

Turns pydantic validation errors into one-line messages with
actionable remediation hints.
"""

from typing import Final

from pydantic import ValidationError


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "enum": "Check the allowed values in the documentation.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "float_type": "This field must be a number.",
    "float_parsing": "This field must be a number.",
    "list_type": "This field must be a list.",
    "greater_than": "The value is too small. It must be positive.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "too_short": "The list is empty. Add at least one entry.",
    "extra_forbidden": "Unknown key. Check the spelling against the documented keys.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "llm_provider": "Must be one of: openai, ollama, gemini.",
    "api_key": "Set api_key in the config file, or OPENAI_API_KEY / GEMINI_API_KEY.",
    "interests": "Must be a non-empty list of topics (e.g., ['Rust', 'Databases']).",
    "threshold": "Must be between 0 and 100.",
    "max_workers": "Must be between 1 and 64.",
    "rate_limit_per_second": "Must be a positive number (e.g., 0.05 for 3 requests/min).",
}

_DEFAULT_HINT = "Check the configuration documentation for valid values."


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The pydantic error type (e.g., 'missing', 'enum').
        field_name: Optional field name for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]
    return ERROR_HINTS.get(error_type, _DEFAULT_HINT)


def format_validation_errors(error: ValidationError) -> list[str]:
    """Format every error in a ValidationError as ``loc: message (hint)``.

    Args:
        error: The pydantic validation error.

    Returns:
        One formatted line per underlying error.
    """
    lines: list[str] = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "config"
        field_name = location if err["loc"] else None
        if err["type"] == "value_error" and not err["loc"]:
            # Model-level validators carry no location; the message is the hint
            lines.append(f"{location}: {err['msg']}")
            continue
        hint = get_error_hint(err["type"], field_name)
        lines.append(f"{location}: {err['msg']} (Hint: {hint})")
    return lines
