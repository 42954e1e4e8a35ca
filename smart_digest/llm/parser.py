"""Parsing of raw LLM output into ``AnalysisResult``."""

from pydantic import ValidationError

from smart_digest.errors import AnalysisError
from smart_digest.llm.json_utils import (
    json_candidates,
    strip_markdown_fences,
    try_parse_json_object,
)
from smart_digest.llm.models import AnalysisResult


_MAX_ECHOED_RESPONSE = 500


def parse_analysis_result(content: str) -> AnalysisResult:
    """Parse an LLM response into a validated analysis.

    Handles common response quirks: markdown code fences, prose around
    the JSON object, and invalid escape sequences. The score is clamped
    and a missing category defaults to ``uncategorized``.

    Args:
        content: Raw text response from the LLM.

    Returns:
        Validated AnalysisResult.

    Raises:
        AnalysisError: If the response is empty, not a JSON object, or
            lacks a usable score or summary.
    """
    text = strip_markdown_fences(content)
    if not text:
        msg = "LLM returned an empty response"
        raise AnalysisError(msg)

    data: dict[str, object] | None = None
    for candidate in json_candidates(text):
        data = try_parse_json_object(candidate)
        if data is not None:
            break

    if data is None:
        msg = (
            "failed to parse LLM response as JSON object. "
            f"Response was: {text[:_MAX_ECHOED_RESPONSE]}"
        )
        raise AnalysisError(msg)

    if "score" not in data:
        msg = "LLM response has no score"
        raise AnalysisError(msg)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        if "summary" in fields:
            msg = "LLM returned empty summary"
        else:
            msg = f"LLM response has invalid fields: {', '.join(sorted(fields))}"
        raise AnalysisError(msg) from e
