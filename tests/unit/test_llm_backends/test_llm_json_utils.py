"""Unit tests for JSON extraction helpers."""

from smart_digest.llm.json_utils import (
    extract_first_json_object,
    fix_escape_sequences,
    json_candidates,
    strip_markdown_fences,
    try_parse_json_object,
)


class TestStripMarkdownFences:
    """Tests for strip_markdown_fences."""

    def test_json_fence(self) -> None:
        """A ```json fence is removed."""
        assert strip_markdown_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self) -> None:
        """A bare ``` fence is removed."""
        assert strip_markdown_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self) -> None:
        """Unfenced text is only trimmed."""
        assert strip_markdown_fences('  {"a": 1} ') == '{"a": 1}'


class TestExtractFirstJsonObject:
    """Tests for extract_first_json_object."""

    def test_nested_objects(self) -> None:
        """Nested braces are balanced."""
        text = 'prefix {"a": {"b": 1}} suffix {"c": 2}'
        assert extract_first_json_object(text) == '{"a": {"b": 1}}'

    def test_braces_in_strings_ignored(self) -> None:
        """Braces inside strings do not affect depth."""
        text = 'x {"s": "a } b { c"} y'
        assert extract_first_json_object(text) == '{"s": "a } b { c"}'

    def test_no_object(self) -> None:
        """Text without braces yields None."""
        assert extract_first_json_object("no json here") is None

    def test_unbalanced(self) -> None:
        """An unclosed object yields None."""
        assert extract_first_json_object('{"a": 1') is None


class TestParsingHelpers:
    """Tests for the remaining helpers."""

    def test_try_parse_rejects_arrays(self) -> None:
        """Only objects are accepted."""
        assert try_parse_json_object("[1, 2]") is None

    def test_try_parse_fixes_escapes(self) -> None:
        """Invalid escapes are repaired on the second attempt."""
        assert try_parse_json_object('{"a": "x\\_y"}') == {"a": "x\\_y"}

    def test_fix_escape_sequences_keeps_valid_escapes(self) -> None:
        """Valid escapes are untouched."""
        assert fix_escape_sequences('"a\\nb"') == '"a\\nb"'

    def test_candidates(self) -> None:
        """The extracted object follows the full text."""
        assert json_candidates('ok {"a": 1}') == ['ok {"a": 1}', '{"a": 1}']
