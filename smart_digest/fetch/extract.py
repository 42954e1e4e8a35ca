"""Readability-based extraction of article text from HTML."""

from dataclasses import dataclass

from lxml import etree
from lxml import html as lxml_html
from readability import Document
from readability.readability import Unparseable

from smart_digest.fetch.constants import TRUNCATION_MARKER


_DESCRIPTION_XPATH = (
    "//meta[@property='og:description']/@content"
    " | //meta[@name='description']/@content"
)


class ExtractionError(Exception):
    """Raised when no readable document can be built from the HTML."""


@dataclass(frozen=True)
class ExtractedDocument:
    """Raw output of readability extraction, before length checks."""

    title: str
    text: str
    excerpt: str


def extract_document(html_text: str) -> ExtractedDocument:
    """Extract title, main text, and an excerpt from an HTML page.

    Args:
        html_text: Decoded HTML document.

    Returns:
        ExtractedDocument with cleaned text.

    Raises:
        ExtractionError: If the HTML cannot be parsed.
    """
    if not html_text.strip():
        msg = "empty document"
        raise ExtractionError(msg)

    try:
        doc = Document(html_text)
        title = doc.short_title() or doc.title() or ""
        summary_html = doc.summary(html_partial=True)
        tree = lxml_html.fromstring(summary_html)
        page = lxml_html.fromstring(html_text)
    except (Unparseable, etree.ParserError, ValueError) as e:
        raise ExtractionError(str(e)) from e

    text = clean_text(tree.text_content())

    descriptions = [d.strip() for d in page.xpath(_DESCRIPTION_XPATH) if d.strip()]
    excerpt = descriptions[0] if descriptions else _first_paragraph(text)

    return ExtractedDocument(
        title=" ".join(title.split()),
        text=text,
        excerpt=" ".join(excerpt.split()),
    )


def clean_text(text: str) -> str:
    """Trim every line and collapse runs of blank lines into one.

    Args:
        text: Raw text content.

    Returns:
        Normalized text.
    """
    cleaned: list[str] = []
    prev_empty = False

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            if not prev_empty:
                cleaned.append("")
                prev_empty = True
        else:
            cleaned.append(line)
            prev_empty = False

    return "\n".join(cleaned).strip()


def truncate_content(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` and append a truncation marker."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def truncate_excerpt(text: str, max_len: int) -> str:
    """Cut ``text`` to ``max_len`` characters, ending with an ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _first_paragraph(text: str) -> str:
    for block in text.split("\n\n"):
        if block.strip():
            return block
    return ""
