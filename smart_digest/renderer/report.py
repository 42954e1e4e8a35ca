"""Markdown and JSON digest rendering."""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog
from jinja2 import Environment, PackageLoader, select_autoescape

from smart_digest.processor.models import Result


logger = structlog.get_logger()

SUMMARY_SEPARATOR = " / "

# (minimum score, badge), checked top to bottom
SCORE_BADGES: tuple[tuple[int, str], ...] = (
    (90, "🔥"),
    (80, "⭐"),
    (70, "📌"),
)
DEFAULT_BADGE = "📄"


def score_badge(score: int) -> str:
    """Pick the badge shown next to an entry's title."""
    for minimum, badge in SCORE_BADGES:
        if score >= minimum:
            return badge
    return DEFAULT_BADGE


@dataclass(frozen=True)
class DigestSelection:
    """Results split for rendering.

    Attributes:
        matched: Successful results at or above the threshold, best first.
        errors: Results that ended with an error, in arrival order.
        processed: Total number of results considered.
    """

    matched: list[Result]
    errors: list[Result]
    processed: int


class ReportRenderer:
    """Renders pipeline results as a digest report.

    Only successful results scoring at least ``threshold`` are listed;
    failed jobs are reported in a separate section of the Markdown output.
    """

    def __init__(
        self,
        threshold: int,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the renderer.

        Args:
            threshold: Minimum score for an entry to be listed.
            clock: Source of the "generated" timestamp.
        """
        self._threshold = threshold
        self._clock = clock
        self._log = logger.bind(component="renderer")
        self._env = Environment(
            loader=PackageLoader("smart_digest.renderer", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["badge"] = score_badge

    @property
    def threshold(self) -> int:
        """Minimum listed score."""
        return self._threshold

    def select(self, results: Sequence[Result]) -> DigestSelection:
        """Filter and sort results.

        Args:
            results: Results from the pipeline.

        Returns:
            Selection with matched and errored results.
        """
        matched = [
            r
            for r in results
            if r.success
            and r.analysis is not None
            and r.analysis.score >= self._threshold
        ]
        # sorted() is stable, so ties keep arrival order
        matched = sorted(matched, key=lambda r: r.analysis.score, reverse=True)  # type: ignore[union-attr]
        errors = [r for r in results if r.error is not None]
        return DigestSelection(matched=matched, errors=errors, processed=len(results))

    def render_markdown(self, results: Sequence[Result]) -> str:
        """Render the Markdown digest.

        Args:
            results: Results from the pipeline.

        Returns:
            Markdown document.
        """
        selection = self.select(results)
        template = self._env.get_template("digest.md.j2")
        output = template.render(
            generated_at=self._clock().strftime("%Y-%m-%d %H:%M"),
            threshold=self._threshold,
            processed=selection.processed,
            matched=selection.matched,
            errors=selection.errors,
        )
        self._log.info(
            "report_rendered",
            format="markdown",
            matched=len(selection.matched),
            errors=len(selection.errors),
        )
        return output

    def render_json(self, results: Sequence[Result]) -> str:
        """Render matched entries as a JSON array.

        Each entry has ``url``, ``title``, ``score``, ``category`` and
        ``summary`` (points joined by " / ").

        Args:
            results: Results from the pipeline.

        Returns:
            JSON document with a trailing newline.
        """
        selection = self.select(results)
        entries = [
            {
                "url": r.job.url,
                "title": r.article.title if r.article else "",
                "score": r.analysis.score,  # type: ignore[union-attr]
                "category": r.analysis.category,  # type: ignore[union-attr]
                "summary": SUMMARY_SEPARATOR.join(r.analysis.summary),  # type: ignore[union-attr]
            }
            for r in selection.matched
        ]
        self._log.info("report_rendered", format="json", matched=len(entries))
        return json.dumps(entries, ensure_ascii=False, indent=2) + "\n"
