"""Command-line entry point for smart-digest."""

import logging
import signal
import sys
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType

import click
import structlog

from smart_digest import __version__
from smart_digest.config.constants import COMPONENT_CLI
from smart_digest.config.loader import ConfigLoader
from smart_digest.config.schemas import DigestConfig
from smart_digest.errors import ConfigurationError, InputError
from smart_digest.fetch.client import ArticleFetcher
from smart_digest.input.parser import JobParser
from smart_digest.llm.factory import create_scoring_backend
from smart_digest.llm.protocols import ScoringBackend
from smart_digest.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from smart_digest.observability.metrics import PipelineMetrics
from smart_digest.processor.models import Job, Result
from smart_digest.processor.processor import Processor
from smart_digest.renderer.report import ReportRenderer


logger = structlog.get_logger()

FORMAT_MARKDOWN = "markdown"
FORMAT_JSON = "json"


@contextmanager
def _cancel_on_signals(cancel: threading.Event) -> Iterator[None]:
    """Set ``cancel`` on SIGINT/SIGTERM for the duration of the block."""

    def _handler(signum: int, _frame: FrameType | None) -> None:
        if not cancel.is_set():
            click.echo("\nInterrupted, shutting down...", err=True)
            logger.warning(
                "shutdown_requested",
                component=COMPONENT_CLI,
                signal=signal.Signals(signum).name,
            )
        cancel.set()

    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = {
        sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _collect_jobs(url: str | None, urls: tuple[str, ...]) -> list[Job]:
    """Gather jobs from --url, positional arguments, and piped stdin.

    Raises:
        InputError: If piped input is malformed.
    """
    parser = JobParser()
    jobs: list[Job] = []
    if url and url.strip():
        jobs.append(Job(url=url.strip()))
    jobs.extend(parser.parse_args(urls))

    if not sys.stdin.isatty():
        jobs.extend(parser.parse_stream(sys.stdin))
    return jobs


def _load_config(
    config_path: Path | None,
    threshold: int | None,
    workers: int | None,
) -> DigestConfig:
    """Load configuration and apply CLI overrides, exiting on failure."""
    try:
        config = ConfigLoader().load(config_path)
        return config.with_overrides(threshold=threshold, max_workers=workers)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        for error in e.errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)


def _build_processor(
    fetcher: ArticleFetcher,
    backend: ScoringBackend,
    config: DigestConfig,
) -> Processor:
    """Create the pipeline processor, exiting on invalid settings."""
    try:
        return Processor(
            content_source=fetcher,
            scoring_backend=backend,
            interests=config.interests,
            max_workers=config.max_workers,
            rate_limit=config.rate_limit_per_second,
        )
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _run_pipeline(
    processor: Processor,
    jobs: list[Job],
    cancel: threading.Event,
    verbose: bool,
) -> list[Result]:
    """Run the batch with a progress display on stderr."""
    if verbose:

        def _report(completed: int, total: int, result: Result) -> None:
            mark = "✅" if result.success else "❌"
            click.echo(f"{mark} [{completed}/{total}] {result.job.url}", err=True)

        return processor.process(jobs, on_progress=_report, cancel=cancel)

    with click.progressbar(
        length=len(jobs),
        label="Processing",
        file=sys.stderr,
        show_pos=True,
    ) as bar:
        return processor.process(
            jobs,
            on_progress=lambda _completed, _total, _result: bar.update(1),
            cancel=cancel,
        )


@click.command(name="smart-digest")
@click.version_option(version=__version__)
@click.argument("urls", nargs=-1)
@click.option("--url", "-u", "url", type=str, help="URL to analyze.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config.yaml.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_MARKDOWN, FORMAT_JSON]),
    default=FORMAT_MARKDOWN,
    show_default=True,
    help="Report format.",
)
@click.option(
    "--threshold",
    "-t",
    type=click.IntRange(0, 100),
    default=None,
    help="Override the score threshold (0-100).",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Override the number of concurrent workers.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def main(  # noqa: PLR0913
    urls: tuple[str, ...],
    url: str | None,
    config_path: Path | None,
    output_format: str,
    threshold: int | None,
    workers: int | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Score articles against your interests and print a digest.

    URLs come from --url, positional arguments, or stdin (JSON array,
    JSON Lines, or one URL per line).

    \b
    Examples:
      smart-digest --url https://example.com/blog/post
      echo '{"url": "https://example.com"}' | smart-digest
    """
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=json_logs,
    )
    run_id = uuid.uuid4().hex[:12]
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI, command="digest")

    try:
        config = _load_config(config_path, threshold, workers)

        try:
            jobs = _collect_jobs(url, urls)
        except InputError as e:
            click.echo(f"Input error: {e}", err=True)
            sys.exit(1)

        if not jobs:
            msg = "no URLs provided. Use --url or pipe JSON to stdin"
            raise click.UsageError(msg)

        if verbose:
            click.echo(f"Processing {len(jobs)} URLs...", err=True)
            click.echo(
                f"LLM: {config.llm_provider.value} ({config.effective_model})",
                err=True,
            )
            click.echo(f"Interests: {config.interests_string()}", err=True)
            click.echo(f"Threshold: {config.threshold}\n", err=True)

        try:
            backend = create_scoring_backend(config)
        except ConfigurationError as e:
            click.echo(f"LLM initialization error: {e}", err=True)
            sys.exit(1)

        cancel = threading.Event()
        with ArticleFetcher() as fetcher, _cancel_on_signals(cancel):
            try:
                processor = _build_processor(fetcher, backend, config)
                results = _run_pipeline(processor, jobs, cancel, verbose)
            finally:
                close = getattr(backend, "close", None)
                if callable(close):
                    close()

        log.info("run_metrics", **PipelineMetrics.get_instance().to_dict())

        renderer = ReportRenderer(threshold=config.threshold)
        if output_format == FORMAT_JSON:
            click.echo(renderer.render_json(results), nl=False)
        else:
            click.echo(renderer.render_markdown(results), nl=False)
    finally:
        clear_run_context()
