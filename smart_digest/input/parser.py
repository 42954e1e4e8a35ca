"""Job input parsing from CLI arguments and piped text."""

import json
from collections.abc import Iterable
from typing import Any, TextIO

import structlog

from smart_digest.errors import InputError
from smart_digest.processor.models import Job


logger = structlog.get_logger()

URL_PREFIXES = ("http://", "https://")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _job_from_mapping(entry: dict[str, Any]) -> Job | None:
    """Build a Job from a ``{url, project, version}`` object.

    Returns:
        Job, or None if the entry carries no URL.
    """
    url = _optional_str(entry.get("url"))
    if url is None:
        return None
    return Job(
        url=url,
        project=_optional_str(entry.get("project")),
        version=_optional_str(entry.get("version")),
    )


class JobParser:
    """Turns user input into Jobs.

    Accepted stream formats, tried in order:
    - a JSON array of ``{"url", "project", "version"}`` objects
    - JSON Lines, one object per line
    - bare ``http(s)://`` URLs, one per line (may be mixed with JSON Lines)
    """

    def __init__(self) -> None:
        self._log = logger.bind(component="input", subcomponent="parser")

    def parse_args(self, urls: Iterable[str]) -> list[Job]:
        """Create one Job per non-blank URL argument.

        Args:
            urls: URL strings from the command line.

        Returns:
            Jobs in argument order.
        """
        return [Job(url=url.strip()) for url in urls if url and url.strip()]

    def parse_stream(self, source: str | TextIO) -> list[Job]:
        """Parse piped input.

        Args:
            source: Raw text or a readable text stream.

        Returns:
            Jobs in input order; empty input yields an empty list.

        Raises:
            InputError: If a line is neither JSON nor an http(s) URL.
        """
        content = source if isinstance(source, str) else source.read()
        content = content.strip()
        if not content:
            return []

        if content.startswith("["):
            jobs = self._parse_array(content)
            if jobs is not None:
                self._log.debug("input_parsed", format="json_array", jobs=len(jobs))
                return jobs

        jobs = self._parse_lines(content)
        self._log.debug("input_parsed", format="json_lines", jobs=len(jobs))
        return jobs

    def _parse_array(self, content: str) -> list[Job] | None:
        try:
            entries = json.loads(content)
        except json.JSONDecodeError:
            return None
        if not isinstance(entries, list):
            return None

        jobs: list[Job] = []
        for entry in entries:
            if isinstance(entry, dict):
                job = _job_from_mapping(entry)
                if job is not None:
                    jobs.append(job)
        return jobs

    def _parse_lines(self, content: str) -> list[Job]:
        jobs: list[Job] = []
        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            try:
                entry = json.loads(line)
            except json.JSONDecodeError as e:
                if line.startswith(URL_PREFIXES):
                    jobs.append(Job(url=line))
                    continue
                msg = f"failed to parse line {line_number}: {e}"
                raise InputError(msg, line_number=line_number) from e

            if not isinstance(entry, dict):
                msg = f"failed to parse line {line_number}: expected a JSON object"
                raise InputError(msg, line_number=line_number)

            job = _job_from_mapping(entry)
            if job is not None:
                jobs.append(job)
        return jobs
