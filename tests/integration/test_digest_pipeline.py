"""End-to-end pipeline test over mocked HTTP for articles and Ollama."""

import json

import httpx

from smart_digest.errors import ErrorClass
from smart_digest.fetch.client import ArticleFetcher
from smart_digest.llm.ollama_backend import OllamaBackend
from smart_digest.observability.metrics import PipelineMetrics
from smart_digest.processor.models import Job
from smart_digest.processor.processor import Processor
from smart_digest.renderer.report import ReportRenderer
from tests.helpers.time import fixed_clock


ARTICLE_HTML = (
    "<html><head><title>{title}</title></head><body><article><h1>{title}</h1>"
    + "<p>Rust async runtimes schedule futures cooperatively across a pool of "
    "worker threads, stealing work when a queue runs dry.</p>" * 4
    + "</article></body></html>"
)


def _site_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/missing":
        return httpx.Response(404, text="not found")
    title = request.url.path.strip("/").replace("-", " ").title()
    return httpx.Response(
        200,
        content=ARTICLE_HTML.format(title=title).encode(),
        headers={"Content-Type": "text/html; charset=utf-8"},
    )


def _ollama_handler(request: httpx.Request) -> httpx.Response:
    prompt = json.loads(request.content)["messages"][1]["content"]
    score = 91 if "Rust async" in prompt else 10
    reply = json.dumps(
        {"score": score, "summary": ["Work stealing", "Cooperative"], "category": "Rust"}
    )
    return httpx.Response(200, json={"message": {"content": f"```json\n{reply}\n```"}})


class TestDigestPipeline:
    """Fetch, analyze, and render a small batch end to end."""

    def test_batch(self) -> None:
        """Successful and failed jobs flow through to the report."""
        jobs = [
            Job(url="https://blog.example.com/tokio-internals", project="tokio"),
            Job(url="https://blog.example.com/missing"),
            Job(url="https://blog.example.com/async-rust"),
        ]

        with ArticleFetcher(transport=httpx.MockTransport(_site_handler)) as fetcher:
            backend = OllamaBackend(transport=httpx.MockTransport(_ollama_handler))
            processor = Processor(
                content_source=fetcher,
                scoring_backend=backend,
                interests=["Rust"],
                max_workers=2,
                rate_limit=100.0,
                metrics=PipelineMetrics(),
            )
            results = processor.process(jobs)
            backend.close()

        assert len(results) == 3
        by_url = {r.job.url: r for r in results}
        assert by_url["https://blog.example.com/missing"].error_class == ErrorClass.FETCH
        assert by_url["https://blog.example.com/async-rust"].analysis.score == 91

        report = ReportRenderer(threshold=70, clock=fixed_clock).render_markdown(results)
        assert "**Processed:** 3 | **Matched:** 2" in report
        assert "**Project:** tokio" in report
        assert "HTTP 404" in report
