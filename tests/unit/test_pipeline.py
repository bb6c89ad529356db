"""Tests for techcrunch_digest.pipeline."""

import asyncio

import pytest

from techcrunch_digest.errors import ContextOverflow, RenderFailure, SummarizationFailure
from techcrunch_digest.models import Category
from techcrunch_digest.pipeline import ScrapePipeline


def ai_site(pages):
    return {
        pages.listing_url("artificial-intelligence", 1): pages.listing_html([
            ("A", "https://x/a"),
            ("B", "https://x/b"),
        ]),
        "https://x/a": pages.article_html(["Alpha raised money.", "Alpha hires."]),
        "https://x/b": pages.article_html(["Beta ships a model."]),
    }


class FlakyRenderer:
    """Fails the first ``failures`` sessions on their first navigation."""

    def __init__(self, healthy, failures: int) -> None:
        self.healthy  = healthy
        self.failures = failures
        self.sessions = 0
        self.closed   = 0

    async def __aenter__(self):
        self.sessions += 1
        self.broken = self.sessions <= self.failures
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed += 1

    async def render(self, url: str) -> str:
        if self.broken:
            raise RenderFailure(url, "navigation timed out")
        return await self.healthy.render(url)


class TestRun:
    def test_end_to_end_keeps_listing_order(self, make_renderer, make_pipeline, pages) -> None:
        pipeline  = make_pipeline(make_renderer(ai_site(pages)))
        summaries = asyncio.run(pipeline.run("ai", 1, 1, 10))

        assert [summary.source_link for summary in summaries] == ["https://x/a", "https://x/b"]
        assert [summary.title for summary in summaries] == ["A", "B"]
        assert "Alpha raised money." in summaries[0].text
        assert "Beta ships a model." in summaries[1].text

    def test_skips_placeholder_links(self, make_renderer, make_pipeline, pages) -> None:
        site = ai_site(pages)
        site[pages.listing_url("artificial-intelligence", 1)] = pages.listing_html([
            ("A", "https://x/a"),
            ("Teaser", "#"),
            ("B", "https://x/b"),
        ])
        renderer  = make_renderer(site)
        summaries = asyncio.run(make_pipeline(renderer).run(Category.AI, 1, 1, 10))

        assert [summary.title for summary in summaries] == ["A", "B"]
        assert "#" not in renderer.visited

    def test_article_without_container_gets_placeholder_summary(self, make_renderer, make_pipeline, pages) -> None:
        site = ai_site(pages)
        site["https://x/b"] = "<html><body><p>paywalled</p></body></html>"
        summaries = asyncio.run(make_pipeline(make_renderer(site)).run(Category.AI, 1, 1, 10))

        assert summaries[1].text == "No content available for summarization."

    def test_empty_listing_gives_no_summaries(self, make_renderer, make_pipeline, pages) -> None:
        renderer = make_renderer({pages.listing_url("startups", 1): pages.listing_html([])})
        assert asyncio.run(make_pipeline(renderer).run(Category.STARTUPS, 1, 1, 1)) == []

    def test_session_released_once_per_attempt(self, make_renderer, make_pipeline, pages) -> None:
        renderer = make_renderer(ai_site(pages))
        asyncio.run(make_pipeline(renderer).run(Category.AI, 1, 1, 10))
        assert renderer.opened == renderer.closed == 1


class TestRetry:
    def test_third_attempt_results_are_returned(self, make_renderer, summarizer, site, pages) -> None:
        renderer = FlakyRenderer(make_renderer(ai_site(pages)), failures=2)
        pipeline = ScrapePipeline(summarizer, lambda: renderer, site=site, attempts=3)

        summaries = asyncio.run(pipeline.run(Category.AI, 1, 1, 10))

        assert renderer.sessions == 3
        assert renderer.closed == 3
        assert [summary.source_link for summary in summaries] == ["https://x/a", "https://x/b"]

    def test_partial_results_of_failed_attempt_are_discarded(self, make_renderer, summarizer, site, pages) -> None:
        healthy = make_renderer(ai_site(pages))
        calls   = {"count": 0}

        class FailsOnSecondArticleOnce:
            async def __aenter__(self):
                calls["count"] += 1
                return self

            async def __aexit__(self, *exc_info):
                return None

            async def render(self, url):
                if calls["count"] == 1 and url == "https://x/b":
                    raise RenderFailure(url, "connection reset")
                return await healthy.render(url)

        pipeline  = ScrapePipeline(summarizer, FailsOnSecondArticleOnce, site=site, attempts=3)
        summaries = asyncio.run(pipeline.run(Category.AI, 1, 1, 10))

        assert calls["count"] == 2
        assert [summary.source_link for summary in summaries] == ["https://x/a", "https://x/b"]

    def test_last_error_raised_after_all_attempts(self, make_renderer, summarizer, site) -> None:
        renderer = make_renderer({})
        pipeline = ScrapePipeline(summarizer, lambda: renderer, site=site, attempts=3)

        with pytest.raises(RenderFailure):
            asyncio.run(pipeline.run(Category.AI, 1, 1, 1))
        assert renderer.opened == renderer.closed == 3

    def test_summarization_failure_is_retried(self, make_renderer, site, pages, summarizer) -> None:
        attempts = {"count": 0}
        original = summarizer.summarize

        async def flaky_summarize(content):
            if attempts["count"] == 0:
                attempts["count"] += 1
                raise SummarizationFailure("model call timed out")
            return await original(content)

        summarizer.summarize = flaky_summarize
        renderer  = make_renderer(ai_site(pages))
        pipeline  = ScrapePipeline(summarizer, lambda: renderer, site=site, attempts=3)
        summaries = asyncio.run(pipeline.run(Category.AI, 1, 1, 10))

        assert len(summaries) == 2
        assert renderer.opened == 2

    def test_context_overflow_is_not_retried(self, make_renderer, site, pages, summarizer) -> None:
        async def overflow(content):
            raise ContextOverflow(100000, 48000)

        summarizer.summarize = overflow
        renderer = make_renderer(ai_site(pages))
        pipeline = ScrapePipeline(summarizer, lambda: renderer, site=site, attempts=3)

        with pytest.raises(ContextOverflow):
            asyncio.run(pipeline.run(Category.AI, 1, 1, 10))
        assert renderer.opened == 1

    def test_browser_launch_failure_is_retried(self, broken_launch, summarizer, site) -> None:
        factory, playwright = broken_launch
        pipeline = ScrapePipeline(summarizer, factory, site=site, attempts=3)

        with pytest.raises(RenderFailure, match="browser launch failed"):
            asyncio.run(pipeline.run(Category.STARTUPS, 1, 1, 1))
        assert playwright.chromium.launch.await_count == 3
        assert playwright.stop.await_count == 3
