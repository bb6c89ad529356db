"""Shared fakes: a scripted browser session and a deterministic language model."""

from typing import Dict, List, Tuple, Union
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.runnables import RunnableLambda
from playwright.async_api import Error as PlaywrightError

from techcrunch_digest.browser import renderer_factory
from techcrunch_digest.config import BrowserConfig, SiteConfig, SummarizerConfig
from techcrunch_digest.errors import RenderFailure
from techcrunch_digest.pipeline import ScrapePipeline
from techcrunch_digest.summarizer import Summarizer

BASE = "https://techcrunch.com"


def listing_url(segment: str, page: int) -> str:
    return f"{BASE}/category/{segment}/page/{page}/"


def listing_html(items: List[Tuple[str, str]]) -> str:
    headings = "".join(
        f'<h2 class="wp-block-post-title"><a href="{href}">  {title}  </a></h2>'
        for title, href in items
    )
    return f"<html><body><main>{headings}</main></body></html>"


def article_html(paragraphs: List[str]) -> str:
    body = "".join(f"<p>{text}</p>" for text in paragraphs)
    return (
        "<html><body>"
        '<div class="entry-content wp-block-post-content">'
        f"{body}"
        '<div class="ad-unit"><p>Buy now</p></div>'
        '<div class="social-share"><p>Share this</p></div>'
        "</div></body></html>"
    )


class FakeRenderer:
    """Serves canned HTML by URL. Unknown URLs and Exception values raise."""

    def __init__(self, pages: Dict[str, Union[str, Exception]]) -> None:
        self.pages   = pages
        self.visited: List[str] = []
        self.opened  = 0
        self.closed  = 0

    async def __aenter__(self) -> "FakeRenderer":
        self.opened += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed += 1

    async def render(self, url: str) -> str:
        self.visited.append(url)
        page = self.pages.get(url)
        if page is None:
            raise RenderFailure(url, "navigation timed out")
        if isinstance(page, Exception):
            raise page
        return page


def article_text(prompt: str) -> str:
    """The text between the backtick fences of a rendered prompt."""
    return prompt.split("```")[1]


@pytest.fixture
def site() -> SiteConfig:
    return SiteConfig()


@pytest.fixture
def make_renderer():
    return FakeRenderer


@pytest.fixture
def llm_calls() -> List[str]:
    return []


@pytest.fixture
def fake_llm(llm_calls):
    def respond(prompt_value) -> str:
        prompt = prompt_value.to_string()
        llm_calls.append(prompt)
        text = article_text(prompt)
        return f"1. Main Subject: {text[:40]}\n2. Key Facts: {len(text)} characters"

    return RunnableLambda(respond)


@pytest.fixture
def summarizer(fake_llm) -> Summarizer:
    return Summarizer(SummarizerConfig(timeout_seconds=5), llm=fake_llm)


@pytest.fixture
def make_pipeline(summarizer, site):
    """Build a pipeline whose every session is the given renderer."""
    def build(renderer: FakeRenderer, attempts: int = 3) -> ScrapePipeline:
        return ScrapePipeline(summarizer, lambda: renderer, site=site, attempts=attempts)

    return build


@pytest.fixture
def pages():
    """Helpers to build canned pages."""
    class Pages:
        listing_url  = staticmethod(listing_url)
        listing_html = staticmethod(listing_html)
        article_html = staticmethod(article_html)

    return Pages


@pytest.fixture
def broken_launch():
    """Patch Playwright so Chromium never starts; yields a real renderer factory and the mocks."""
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(side_effect=PlaywrightError("Browser closed unexpectedly"))
    playwright.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)

    with patch("techcrunch_digest.browser.async_playwright", return_value=starter):
        yield renderer_factory(BrowserConfig()), playwright
