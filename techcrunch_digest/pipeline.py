"""Listing -> content -> summary orchestration with whole-run retry."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from langgraph.graph import END, START, StateGraph

from .browser import RendererFactory
from .config import SiteConfig
from .errors import ContextOverflow, RenderFailure, SummarizationFailure
from .extractor import ArticleExtractor
from .models import Category, ScrapeState, Summary
from .nodes import ScrapeNodes
from .summarizer import Summarizer
from .walker import PaginationWalker

logger = logging.getLogger(__name__)


def build_graph(nodes: ScrapeNodes):
    builder = StateGraph(ScrapeState)

    builder.add_node("walk",      nodes.walk_node)
    builder.add_node("pick_next", nodes.pick_next_node)
    builder.add_node("summarize", nodes.summarize_node)

    builder.add_edge(START,       "walk")
    builder.add_edge("walk",      "pick_next")
    builder.add_edge("pick_next", "summarize")
    builder.add_conditional_edges(
        "summarize",
        nodes.has_pending,
        {"pick_next": "pick_next", END: END},
    )

    return builder.compile()


class ScrapePipeline:
    """
    Walk listing pages, then fetch and summarize every stub in order.

    Usage:
        pipeline  = ScrapePipeline(Summarizer(), renderer_factory(BrowserConfig()))
        summaries = await pipeline.run(Category.STARTUPS, 2, 1, 3)

    Each attempt opens its own rendering session. A failed attempt is thrown
    away entirely and the next one starts from scratch.
    """

    def __init__(
        self,
        summarizer: Summarizer,
        renderer_factory: RendererFactory,
        site: Optional[SiteConfig] = None,
        attempts: int = 3,
    ) -> None:
        self.summarizer       = summarizer
        self.renderer_factory = renderer_factory
        self.site             = site or SiteConfig()
        self.attempts         = attempts

    @asynccontextmanager
    async def session(self) -> AsyncIterator[ArticleExtractor]:
        """Open a rendering session and yield an extractor bound to it."""
        async with self.renderer_factory() as renderer:
            yield ArticleExtractor(renderer, self.site)

    async def run(
        self,
        category: Category,
        start_page: int,
        page_count: int,
        per_page_limit: int,
    ) -> List[Summary]:
        """
        Run the pipeline with up to ``attempts`` full restarts.

        Returns:
            Summaries in listing order

        Raises:
            RenderFailure | SummarizationFailure: The last error once every attempt failed
            ContextOverflow: Immediately, since retrying cannot help
        """
        category   = Category(category)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.attempts + 1):
            logger.info("Starting attempt %d of %d", attempt, self.attempts)
            try:
                summaries = await self.run_once(category, start_page, page_count, per_page_limit)
            except ContextOverflow:
                raise
            except (RenderFailure, SummarizationFailure) as exc:
                logger.error("Attempt %d failed: %s", attempt, exc)
                last_error = exc
                continue

            logger.info("Scraping and summarization completed, %d articles processed", len(summaries))
            return summaries

        logger.error("All attempts failed.")
        raise last_error

    async def run_once(
        self,
        category: Category,
        start_page: int,
        page_count: int,
        per_page_limit: int,
    ) -> List[Summary]:
        initial_state: ScrapeState = {
            "category":       Category(category),
            "start_page":     start_page,
            "page_count":     page_count,
            "per_page_limit": per_page_limit,
            "stubs":          [],
            "pending":        [],
            "current":        None,
            "summaries":      [],
        }
        # Two steps per article plus the walk and some headroom.
        config = {"recursion_limit": 2 * max(page_count * per_page_limit, 1) + 10}

        async with self.session() as extractor:
            nodes  = ScrapeNodes(PaginationWalker(extractor), extractor, self.summarizer, self.site)
            graph  = build_graph(nodes)
            result = await graph.ainvoke(initial_state, config=config)
        return result["summaries"]
