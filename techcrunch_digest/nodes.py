import logging

from langgraph.graph import END

from .config import SiteConfig
from .extractor import ArticleExtractor
from .models import ScrapeState
from .summarizer import Summarizer
from .walker import PaginationWalker

logger = logging.getLogger(__name__)


class ScrapeNodes:
    """
    Holds the LangGraph node methods for one pipeline attempt.
    Each method matches the (state: ScrapeState) -> dict signature LangGraph expects.
    """

    def __init__(
        self,
        walker: PaginationWalker,
        extractor: ArticleExtractor,
        summarizer: Summarizer,
        site: SiteConfig,
    ) -> None:
        self.walker     = walker
        self.extractor  = extractor
        self.summarizer = summarizer
        self.site       = site

    # ── Nodes ─────────────────────────────────────────────────────────────────

    async def walk_node(self, state: ScrapeState) -> dict:
        logger.info("[WALKER]: %s from page %d, %d page(s), %d per page",
                    state["category"].value, state["start_page"],
                    state["page_count"], state["per_page_limit"])
        stubs = await self.walker.walk(
            state["category"],
            state["start_page"],
            state["page_count"],
            state["per_page_limit"],
        )
        return {
            "stubs":   stubs,
            "pending": stubs,
        }

    def pick_next_node(self, state: ScrapeState) -> dict:
        """Move the first pending stub into ``current`` so listing order is kept."""
        pending = list(state["pending"])

        if not pending:
            return {
                "current": None,
                "pending": [],
            }

        return {
            "current": pending.pop(0),
            "pending": pending,
        }

    async def summarize_node(self, state: ScrapeState) -> dict:
        stub = state["current"]

        if stub is None:
            return {}

        if stub.link.strip() in self.site.placeholder_links:
            logger.info("Skipping article due to invalid link: %s", stub.title)
            return {}

        logger.info("[SUMMARIZER]: processing article: %s", stub.title)
        content = await self.extractor.fetch_content(stub)
        summary = await self.summarizer.summarize(content)
        return {"summaries": [summary]}

    # ── Conditional edge ──────────────────────────────────────────────────────

    def has_pending(self, state: ScrapeState) -> str:
        return "pick_next" if state["pending"] else END
