import logging
from typing import List

from .errors import RenderFailure
from .extractor import ArticleExtractor
from .models import ArticleStub, Category

logger = logging.getLogger(__name__)


class PaginationWalker:
    """Walk consecutive listing pages, keeping what was gathered when navigation breaks."""

    def __init__(self, extractor: ArticleExtractor) -> None:
        self.extractor = extractor

    async def walk(
        self,
        category: Category,
        start_page: int,
        page_count: int,
        per_page_limit: int,
    ) -> List[ArticleStub]:
        """
        Collect up to ``per_page_limit`` stubs from each of ``page_count`` pages.

        A RenderFailure on the first page propagates, since nothing was
        gathered. A RenderFailure on a later page ends the walk and the stubs
        from the pages before it are returned.
        """
        stubs: List[ArticleStub] = []

        for page in range(start_page, start_page + page_count):
            try:
                page_stubs = await self.extractor.list_articles(category, page, limit=per_page_limit)
            except RenderFailure as exc:
                if page == start_page:
                    raise
                logger.warning("Failed to navigate to page %d, stopping walk: %s", page, exc)
                break

            stubs.extend(page_stubs)
            logger.info("Scraped %d articles from page %d", len(page_stubs), page)

        logger.info("Total articles scraped: %d", len(stubs))
        return stubs
