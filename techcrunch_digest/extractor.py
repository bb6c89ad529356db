"""Listing and article extraction on top of a rendering session."""

import logging
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .browser import PageRenderer
from .config import SiteConfig
from .errors import IndexOutOfRange
from .models import ArticleContent, ArticleStub, Category

logger = logging.getLogger(__name__)


class ArticleExtractor:
    """Pull listing stubs and cleaned article bodies through one open renderer."""

    def __init__(self, renderer: PageRenderer, site: Optional[SiteConfig] = None) -> None:
        self.renderer = renderer
        self.site     = site or SiteConfig()

    def listing_url(self, category: Category, page: int) -> str:
        """
        Build the listing URL for a category page.

        Raises:
            IndexOutOfRange: If page is lower than 1
        """
        if page < 1:
            raise IndexOutOfRange(page, 0, kind="page")
        segment = self.site.category_segments[Category(category).value]
        return f"{self.site.base_url}/category/{segment}/page/{page}/"

    async def list_articles(
        self,
        category: Category,
        page: int,
        limit: Optional[int] = None,
    ) -> List[ArticleStub]:
        """
        Fetch the stubs shown on one listing page, in page order.

        Args:
            category: Category to browse
            page: 1-based page number
            limit: Keep at most this many stubs

        Returns:
            Possibly empty list of stubs

        Raises:
            RenderFailure: If the listing page could not be loaded
        """
        url   = self.listing_url(category, page)
        html  = await self.renderer.render(url)
        stubs = self.parse_listing(html, url, self.site, limit)
        logger.info("Found %d articles on %s", len(stubs), url)
        return stubs

    async def fetch_content(self, stub: ArticleStub) -> ArticleContent:
        """
        Fetch and clean the body of one article.

        An empty body means the page had no recognized content container.

        Raises:
            RenderFailure: If the article page could not be loaded
        """
        html = await self.renderer.render(stub.link)
        body = self.parse_content(html, self.site)
        if not body:
            logger.warning("No content container found for %s", stub.link)
        else:
            logger.info("Content length for %s: %d characters", stub.link, len(body))
        return ArticleContent(stub=stub, body=body)

    @staticmethod
    def parse_listing(
        html: str,
        page_url: str,
        site: SiteConfig,
        limit: Optional[int] = None,
    ) -> List[ArticleStub]:
        """
        Pair every listing title with its anchor.

        Args:
            html: Rendered listing page
            page_url: URL the page was loaded from, used to absolutize links
            site: Selectors for the site
            limit: Keep at most this many stubs

        Returns:
            Stubs unique by link, in document order
        """
        soup  = BeautifulSoup(html, "lxml")
        stubs: List[ArticleStub] = []
        seen  = set()

        for position, heading in enumerate(soup.select(site.title_selector), 1):
            if limit is not None and len(stubs) >= limit:
                break

            anchor = heading.find("a")
            if anchor is None:
                logger.info("Skipped article %d due to missing link", position)
                continue

            title = anchor.get_text(" ", strip=True)
            href  = (anchor.get("href") or "").strip()
            # Placeholders stay as-is so the pipeline can recognize and skip them.
            link  = href if href in site.placeholder_links else urljoin(page_url, href)

            if not title or link in seen:
                continue
            seen.add(link)
            stubs.append(ArticleStub(title=title, link=link))

        return stubs

    @staticmethod
    def parse_content(html: str, site: SiteConfig) -> str:
        """
        Extract article paragraphs, dropping ads and share widgets.

        Returns:
            Paragraph text separated by blank lines, or "" without a content container
        """
        soup      = BeautifulSoup(html, "lxml")
        container = soup.select_one(site.content_selector)
        if container is None:
            return ""

        for selector in site.noise_selectors:
            for element in container.select(selector):
                element.decompose()

        paragraphs = [p.get_text().strip() for p in container.find_all("p")]
        return "\n\n".join(p for p in paragraphs if p)
