"""Per-conversation browsing state machine, independent of the chat transport."""

import logging
import re
from typing import List, Optional

from . import messages
from .config import BotConfig
from .errors import IndexOutOfRange, RenderFailure, SessionStateMissing, SummarizationFailure
from .models import ArticleStub, Category, Reply
from .pipeline import ScrapePipeline
from .sessions import SessionStore

logger = logging.getLogger(__name__)

ARTICLE_ACTION = re.compile(r"^article_(\d+)$")
PAGE_ACTION    = re.compile(r"^page_(\d+)$")


class SessionStateMachine:
    """
    Map inbound chat actions onto session state and render the next reply.

    Idle -> category chosen (browsing a listing) -> viewing an article, and
    back to browsing on the next category or page choice. Failures are turned
    into plain-text replies and leave the session as it was.
    """

    def __init__(
        self,
        pipeline: ScrapePipeline,
        sessions: Optional[SessionStore] = None,
        config: Optional[BotConfig] = None,
    ) -> None:
        self.pipeline = pipeline
        self.sessions = sessions if sessions is not None else SessionStore()
        self.config   = config or BotConfig()

    async def handle_action(self, chat_id: int, data: str) -> Reply:
        """Dispatch callback data: a category value, ``article_<i>`` or ``page_<n>``."""
        try:
            if data in (category.value for category in Category):
                return await self.choose_category(chat_id, Category(data))

            match = PAGE_ACTION.match(data)
            if match:
                return await self.choose_page(chat_id, int(match.group(1)))

            match = ARTICLE_ACTION.match(data)
            if match:
                return await self.choose_article(chat_id, int(match.group(1)))
        except (SessionStateMissing, IndexOutOfRange) as exc:
            logger.info("Rejected action %r from chat %s: %s", data, chat_id, exc)
            return Reply(text=str(exc))
        except RenderFailure as exc:
            logger.warning("Render failure for chat %s: %s", chat_id, exc)
            return Reply(text=f"Error fetching articles: {exc}")
        except SummarizationFailure as exc:
            logger.warning("Summarization failure for chat %s: %s", chat_id, exc)
            return Reply(text=f"Error summarizing article: {exc}")

        logger.info("Unknown action %r from chat %s", data, chat_id)
        return Reply(text="Sorry, I did not understand that choice.")

    async def choose_category(self, chat_id: int, category: Category) -> Reply:
        category = Category(category)
        page     = self.config.default_pages.get(category.value, 1)
        listing  = await self._listing(category, page)
        self.sessions.show_page(chat_id, category, page, listing)
        return self._menu(listing, page)

    async def choose_page(self, chat_id: int, page: int) -> Reply:
        state = self.sessions.get(chat_id)
        if page < 1:
            raise IndexOutOfRange(page, 0, kind="page")
        listing = await self._listing(state.category, page)
        self.sessions.show_page(chat_id, state.category, page, listing)
        return self._menu(listing, page)

    async def choose_article(self, chat_id: int, index: int) -> Reply:
        """
        Summarize one article of the session's current page.

        The listing is resolved again so the index refers to what the page
        shows now, not what it showed when the menu was rendered.
        """
        state = self.sessions.get(chat_id)

        async with self.pipeline.session() as extractor:
            listing = await extractor.list_articles(state.category, state.current_page)
            if not 0 <= index < len(listing):
                raise IndexOutOfRange(index, len(listing))
            stub = listing[index]
            if stub.link.strip() in self.pipeline.site.placeholder_links:
                return Reply(text=f"Article {index} has no link to summarize.")
            content = await extractor.fetch_content(stub)

        summary = await self.pipeline.summarizer.summarize(content)
        self.sessions.show_article(chat_id, index, listing)
        return Reply(text=messages.article_message(summary))

    async def _listing(self, category: Category, page: int) -> List[ArticleStub]:
        async with self.pipeline.session() as extractor:
            return await extractor.list_articles(category, page)

    def _menu(self, listing: List[ArticleStub], page: int) -> Reply:
        return messages.listing_menu(
            listing,
            page,
            menu_size=self.config.menu_size,
            pagination_size=self.config.pagination_size,
            title_width=self.config.title_width,
        )
