"""Per-conversation state and the broadcast subscriber set."""

from typing import Dict, FrozenSet, Iterator, List, Set

from .errors import SessionStateMissing
from .models import ArticleStub, Category, SessionState


class SessionStore:
    """
    Browsing state keyed by conversation id.

    A session is created on the first category choice and lives for the rest
    of the process. Nothing resets it implicitly.
    """

    def __init__(self) -> None:
        self._sessions: Dict[int, SessionState] = {}

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, chat_id: int) -> SessionState:
        """
        Raises:
            SessionStateMissing: If the conversation never chose a category
        """
        try:
            return self._sessions[chat_id]
        except KeyError:
            raise SessionStateMissing(chat_id) from None

    def show_page(
        self,
        chat_id: int,
        category: Category,
        page: int,
        listing: List[ArticleStub],
    ) -> SessionState:
        """Record the page a conversation is looking at together with its listing."""
        state = SessionState(category=category, current_page=page, last_listing=list(listing))
        self._sessions[chat_id] = state
        return state

    def show_article(self, chat_id: int, index: int, listing: List[ArticleStub]) -> SessionState:
        """Mark an article of the current page as being viewed, with the listing it was resolved from."""
        state = self.get(chat_id).model_copy(update={"last_listing": list(listing), "viewing": index})
        self._sessions[chat_id] = state
        return state


class SubscriberSet:
    """Conversation ids that receive the scheduled broadcast."""

    def __init__(self) -> None:
        self._ids: Set[int] = set()

    def subscribe(self, chat_id: int) -> None:
        self._ids.add(chat_id)

    def unsubscribe(self, chat_id: int) -> None:
        self._ids.discard(chat_id)

    def snapshot(self) -> FrozenSet[int]:
        return frozenset(self._ids)

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._ids)
