import logging
from typing import Awaitable, Callable, Iterable, Optional

from . import messages
from .errors import DigestError
from .models import Category
from .pipeline import ScrapePipeline
from .sessions import SubscriberSet

logger = logging.getLogger(__name__)

Deliver = Callable[[int, str], Awaitable[None]]


class BroadcastScheduler:
    """Send the newest article of each tracked category to every subscriber."""

    def __init__(
        self,
        pipeline: ScrapePipeline,
        subscribers: SubscriberSet,
        deliver: Deliver,
        categories: Optional[Iterable[Category]] = None,
    ) -> None:
        self.pipeline    = pipeline
        self.subscribers = subscribers
        self.deliver     = deliver
        self.categories  = list(categories) if categories is not None else list(Category)

    async def tick(self) -> int:
        """
        Run one broadcast round.

        Returns:
            Number of messages delivered successfully
        """
        logger.info("[BROADCAST]: Running auto-fetch task ...")
        delivered = 0

        for category in self.categories:
            try:
                summaries = await self.pipeline.run(category, 1, 1, 1)
            except DigestError as exc:
                logger.error("Error fetching latest %s news: %s", category.value, exc)
                continue

            if not summaries:
                logger.info("No latest %s article found", category.value)
                continue

            text = messages.broadcast_message(category, summaries[0])
            # Subscribers are read at delivery time, not when the tick started.
            for chat_id in self.subscribers.snapshot():
                try:
                    await self.deliver(chat_id, text)
                except Exception as exc:
                    logger.error("Delivery to chat %s failed: %s", chat_id, exc)
                    continue
                delivered += 1

        logger.info("[BROADCAST]: Done, %d message(s) delivered.", delivered)
        return delivered
