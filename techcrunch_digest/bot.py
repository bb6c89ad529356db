"""Telegram transport for the conversation state machine and the broadcast."""

import logging
from datetime import timedelta
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, ReplyKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from . import messages
from .config import AppConfig
from .conversation import SessionStateMachine
from .errors import ConfigError
from .models import Reply
from .pipeline import ScrapePipeline
from .scheduler import BroadcastScheduler
from .sessions import SessionStore, SubscriberSet

logger = logging.getLogger(__name__)


def inline_keyboard(reply: Reply) -> Optional[InlineKeyboardMarkup]:
    if not reply.rows:
        return None
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(button.text, callback_data=button.data) for button in row]
        for row in reply.rows
    ])


class DigestBot:
    """Wires chat commands, callback buttons and the scheduled broadcast together."""

    def __init__(
        self,
        config: AppConfig,
        pipeline: ScrapePipeline,
        sessions: Optional[SessionStore] = None,
        subscribers: Optional[SubscriberSet] = None,
    ) -> None:
        self.config      = config
        self.subscribers = subscribers if subscribers is not None else SubscriberSet()
        self.machine     = SessionStateMachine(pipeline, sessions, config.bot)
        self.scheduler   = BroadcastScheduler(pipeline, self.subscribers, self.deliver)
        self.application: Optional[Application] = None

    # ── Handlers ──────────────────────────────────────────────────────────────

    async def start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        keyboard = ReplyKeyboardMarkup([[messages.GET_NEWS]], resize_keyboard=True, one_time_keyboard=False)
        await update.message.reply_text(messages.WELCOME, reply_markup=keyboard)

    async def subscribe_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        self.subscribers.subscribe(update.effective_chat.id)
        logger.info("Chat %s subscribed", update.effective_chat.id)
        await update.message.reply_text(messages.subscribed(self.config.bot.broadcast_interval_hours))

    async def unsubscribe_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        self.subscribers.unsubscribe(update.effective_chat.id)
        logger.info("Chat %s unsubscribed", update.effective_chat.id)
        await update.message.reply_text(messages.UNSUBSCRIBED)

    async def get_news(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        reply = messages.category_menu()
        await update.message.reply_text(reply.text, reply_markup=inline_keyboard(reply))

    async def callback_query(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        await query.answer()
        chat_id = update.effective_chat.id
        reply   = await self.machine.handle_action(chat_id, query.data or "")
        await context.bot.send_message(chat_id=chat_id, text=reply.text, reply_markup=inline_keyboard(reply))

    async def broadcast_job(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self.scheduler.tick()

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Exception while handling an update: %s", context.error, exc_info=context.error)

    async def deliver(self, chat_id: int, text: str) -> None:
        await self.application.bot.send_message(chat_id=chat_id, text=text)

    # ── Assembly ──────────────────────────────────────────────────────────────

    def create_application(self) -> Application:
        """Create and configure the bot application."""
        if not self.config.bot.token:
            raise ConfigError("TELEGRAM_BOT_TOKEN is not set")

        application = (
            Application.builder()
            .token(self.config.bot.token)
            .concurrent_updates(True)
            .build()
        )

        application.add_handler(CommandHandler("start", self.start_command))
        application.add_handler(CommandHandler("subscribe", self.subscribe_command))
        application.add_handler(CommandHandler("unsubscribe", self.unsubscribe_command))
        application.add_handler(MessageHandler(filters.Text([messages.GET_NEWS]), self.get_news))
        application.add_handler(CallbackQueryHandler(self.callback_query))
        application.add_error_handler(self.error_handler)

        interval = timedelta(hours=self.config.bot.broadcast_interval_hours)
        application.job_queue.run_repeating(self.broadcast_job, interval=interval, first=interval, name="broadcast")

        self.application = application
        return application

    def run(self) -> None:
        """Start polling until interrupted."""
        application = self.create_application()
        logger.info("Bot is running...")
        application.run_polling(allowed_updates=Update.ALL_TYPES)
