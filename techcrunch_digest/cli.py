"""Command line entry points: the chat bot and the ad hoc batch run."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .bot import DigestBot
from .browser import renderer_factory
from .config import AppConfig
from .errors import DigestError
from .models import Category
from .pipeline import ScrapePipeline
from .summarizer import Summarizer

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be at least 1")
    return number


def build_pipeline(config: AppConfig) -> ScrapePipeline:
    return ScrapePipeline(
        Summarizer(config.summarizer),
        renderer_factory(config.browser),
        site=config.site,
        attempts=config.scrape.attempts,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="techcrunch-digest",
        description="Scrape and summarize TechCrunch articles.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("bot", help="Run the Telegram bot with the scheduled broadcast")

    batch = commands.add_parser("batch", help="Summarize articles once and print them")
    batch.add_argument(
        "--category",
        choices=[category.value for category in Category],
        default=Category.STARTUPS.value,
    )
    batch.add_argument("--start-page", type=positive_int, help="Defaults to START_PAGE")
    batch.add_argument("--max-pages", type=positive_int, help="Defaults to MAX_PAGES")
    batch.add_argument("--articles-per-page", type=positive_int, help="Defaults to ARTICLES_PER_PAGE")

    return parser.parse_args(argv)


async def run_batch(pipeline: ScrapePipeline, args: argparse.Namespace, config: AppConfig) -> int:
    start_page = args.start_page or config.scrape.start_page
    max_pages  = args.max_pages or config.scrape.max_pages
    per_page   = args.articles_per_page or config.scrape.articles_per_page

    logger.info("Starting from page: %d", start_page)
    logger.info("Max pages to scrape: %d", max_pages)
    logger.info("Articles per page: %d", per_page)

    try:
        summaries = await pipeline.run(Category(args.category), start_page, max_pages, per_page)
    except DigestError as exc:
        logger.error("Batch run failed: %s", exc)
        return 1

    print(f"Total articles processed: {len(summaries)}")
    for index, summary in enumerate(summaries, 1):
        print(f"\nArticle {index}:")
        print(f"Title: {summary.title}")
        print(f"Link: {summary.source_link}")
        print(f"Summary: {summary.text}")
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = parse_args(argv)

    try:
        config = AppConfig.from_env()
    except DigestError as exc:
        logger.error("%s", exc)
        return 2

    pipeline = build_pipeline(config)

    if args.command == "bot":
        try:
            DigestBot(config, pipeline).run()
        except DigestError as exc:
            logger.error("%s", exc)
            return 2
        return 0

    return asyncio.run(run_batch(pipeline, args, config))


if __name__ == "__main__":
    sys.exit(main())
