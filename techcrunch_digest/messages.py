"""Text and menus sent to conversations."""

from typing import List

from .models import ArticleStub, Category, Reply, ReplyButton, Summary

WELCOME = (
    "Welcome to the TechCrunch Scraper Bot! Click 'Get News' to start "
    "or use /subscribe to receive automatic updates."
)
GET_NEWS = "Get News"


def subscribed(interval_hours: int) -> str:
    return f"You've been subscribed to receive automatic updates every {interval_hours} hours."


UNSUBSCRIBED = "You've been unsubscribed from automatic updates."


def category_menu() -> Reply:
    return Reply(
        text="Choose a category:",
        rows=[[ReplyButton(text=category.label, data=category.value)] for category in Category],
    )


def truncate(title: str, width: int) -> str:
    return title if len(title) <= width else title[:width].rstrip() + "..."


def listing_menu(
    listing: List[ArticleStub],
    page: int,
    menu_size: int = 10,
    pagination_size: int = 5,
    title_width: int = 30,
) -> Reply:
    """Up to ``menu_size`` article buttons followed by a strip of page numbers starting at ``page``."""
    rows = [
        [ReplyButton(text=truncate(stub.title, title_width), data=f"article_{index}")]
        for index, stub in enumerate(listing[:menu_size])
    ]
    rows.append([
        ReplyButton(text=str(number), data=f"page_{number}")
        for number in range(page, page + pagination_size)
    ])
    text = f"Articles from page {page}:" if listing else f"No articles found on page {page}."
    return Reply(text=text, rows=rows)


def article_message(summary: Summary) -> str:
    return f"Title: {summary.title}\nLink: {summary.source_link}\n\nSummary:\n{summary.text}"


def broadcast_message(category: Category, summary: Summary) -> str:
    return f"Latest {Category(category).short_label} News:\n\n{article_message(summary)}"
