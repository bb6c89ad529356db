"""Tests for techcrunch_digest.messages."""

from techcrunch_digest import messages
from techcrunch_digest.models import ArticleStub, Category, Summary


class TestMenus:
    def test_category_menu_offers_both_categories(self) -> None:
        menu = messages.category_menu()
        assert menu.text == "Choose a category:"
        assert [row[0].data for row in menu.rows] == ["ai", "startups"]
        assert menu.rows[0][0].text == "Artificial Intelligence"

    def test_short_titles_are_kept(self) -> None:
        assert messages.truncate("Short", 30) == "Short"

    def test_empty_listing_still_has_pagination(self) -> None:
        menu = messages.listing_menu([], 4)
        assert menu.text == "No articles found on page 4."
        assert [button.text for button in menu.rows[0]] == ["4", "5", "6", "7", "8"]

    def test_listing_caps_at_menu_size(self) -> None:
        listing = [ArticleStub(title=f"T{i}", link=f"https://x/{i}") for i in range(15)]
        menu = messages.listing_menu(listing, 1, menu_size=10)
        assert len(menu.rows) == 11


class TestArticleText:
    def test_broadcast_message_layout(self) -> None:
        summary = Summary(source_link="https://x/a", title="A", text="1. Main Subject: a")
        assert messages.broadcast_message(Category.AI, summary) == (
            "Latest AI News:\n\nTitle: A\nLink: https://x/a\n\nSummary:\n1. Main Subject: a"
        )
