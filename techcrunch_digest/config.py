"""Configuration classes for the TechCrunch digest."""

import os
from dataclasses import dataclass, field
from typing import Dict, Tuple

from dotenv import load_dotenv

from .errors import ConfigError


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a positive integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{name} must be a positive integer, got {raw!r}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SiteConfig:
    """Where articles live and how the pages are laid out."""

    base_url: str = "https://techcrunch.com"
    category_segments: Dict[str, str] = field(default_factory=lambda: {
        "ai": "artificial-intelligence",
        "startups": "startups",
    })
    title_selector: str = "h2.wp-block-post-title"
    content_selector: str = ".entry-content.wp-block-post-content"
    noise_selectors: Tuple[str, ...] = (
        ".ad-unit",
        ".wp-block-tc23-marfeel-experience",
        ".social-share",
    )
    placeholder_links: Tuple[str, ...] = ("", "#")


@dataclass
class BrowserConfig:
    """Headless browser settings."""

    headless: bool = True
    navigation_timeout_ms: int = 60000
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    launch_args: Tuple[str, ...] = (
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-blink-features=AutomationControlled",
    )


@dataclass
class ScrapeConfig:
    """Batch run settings."""

    start_page: int = 2
    max_pages: int = 1
    articles_per_page: int = 1
    attempts: int = 3


@dataclass
class SummarizerConfig:
    """Language model and chunking settings."""

    model: str = "gpt-4o-mini"
    temperature: float = 0
    chunk_size: int = 1000
    chunk_overlap: int = 200
    timeout_seconds: float = 60
    max_input_chars: int = 48000
    overflow_policy: str = "map_reduce"
    empty_text: str = "No content available for summarization."


@dataclass
class BotConfig:
    """Chat bot and broadcast settings."""

    token: str = ""
    broadcast_interval_hours: int = 4
    menu_size: int = 10
    pagination_size: int = 5
    title_width: int = 30
    default_pages: Dict[str, int] = field(default_factory=lambda: {
        "ai": 1,
        "startups": 2,
    })


@dataclass
class AppConfig:
    """Main application configuration."""

    site: SiteConfig = field(default_factory=SiteConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)
    summarizer: SummarizerConfig = field(default_factory=SummarizerConfig)
    bot: BotConfig = field(default_factory=BotConfig)

    @classmethod
    def create_default(cls) -> "AppConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Build configuration from the environment (and a .env file if present).

        Raises:
            ConfigError: If a numeric option is not a positive integer
        """
        load_dotenv()

        return cls(
            browser=BrowserConfig(
                headless=_flag("HEADLESS", True),
                navigation_timeout_ms=_positive_int("NAVIGATION_TIMEOUT_MS", 60000),
            ),
            scrape=ScrapeConfig(
                start_page=_positive_int("START_PAGE", 2),
                max_pages=_positive_int("MAX_PAGES", 1),
                articles_per_page=_positive_int("ARTICLES_PER_PAGE", 1),
                attempts=_positive_int("RUN_ATTEMPTS", 3),
            ),
            summarizer=SummarizerConfig(
                model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
                timeout_seconds=_positive_int("SUMMARY_TIMEOUT_SECONDS", 60),
            ),
            bot=BotConfig(
                token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
                broadcast_interval_hours=_positive_int("BROADCAST_INTERVAL_HOURS", 4),
            ),
        )
