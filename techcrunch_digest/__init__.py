"""
TechCrunch Digest - paginated article scraping, LLM summaries and a Telegram bot.
"""

from .config import AppConfig
from .models import ArticleContent, ArticleStub, Category, Summary
from .pipeline import ScrapePipeline
from .summarizer import Summarizer

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ArticleContent",
    "ArticleStub",
    "Category",
    "ScrapePipeline",
    "Summarizer",
    "Summary",
]
