import operator
from enum import Enum
from typing import Annotated, List, Optional, TypedDict

from pydantic import BaseModel, Field


class Category(str, Enum):
    AI = "ai"
    STARTUPS = "startups"

    @property
    def label(self) -> str:
        return "Artificial Intelligence" if self is Category.AI else "Startups"

    @property
    def short_label(self) -> str:
        return "AI" if self is Category.AI else "Startups"


class ArticleStub(BaseModel):
    title: str = Field(description="Headline as shown on the listing page")
    link: str  = Field(description="Absolute URL of the article")


class ArticleContent(BaseModel):
    stub: ArticleStub
    body: str = Field(default="", description="Paragraph text joined by blank lines")

    @property
    def is_missing(self) -> bool:
        """True when the page had no recognized content container."""
        return not self.body


class Summary(BaseModel):
    source_link: str = Field(description="The original URL of the article")
    title: str       = Field(description="The headline of the article")
    text: str        = Field(description="Four-part structured summary")


class SessionState(BaseModel):
    category: Category
    current_page: int                = Field(ge=1)
    last_listing: List[ArticleStub]  = Field(default_factory=list)
    viewing: Optional[int]           = Field(default=None, description="Index of the article on screen")

    @property
    def mode(self) -> str:
        return "browsing" if self.viewing is None else "viewing"


class ReplyButton(BaseModel):
    text: str
    data: str


class Reply(BaseModel):
    """A message, optionally with rows of inline choices, independent of the chat transport."""

    text: str
    rows: List[List[ReplyButton]] = Field(default_factory=list)


class ScrapeState(TypedDict):
    category:        Category
    start_page:      int
    page_count:      int
    per_page_limit:  int

    # Walker output
    stubs:           List[ArticleStub]

    # Per-stub processing queue
    pending:         List[ArticleStub]
    current:         Optional[ArticleStub]

    # Accumulated results
    summaries:       Annotated[List[Summary], operator.add]
