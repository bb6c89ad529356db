"""Chunk-and-reduce summarization of article bodies."""

import asyncio
import logging
from typing import List, Optional

from langchain_core.documents import Document
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from langchain_text_splitters import RecursiveCharacterTextSplitter

from .config import SummarizerConfig
from .errors import ContextOverflow, SummarizationFailure
from .models import ArticleContent, Summary
from .prompts import Prompts

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n\n"


def build_llm(config: SummarizerConfig) -> ChatOpenAI:
    """Create the chat model used for reduction, pinned to the configured temperature."""
    return ChatOpenAI(
        model=config.model,
        temperature=config.temperature,
        timeout=config.timeout_seconds,
        max_retries=1,
    )


class Summarizer:
    """
    Turn an article body into one bounded, four-part summary.

    The body is split into overlapping chunks which are stuffed into a single
    prompt. When the stuffed text would exceed ``max_input_chars`` the
    configured overflow policy applies: ``"map_reduce"`` condenses batches of
    chunks first, ``"reject"`` raises ``ContextOverflow``.
    """

    def __init__(
        self,
        config: Optional[SummarizerConfig] = None,
        prompts: Optional[Prompts] = None,
        llm: Optional[Runnable] = None,
    ) -> None:
        self.config   = config or SummarizerConfig()
        self.prompts  = prompts or Prompts()
        self.llm      = llm if llm is not None else build_llm(self.config)
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.config.chunk_size,
            chunk_overlap=self.config.chunk_overlap,
            add_start_index=True,
            strip_whitespace=False,
        )
        parser         = StrOutputParser()
        self._reduce   = PromptTemplate.from_template(self.prompts.summarizer) | self.llm | parser
        self._condense = PromptTemplate.from_template(self.prompts.partial) | self.llm | parser

    def split(self, content: ArticleContent) -> List[Document]:
        """Split the body into overlapping chunks carrying their start offsets."""
        metadata = {"source": content.stub.link, "title": content.stub.title}
        return self.splitter.create_documents([content.body], metadatas=[metadata])

    @staticmethod
    def merge_chunks(chunks: List[Document]) -> str:
        """Rebuild the original text from chunks by dropping the overlapping prefixes."""
        text = ""
        for chunk in chunks:
            start = chunk.metadata["start_index"]
            text += chunk.page_content[max(0, len(text) - start):]
        return text

    @staticmethod
    def stuff(chunks: List[Document]) -> str:
        return DOCUMENT_SEPARATOR.join(chunk.page_content for chunk in chunks)

    async def summarize(self, content: ArticleContent) -> Summary:
        """
        Summarize one article.

        Args:
            content: Article with its cleaned body

        Returns:
            Summary; a fixed placeholder text when the body is empty

        Raises:
            SummarizationFailure: If the model times out or errors
            ContextOverflow: If the body is too long and the policy is "reject"
        """
        stub = content.stub
        if content.is_missing:
            logger.info("Skipping summarization for article: %s (no content)", stub.title)
            return Summary(source_link=stub.link, title=stub.title, text=self.config.empty_text)

        chunks = self.split(content)
        logger.info("Summarizing %s from %d chunks", stub.link, len(chunks))
        text = await self.reduce(chunks)
        return Summary(source_link=stub.link, title=stub.title, text=text.strip())

    async def reduce(self, chunks: List[Document]) -> str:
        stuffed = self.stuff(chunks)
        limit   = self.config.max_input_chars

        while len(stuffed) > limit:
            if self.config.overflow_policy == "reject":
                raise ContextOverflow(len(stuffed), limit)

            logger.info("Stuffed text is %d characters, condensing %d chunks", len(stuffed), len(chunks))
            chunks    = await self._condense_batches(chunks)
            condensed = self.stuff(chunks)
            if len(condensed) >= len(stuffed):
                raise ContextOverflow(len(condensed), limit)
            stuffed = condensed

        return await self._invoke(self._reduce, stuffed)

    async def _condense_batches(self, chunks: List[Document]) -> List[Document]:
        partials = []
        for batch in self._batches(chunks):
            text = await self._invoke(self._condense, self.stuff(batch))
            partials.append(Document(page_content=text.strip(), metadata=dict(batch[0].metadata)))
        return partials

    def _batches(self, chunks: List[Document]) -> List[List[Document]]:
        """Group consecutive chunks so each group's stuffed text fits the input bound."""
        batches: List[List[Document]] = []
        current: List[Document] = []
        size = 0
        for chunk in chunks:
            added = len(chunk.page_content) + (len(DOCUMENT_SEPARATOR) if current else 0)
            if current and size + added > self.config.max_input_chars:
                batches.append(current)
                current, size = [], 0
                added = len(chunk.page_content)
            current.append(chunk)
            size += added
        if current:
            batches.append(current)
        return batches

    async def _invoke(self, chain: Runnable, text: str) -> str:
        try:
            return await asyncio.wait_for(
                chain.ainvoke({"text": text}),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise SummarizationFailure(
                f"model call timed out after {self.config.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise SummarizationFailure(f"model call failed: {exc}") from exc
