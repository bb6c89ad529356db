"""Exceptions raised by the digest pipeline and the conversation layer."""


class DigestError(Exception):
    """Base class for all digest errors."""


class ConfigError(DigestError, ValueError):
    """An environment option has an invalid value."""


class RenderFailure(DigestError):
    """Navigation to a page failed or timed out. Retryable."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"could not render {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SummarizationFailure(DigestError):
    """The language model call failed or timed out. Retryable."""


class ContextOverflow(SummarizationFailure):
    """The article is too long to reduce in one call and the policy forbids splitting."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"article text of {size} characters exceeds the {limit} character input bound")


class SessionStateMissing(DigestError):
    """An action referenced a conversation that never chose a category."""

    def __init__(self, chat_id: int) -> None:
        self.chat_id = chat_id
        super().__init__("No category selected yet. Tap 'Get News' to choose one.")


class IndexOutOfRange(DigestError):
    """An article or page index does not point at anything."""

    def __init__(self, index: int, size: int, kind: str = "article") -> None:
        self.index = index
        self.size = size
        self.kind = kind
        if kind == "page":
            message = f"Page {index} is not a valid page number."
        else:
            message = f"Article {index} is not available; this page lists {size} articles."
        super().__init__(message)
