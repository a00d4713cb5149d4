"""
Content extraction from vendor response shapes.

Each vendor nests the generated text differently. Instead of probing fields
with nested conditionals, a response is matched against an ordered list of
tagged strategies and the first one that yields a non-empty string wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import UnparsableResponseError


class ExtractionPath(Enum):
    """Known places where vendors put generated text."""
    CHAT_MESSAGE = "chat-message"
    CHAT_DELTA = "chat-delta"
    LEGACY_OUTPUT_MESSAGE = "legacy-output-message"
    LEGACY_OUTPUT_TEXT = "legacy-output-text"
    IMAGE_B64 = "image-b64"
    IMAGE_URL = "image-url"
    PLAIN_TEXT = "plain-text"


@dataclass(frozen=True)
class ExtractionStrategy:
    """A tagged key path into a decoded JSON document."""
    tag: ExtractionPath
    path: tuple[str | int, ...]

    def apply(self, document: Any) -> str | None:
        """Walk the path; return the leaf only if it is a non-empty string."""
        node = document
        for key in self.path:
            if isinstance(key, int):
                if not isinstance(node, list) or len(node) <= key:
                    return None
            elif not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        if isinstance(node, str) and node:
            return node
        return None

    def __call__(self, document: Any) -> str | None:
        return self.apply(document)


CHAT_MESSAGE = ExtractionStrategy(
    ExtractionPath.CHAT_MESSAGE, ("choices", 0, "message", "content")
)
CHAT_DELTA = ExtractionStrategy(
    ExtractionPath.CHAT_DELTA, ("choices", 0, "delta", "content")
)
LEGACY_OUTPUT_MESSAGE = ExtractionStrategy(
    ExtractionPath.LEGACY_OUTPUT_MESSAGE,
    ("output", "choices", 0, "message", "content"),
)
LEGACY_OUTPUT_TEXT = ExtractionStrategy(
    ExtractionPath.LEGACY_OUTPUT_TEXT, ("output", "text")
)
IMAGE_B64 = ExtractionStrategy(ExtractionPath.IMAGE_B64, ("data", 0, "b64_json"))
IMAGE_URL = ExtractionStrategy(ExtractionPath.IMAGE_URL, ("data", 0, "url"))
PLAIN_TEXT = ExtractionStrategy(ExtractionPath.PLAIN_TEXT, ("text",))

ALIYUN_STRATEGIES = (CHAT_MESSAGE, LEGACY_OUTPUT_MESSAGE, LEGACY_OUTPUT_TEXT)
DEEPSEEK_STRATEGIES = (*ALIYUN_STRATEGIES, CHAT_DELTA)
OPENAI_STRATEGIES = (CHAT_MESSAGE, IMAGE_B64, IMAGE_URL, PLAIN_TEXT)


class ContentExtractor:
    """Tries strategies in fixed priority order."""

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy],
        provider: str = "unknown",
    ):
        if not strategies:
            raise ValueError("ContentExtractor needs at least one strategy")
        self.strategies = tuple(strategies)
        self.provider = provider

    def match(self, response: Any) -> tuple[ExtractionPath, str] | None:
        """Return the tag and text of the first matching strategy."""
        for strategy in self.strategies:
            text = strategy.apply(response)
            if text is not None:
                return strategy.tag, text
        return None

    def extract(self, response: Any, model: str = "unknown") -> str:
        """
        Extract generated text from a complete (non-streaming) response.

        Raises:
            UnparsableResponseError: If no known response shape matched.
        """
        matched = self.match(response)
        if matched is None:
            raise UnparsableResponseError(
                "Unable to parse response content",
                provider=self.provider,
                model=model,
                response_data=response if isinstance(response, dict) else None,
            )
        return matched[1]
