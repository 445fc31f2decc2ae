from collections.abc import AsyncIterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful assistant."


class StreamingResponse:
    """Wrapper for a streamed response that captures usage info.

    Acts as an async iterator for text fragments while storing token usage
    that becomes available at the end of the stream.

    Usage:
        stream = await source.stream(prompt, config)
        async for fragment in stream:
            print(fragment, end="")
        # After iteration, usage is available
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
        """
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by the source at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        return await self._iter.__anext__()

    async def aclose(self) -> None:
        """Close the underlying generator, releasing the connection early."""
        close = getattr(self._iter, "aclose", None)
        if close is not None:
            await close()


class HarmCategory(str, Enum):
    """Content-filter categories configured on every request."""

    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"


class BlockThreshold(str, Enum):
    """Content-filter thresholds, from most to least permissive."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


class SafetySetting(BaseModel):
    """Threshold for one content-filter category."""

    model_config = ConfigDict(frozen=True)

    category: HarmCategory
    threshold: BlockThreshold = BlockThreshold.BLOCK_NONE


def permissive_safety_settings() -> tuple[SafetySetting, ...]:
    """Every category at the most permissive threshold."""
    return tuple(SafetySetting(category=category) for category in HarmCategory)


class StreamConfig(BaseModel):
    """Fixed behavior configuration sent with every prompt."""

    model_config = ConfigDict(frozen=True)

    system_instruction: str = Field(
        default=DEFAULT_SYSTEM_INSTRUCTION,
        description="System instruction given to the model"
    )
    safety_settings: tuple[SafetySetting, ...] = Field(
        default_factory=permissive_safety_settings,
        description="Content-filter thresholds per category"
    )
