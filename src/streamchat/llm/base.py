from abc import ABC, abstractmethod
from typing import Any

from .models import StreamConfig, StreamingResponse


class StreamSource(ABC):
    """Abstract base class for streaming text sources.

    This module hides the design decision of which generative service answers
    prompts. Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request format conversion (prompt, system instruction, safety settings)
    - Extracting text from provider chunks

    The chat session depends only on this shape: a prompt goes in, a lazy
    finite sequence of text fragments comes out, or an exception is raised
    (either when the stream is opened or while iterating it).

    Supports async context manager protocol for proper resource cleanup:
        async with source:
            stream = await source.stream(prompt, config)
        # Automatically cleaned up
    """

    _debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "LLM", message)

    @property
    @abstractmethod
    def model(self) -> str:
        """Name of the model answering prompts."""
        pass

    @abstractmethod
    async def stream(self, prompt: str, config: StreamConfig) -> StreamingResponse:
        """Open a streamed response for a prompt.

        Args:
            prompt: The user's prompt text
            config: System instruction and safety settings

        Returns:
            StreamingResponse that yields text fragments and captures usage info

        Raises:
            Exception: Provider-specific errors, at open or during iteration
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "StreamSource":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
