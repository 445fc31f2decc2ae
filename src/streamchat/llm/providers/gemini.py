"""Google Gemini streaming source.

Uses the official Google GenAI SDK for async streamed generation.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return chunks without text (safety metadata, usage-only
final chunks). Those are skipped; only non-empty text is yielded.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

from google import genai
from google.genai import types

from ..base import StreamSource
from ..models import StreamConfig, StreamingResponse

DEFAULT_MODEL = "gemini-3-flash-preview"


class GeminiSource(StreamSource):
    """Google Gemini streaming source.

    Hidden design decisions:
    - Google GenAI client initialization
    - Mapping of StreamConfig to GenerateContentConfig
    - Text extraction from streamed chunks
    - Usage capture from the final chunk
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        **client_kwargs: Any
    ):
        """Initialize Gemini source.

        Args:
            api_key: Google AI API key
            model: Model name (gemini-3-flash-preview, gemini-2.5-flash, ...)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    def _build_config(self, config: StreamConfig) -> types.GenerateContentConfig:
        """Convert StreamConfig to the SDK request config.

        Function calling is disabled so prompts that look like code never come
        back as UNEXPECTED_TOOL_CALL instead of text.
        """
        safety_settings = [
            types.SafetySetting(category=setting.category.value, threshold=setting.threshold.value)
            for setting in config.safety_settings
        ]
        tool_config = types.ToolConfig(
            function_calling_config=types.FunctionCallingConfig(mode="NONE")
        )
        return types.GenerateContentConfig(
            system_instruction=config.system_instruction,
            safety_settings=safety_settings,
            tool_config=tool_config,
        )

    def _extract_content(self, chunk: Any) -> str:
        """Extract text from a streamed chunk, handling empty chunks.

        Args:
            chunk: Gemini GenerateContentResponse chunk

        Returns:
            Text content or empty string
        """
        if chunk.candidates and len(chunk.candidates) > 0:
            candidate = chunk.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)

        # Fallback to chunk.text (may raise or return None)
        try:
            return chunk.text or ""
        except (ValueError, AttributeError):
            return ""

    async def stream(self, prompt: str, config: StreamConfig) -> StreamingResponse:
        """Open a streamed response using Google Gemini.

        The request is sent when iteration starts, so connection errors
        surface from the first ``__anext__`` call.

        Args:
            prompt: The user's prompt text
            config: System instruction and safety settings

        Returns:
            StreamingResponse that yields text fragments and captures usage info
        """
        request_config = self._build_config(config)
        response: StreamingResponse

        def _on_usage(usage: dict[str, int]) -> None:
            response.set_usage(usage)

        response = StreamingResponse(
            self._stream_generator(prompt, request_config, _on_usage)
        )
        return response

    async def _stream_generator(
        self,
        prompt: str,
        config: types.GenerateContentConfig,
        on_usage: Callable[[dict[str, int]], None],
    ) -> AsyncIterator[str]:
        """Internal generator that yields text and reports usage at the end."""
        usage = None

        self._debug("debug", f"Opening stream: model={self._model}, prompt={len(prompt)} chars")
        stream = await self._client.aio.models.generate_content_stream(
            model=self._model, contents=prompt, config=config
        )
        async for chunk in stream:
            # usage_metadata is complete on the final chunk
            if chunk.usage_metadata:
                usage = {
                    "prompt_tokens": chunk.usage_metadata.prompt_token_count or 0,
                    "completion_tokens": chunk.usage_metadata.candidates_token_count or 0,
                    "total_tokens": chunk.usage_metadata.total_token_count or 0,
                }

            text = self._extract_content(chunk)
            if text:
                yield text

        if usage:
            self._debug("debug", f"Usage: {usage['total_tokens']} tokens")
            on_usage(usage)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
