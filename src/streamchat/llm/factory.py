from typing import Any

from .base import StreamSource
from .providers import GeminiSource, ScriptedSource


def create_stream_source(provider: str, **config: Any) -> StreamSource:
    """Create a streaming source instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('gemini', 'scripted')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-3-flash-preview')
            For Scripted:
                - fragments: list[str] | None (default: echo the prompt)
                - delay: float (default: 0.0)

    Returns:
        Initialized streaming source

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> source = create_stream_source(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.5-flash"
        ... )

        >>> source = create_stream_source("scripted", fragments=["He", "llo"])
    """
    provider_lower = provider.lower()

    if provider_lower == "gemini":
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiSource(**config)

    if provider_lower in ("scripted", "echo"):
        return ScriptedSource(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini', 'scripted'"
    )
