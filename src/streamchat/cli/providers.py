"""Provider factory functions for CLI.

Centralizes creation of the streaming source and the chat session from
environment variables. Hides configuration details from command
implementations.
"""

import os
from typing import Any

from rich.console import Console

from ..chat.session import ChatSession
from ..llm import StreamSource, create_stream_source
from ..llm.providers.gemini import DEFAULT_MODEL

# Default console for output
_console = Console()


def get_stream_source(console: Console | None = None) -> StreamSource | None:
    """Create streaming source from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Streaming source instance, or None if not configured

    Environment variables:
        LLM_PROVIDER: Provider type (gemini, scripted; default: gemini)
        GEMINI_API_KEY: Gemini API key (for gemini provider)
        GEMINI_MODEL: Gemini model (default: gemini-3-flash-preview)
        SCRIPTED_DELAY: Seconds between fragments (for scripted provider; default: 0.05)
    """
    con = console or _console
    provider = os.getenv("LLM_PROVIDER", "gemini").lower()

    if provider == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: GEMINI_API_KEY not set[/yellow]")
            return None
        model = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        return create_stream_source("gemini", api_key=api_key, model=model)

    elif provider in ("scripted", "echo"):
        delay = float(os.getenv("SCRIPTED_DELAY", "0.05"))
        return create_stream_source("scripted", delay=delay)

    else:
        con.print(f"[red]Error: Unknown LLM provider: {provider}[/red]")
        return None


def require_session(console: Console | None = None, **session_kwargs: Any) -> ChatSession:
    """Create a chat session, raising error if no source is configured.

    Args:
        console: Optional Rich console for output
        **session_kwargs: Extra ChatSession arguments

    Returns:
        Chat session over the configured source

    Raises:
        SystemExit: If the streaming source is not configured
    """
    import typer

    con = console or _console
    source = get_stream_source(con)
    if source is None:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return ChatSession(source, **session_kwargs)
