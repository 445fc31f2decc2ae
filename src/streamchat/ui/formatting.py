"""Text formatting utilities for the TUI.

Hides how messages and segments turn into Rich renderables.
"""

from rich.syntax import Syntax
from rich.text import Text

from ..chat.config import DEFAULT_CODE_LANGUAGE
from ..chat.models import Message, Role
from .config import CODE_THEME, HEADER_TIME_FORMAT

ROLE_LABELS = {
    Role.USER: "You",
    Role.ASSISTANT: "Gemini",
}


def role_label(role: Role) -> str:
    """Display name for a message author."""
    return ROLE_LABELS.get(role, role.value)


def message_header(message: Message) -> str:
    """Author label followed by the time the message was created."""
    return f"{role_label(message.role)}  {message.created_at.strftime(HEADER_TIME_FORMAT)}"


def lexer_for(language: str) -> str:
    """Map a fence language token to a Pygments lexer name.

    Unknown names are fine: Rich falls back to plain text.
    """
    if not language or language == DEFAULT_CODE_LANGUAGE:
        return "text"
    return language.lower()


def render_prose(text: str) -> Text:
    """Render prose as plain text; markup in model output is not interpreted."""
    return Text(text, overflow="fold")


def render_code(code: str, language: str) -> Syntax:
    """Render a code segment with syntax highlighting."""
    return Syntax(
        code,
        lexer_for(language),
        theme=CODE_THEME,
        word_wrap=True,
        background_color="default",
    )


def format_usage(model: str, usage: dict | None) -> str:
    """Subtitle text with the model name and last reply's token usage."""
    if not usage:
        return model
    total = usage.get("total_tokens", 0)
    prompt = usage.get("prompt_tokens", 0)
    completion = usage.get("completion_tokens", 0)
    return f"{model} | {total:,} tokens ({prompt:,}/{completion:,})"
