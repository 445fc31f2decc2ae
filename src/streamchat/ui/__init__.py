"""Terminal UI module for streamchat.

Provides a Textual-based TUI for a ChatSession.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input history, message and code block rendering)
- formatting.py: Rich renderables for prose, code and usage
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- config.py: Log levels and display constants
- app.py: Application orchestration (user interaction flow)
"""

from .app import StreamChatApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, CodeBlock, DebugPanel, MessageView

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "CodeBlock",
    "DebugPanel",
    "LogLevel",
    "MessageView",
    "StreamChatApp",
    "run_textual_tui",
]
