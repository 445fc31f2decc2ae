"""Main Textual TUI application.

Orchestrates the UI components around a ChatSession: store snapshots are
rendered by the chat history, submissions and scroll positions flow back
into the session.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..chat.models import Message
from ..chat.session import ChatSession, SessionState
from .config import LogLevel
from .formatting import format_usage
from .styles import APP_CSS
from .themes import GEMINI_NIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, copy_text


class StreamChatApp(App):
    """Textual TUI for streamed Gemini chat."""

    CSS = APP_CSS
    TITLE = "Streamchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("escape", "cancel_response", "Cancel"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(self, session: ChatSession, log_level: str | None = None) -> None:
        super().__init__()
        self._session = session
        self._log_level = log_level
        self._unsubscribers: list = []

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(self._session.scroll, id="chat-history")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(GEMINI_NIGHT)
        self.theme = "gemini-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            self._log("info", "TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.set_debug_callback(self._log)
        self._unsubscribers = [
            self._session.store.subscribe(self._on_messages),
            self._session.subscribe_state(self._on_state),
        ]

        self.sub_title = self._session.source.model
        self._on_messages(self._session.store.messages)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Detach from the session when the app exits."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._session.set_debug_callback(None)

    def _log(self, level: str, component: str, message: str) -> None:
        """Route debug callback messages to the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        log_panel.log_entry(LogLevel.from_string(level), component, message)

    def _on_messages(self, messages: tuple[Message, ...]) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).sync(messages)

    def _on_state(self, state: SessionState) -> None:
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_busy(self._session.is_busy)

        if state == SessionState.SUBMITTING:
            input_bar.clear()
        elif state == SessionState.COMPLETED:
            self.sub_title = format_usage(self._session.source.model, self._session.last_usage)
        elif state == SessionState.FAILED:
            error = self._session.last_error
            self.notify(f"Error: {str(error)[:60]}", severity="error", timeout=5)
        elif state == SessionState.CANCELLED:
            self.notify("Cancelled", severity="warning", timeout=2)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.is_busy:
            return
        self._session.input_text = event.value
        self._run_cycle()

    @work(group="cycle")
    async def _run_cycle(self) -> None:
        """Run one request/response cycle as a background async worker."""
        with contextlib.suppress(asyncio.CancelledError):
            await self._session.submit()

    def action_clear_chat(self) -> None:
        """Clear the chat history."""
        self._session.reset()
        self.notify("Chat cleared", timeout=2)

    def action_cancel_response(self) -> None:
        """Cancel the response being streamed."""
        if not self._session.cancel():
            self.notify("Nothing to cancel", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard, exactly as received."""
        response = self._session.store.last_response()
        if response:
            copy_text(self.screen, response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(session: ChatSession, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        session: Chat session to drive
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = StreamChatApp(session=session, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(BaseException):
            await session.source.close()
