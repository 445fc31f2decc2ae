"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Message and segment rendering
- Code block copy feedback
- Scroll tracking for the follow policy
- Log rendering and level filtering
"""

from datetime import datetime

import pyperclip
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widget import Widget
from textual.widgets import Button, Input, Label, LoadingIndicator, RichLog, Static

from ..chat.models import CodeSegment, Message, ProseSegment, Segment
from ..chat.scroll import ScrollFollowPolicy
from ..chat.segments import parse_segments
from .config import (
    COPY_FEEDBACK_SECONDS,
    INPUT_HISTORY_MAX_SIZE,
    INPUT_PLACEHOLDER,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)
from .formatting import message_header, render_code, render_prose


def copy_text(widget: Widget, text: str) -> None:
    """Copy text to the system clipboard, falling back to Textual's OSC 52."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        widget.app.copy_to_clipboard(text)


class ChatInputBar(Horizontal):
    """Chat input bar with a single-line Input and a Send button.

    Use Up/Down arrow keys to navigate through previously sent prompts.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        yield Input(placeholder=INPUT_PLACEHOLDER, id="chat-input")
        yield Button("Send", id="send-btn", variant="primary", disabled=True)

    def on_input_changed(self, event: Input.Changed) -> None:
        self._update_send_button(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        if event.key == "up":
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_input = self.query_one("#chat-input", Input)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_input.value = ""
                return
        text_input.value = self._history[self._history_index]
        text_input.cursor_position = len(text_input.value)

    def _update_send_button(self, value: str) -> None:
        self.query_one("#send-btn", Button).disabled = self._busy or not value.strip()

    def _submit(self) -> None:
        """Post the current text. Clearing is left to the app once accepted."""
        value = self.query_one("#chat-input", Input).value
        if self._busy or not value.strip():
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self.post_message(self.Submitted(value))

    def set_busy(self, busy: bool) -> None:
        """Disable input while a response is in flight."""
        self._busy = busy
        text_input = self.query_one("#chat-input", Input)
        text_input.disabled = busy
        self._update_send_button(text_input.value)
        if not busy:
            text_input.focus()

    def clear(self) -> None:
        """Clear the text input."""
        self.query_one("#chat-input", Input).value = ""

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", Input).focus()


class ProseView(Static):
    """Prose segment of a message."""

    def __init__(self, segment: ProseSegment, **kwargs) -> None:
        super().__init__(render_prose(segment.content), classes="prose", **kwargs)

    @staticmethod
    def accepts(segment: Segment) -> bool:
        return isinstance(segment, ProseSegment)

    def show_segment(self, segment: ProseSegment) -> None:
        self.update(render_prose(segment.content))


class CodeBlock(Vertical):
    """Code segment with a language header and a copy button.

    The content may grow while the fence is still open, so the block
    re-renders in place on every update.
    """

    def __init__(self, segment: CodeSegment, **kwargs) -> None:
        super().__init__(classes="code-block", **kwargs)
        self._segment = segment

    @staticmethod
    def accepts(segment: Segment) -> bool:
        return isinstance(segment, CodeSegment)

    @property
    def code(self) -> str:
        return self._segment.content

    def compose(self):
        with Horizontal(classes="code-header"):
            yield Label(self._segment.language, classes="code-language")
            yield Button("Copy code", classes="copy-btn")
        yield Static(
            render_code(self._segment.content, self._segment.language),
            classes="code-body",
        )

    def show_segment(self, segment: CodeSegment) -> None:
        if segment == self._segment:
            return
        self._segment = segment
        if self.is_mounted:
            self.query_one(".code-language", Label).update(segment.language)
            self.query_one(".code-body", Static).update(
                render_code(segment.content, segment.language)
            )

    def on_mount(self) -> None:
        # Catch up with updates that arrived before compose finished
        self.query_one(".code-language", Label).update(self._segment.language)
        self.query_one(".code-body", Static).update(
            render_code(self._segment.content, self._segment.language)
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        copy_text(self, self.code)
        button = event.button
        button.label = "Copied"
        self.set_timer(COPY_FEEDBACK_SECONDS, lambda: setattr(button, "label", "Copy code"))


class ThinkingIndicator(LoadingIndicator):
    """Shown in place of an assistant reply until its first content arrives."""


class MessageHeader(Static):
    """Message author line; clicking it copies the raw message text."""

    def on_click(self, event: Click) -> None:
        event.stop()
        view = self.parent
        if isinstance(view, MessageView):
            copy_text(self, view.message.text)
            self.app.notify("Copied to clipboard", timeout=2)


class MessageView(Vertical):
    """A chat message rendered as prose and code segments.

    Clicking the header copies the raw message text.
    """

    def __init__(self, message: Message, **kwargs) -> None:
        super().__init__(
            classes=f"chat-message {message.role.value}-message",
            **kwargs
        )
        self._message = message
        self._segment_widgets: list[ProseView | CodeBlock] = []
        self._thinking: ThinkingIndicator | None = None

    @property
    def message(self) -> Message:
        return self._message

    def compose(self):
        yield MessageHeader(message_header(self._message), classes="message-header")

    def on_mount(self) -> None:
        self._render_body()

    def update_message(self, message: Message) -> None:
        if message == self._message:
            return
        self._message = message
        if self.is_mounted:
            self._render_body()

    def _render_body(self) -> None:
        if self._message.pending:
            if self._thinking is None:
                self._thinking = ThinkingIndicator()
                self.mount(self._thinking)
            return

        if self._thinking is not None:
            self._thinking.remove()
            self._thinking = None

        segments = parse_segments(self._message.text)

        # Update matching widgets in place, rebuild from the first mismatch
        keep = 0
        for widget, segment in zip(self._segment_widgets, segments, strict=False):
            if not widget.accepts(segment):
                break
            widget.show_segment(segment)
            keep += 1

        for widget in self._segment_widgets[keep:]:
            widget.remove()

        new_widgets = [segment_widget(segment) for segment in segments[keep:]]
        self._segment_widgets = self._segment_widgets[:keep] + new_widgets
        if new_widgets:
            self.mount(*new_widgets)



def segment_widget(segment: Segment) -> ProseView | CodeBlock:
    """Create the widget that renders a segment."""
    if isinstance(segment, CodeSegment):
        return CodeBlock(segment)
    return ProseView(segment)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history that follows new content.

    Scroll positions are reported to the follow policy; new content scrolls
    to the bottom only while the policy is following.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, policy: ScrollFollowPolicy, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._policy = policy
        self._views: dict[str, MessageView] = {}

    def on_mount(self) -> None:
        self.watch(self, "scroll_y", self._on_scroll_y, init=False)

    def _on_scroll_y(self, old_value: float, new_value: float) -> None:
        self._policy.on_scroll(
            scroll_offset=new_value,
            viewport_height=self.scrollable_content_region.height,
            content_height=self.virtual_size.height,
        )

    def sync(self, messages: tuple[Message, ...]) -> None:
        """Bring the displayed messages in line with a store snapshot."""
        current_ids = {message.id for message in messages}
        for message_id in [mid for mid in self._views if mid not in current_ids]:
            self._views.pop(message_id).remove()

        new_views = []
        for message in messages:
            view = self._views.get(message.id)
            if view is None:
                view = MessageView(message)
                self._views[message.id] = view
                new_views.append(view)
            else:
                view.update_message(message)
        if new_views:
            self.mount(*new_views)

        self.border_subtitle = f"{len(messages)} messages"

        # Scroll once the new content has been laid out
        if self._policy.should_follow:
            self.call_after_refresh(self.scroll_end, animate=False)


class DebugPanel(RichLog):
    """Log panel for real-time session tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default (CSS), shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "Store": "bright_blue",
        "LLM": "magenta",
    }

    def __init__(self, *args, log_level: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> LogLevel:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: LogLevel) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {self._log_level.name}"
        else:
            self.border_subtitle = "Hidden"

    def log_entry(self, level: LogLevel, component: str, message: str) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            level: Log level of the entry
            component: Component name (TUI, Session, Store, LLM)
            message: Log message
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.assemble(
            (f"{timestamp} ", "dim"),
            (f"{level.name:<7} ", level_color),
            (f"[{component}] ", comp_color),
            message,
        )
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
