"""Chat session controller.

Orchestrates one request/response cycle at a time:

    IDLE -> SUBMITTING -> STREAMING -> COMPLETED | FAILED | CANCELLED -> IDLE

The controller runs on a single asyncio task per cycle. Cycles are
serialized by the state gate (a submission while a cycle is in flight is
ignored), so the message store never sees two writers.

Known liveness gap: a source that never finishes keeps the session in
STREAMING until ``cancel()`` is called. Timeouts belong to the source.
"""

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Any

from ..llm.base import StreamSource
from ..llm.models import StreamConfig
from .config import APOLOGY_TEXT, CANCELLED_TEXT, WELCOME_TEXT
from .errors import StreamError
from .models import Message
from .scroll import ScrollFollowPolicy
from .store import MessageStore

StateObserver = Callable[["SessionState"], None]


class SessionState(str, Enum):
    """Phase of the current request/response cycle."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ChatSession:
    """Single in-memory chat session over a streaming source.

    Hidden design decisions:
    - Ordering of store mutations within a cycle
    - How fragments accumulate into the pending reply
    - Failure and cancellation recovery of the pending reply
    """

    def __init__(
        self,
        source: StreamSource,
        store: MessageStore | None = None,
        scroll: ScrollFollowPolicy | None = None,
        config: StreamConfig | None = None,
        welcome_text: str | None = WELCOME_TEXT,
    ) -> None:
        """Initialize the session.

        Args:
            source: Streaming source answering prompts
            store: Message store (a new one is created if omitted)
            scroll: Scroll-follow policy reset on every submission
            config: Fixed system instruction and safety settings
            welcome_text: Greeting seeded as the first assistant message
                (None starts with an empty conversation)
        """
        self._source = source
        self._store = store if store is not None else MessageStore()
        self._scroll = scroll if scroll is not None else ScrollFollowPolicy()
        self._config = config or StreamConfig()
        self._welcome_text = welcome_text
        self._state = SessionState.IDLE
        self._state_observers: list[StateObserver] = []
        self._debug_callback: Any | None = None
        self._task: asyncio.Task | None = None
        self._cycles = 0

        self.input_text = ""
        self.last_error: StreamError | None = None
        self.last_usage: dict[str, Any] | None = None

        if welcome_text and len(self._store) == 0:
            self._store.append(Message.assistant(welcome_text))

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def scroll(self) -> ScrollFollowPolicy:
        return self._scroll

    @property
    def source(self) -> StreamSource:
        return self._source

    @property
    def config(self) -> StreamConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        """True while a cycle is in flight and submissions are ignored."""
        return self._state != SessionState.IDLE

    @property
    def cycles(self) -> int:
        """Number of cycles run so far."""
        return self._cycles

    # Logging and observers

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed session logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'

        The callback is propagated to the message store and the source.
        """
        self._debug_callback = callback
        self._store.set_debug_callback(callback)
        self._source.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    def subscribe_state(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer for state transitions.

        Returns:
            Function that removes the observer again
        """
        self._state_observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._state_observers:
                self._state_observers.remove(observer)

        return _unsubscribe

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        self._debug("debug", f"State -> {state.value}")
        for observer in list(self._state_observers):
            observer(state)

    # Cycle

    async def submit(self, text: str | None = None) -> bool:
        """Send a prompt and stream the reply into the store.

        Args:
            text: Prompt text (defaults to the current ``input_text``)

        Returns:
            False if the submission was ignored (blank input or a cycle in
            flight), True once the cycle has finished, whether it completed
            or failed.

        Raises:
            asyncio.CancelledError: If the cycle was cancelled; the pending
                reply is finalized before the error propagates.
        """
        prompt = self.input_text if text is None else text

        if not prompt.strip():
            self._debug("debug", "Ignoring blank submission")
            return False
        if self.is_busy:
            self._debug("debug", f"Ignoring submission while {self._state.value}")
            return False

        self._task = asyncio.current_task()
        self._cycles += 1
        self.last_error = None
        self.last_usage = None

        self._store.append(Message.user(prompt))
        self.input_text = ""
        self._scroll.reset()
        self._set_state(SessionState.SUBMITTING)
        self._debug("info", f"Submitting: '{prompt[:50]}'")

        reply = Message.assistant(pending=True)
        self._store.append(reply)

        try:
            await self._stream_reply(prompt, reply.id)
        finally:
            self._task = None
            self._set_state(SessionState.IDLE)

        return True

    async def _stream_reply(self, prompt: str, reply_id: str) -> None:
        """Run the streaming phase and settle its terminal state."""
        full_text = ""
        fragments = 0

        try:
            stream = await self._source.stream(prompt, self._config)
            self._set_state(SessionState.STREAMING)

            try:
                async for fragment in stream:
                    if not fragment:
                        continue
                    fragments += 1
                    full_text += fragment
                    self._store.update_text(reply_id, full_text, clear_pending=True)
            finally:
                await stream.aclose()

            # Zero fragments still finalizes an empty reply
            self._store.update_text(reply_id, full_text, clear_pending=True)
            self.last_usage = stream.usage
            self._set_state(SessionState.COMPLETED)
            self._debug("info", f"Completed: {fragments} fragment(s), {len(full_text)} chars")

        except asyncio.CancelledError:
            self._store.update_text(reply_id, full_text or CANCELLED_TEXT, clear_pending=True)
            self._set_state(SessionState.CANCELLED)
            self._debug("warning", f"Cancelled after {fragments} fragment(s)")
            raise

        except Exception as e:
            error = StreamError(
                "Streaming source failed",
                prompt=prompt,
                fragments_received=fragments,
            )
            error.__cause__ = e
            self.last_error = error
            self._store.mark_all_pending_failed(APOLOGY_TEXT)
            self._set_state(SessionState.FAILED)
            self._debug("error", f"{error} (after {fragments} fragment(s))")

    def cancel(self) -> bool:
        """Cancel the cycle in flight.

        Returns:
            True if a running cycle was asked to stop
        """
        if self._task is None or self._task.done():
            return False
        self._debug("info", "Cancellation requested")
        self._task.cancel()
        return True

    def reset(self) -> None:
        """Clear the conversation and re-seed the welcome message.

        A cycle still in flight keeps running, but its updates target a
        message that no longer exists and are ignored by the store.
        """
        seed = [Message.assistant(self._welcome_text)] if self._welcome_text else []
        self._store.reset(seed)
        self._scroll.reset()
