"""In-memory message store.

Hides how the conversation is held and how observers are notified.
Every mutation replaces the affected message with an updated copy and
publishes the full ordered snapshot to subscribers synchronously.
"""

from collections.abc import Callable, Iterable
from typing import Any

from .errors import MessageValidationError
from .models import Message, Role

MessagesObserver = Callable[[tuple[Message, ...]], None]


class MessageStore:
    """Ordered collection of chat messages with a single pending slot.

    Invariants:
    - message ids are unique
    - at most one message is pending at any time
    - user messages never change after being appended
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = []
        self._subscribers: list[MessagesObserver] = []
        self._debug_callback: Any | None = None
        for message in messages:
            self._insert(message)

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Store", message)

    # Observers

    def subscribe(self, observer: MessagesObserver) -> Callable[[], None]:
        """Register an observer for message snapshots.

        Args:
            observer: Called with the ordered message tuple after every mutation

        Returns:
            Function that removes the observer again
        """
        self._subscribers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._subscribers:
                self._subscribers.remove(observer)

        return _unsubscribe

    def _publish(self) -> None:
        snapshot = self.messages
        for observer in list(self._subscribers):
            observer(snapshot)

    # Queries

    @property
    def messages(self) -> tuple[Message, ...]:
        """Immutable snapshot of all messages in insertion order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def get(self, message_id: str) -> Message | None:
        """Get a message by id, or None if it is not (or no longer) stored."""
        index = self._index_of(message_id)
        return None if index is None else self._messages[index]

    def pending(self) -> Message | None:
        """Get the pending message, if any."""
        for message in self._messages:
            if message.pending:
                return message
        return None

    def last_response(self) -> str | None:
        """Get the text of the last finalized assistant message."""
        for message in reversed(self._messages):
            if message.role == Role.ASSISTANT and not message.pending:
                return message.text
        return None

    def _index_of(self, message_id: str) -> int | None:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        return None

    # Mutations

    def _insert(self, message: Message) -> None:
        if self._index_of(message.id) is not None:
            raise MessageValidationError(f"Duplicate message id: {message.id}")
        if message.pending and self.pending() is not None:
            raise MessageValidationError(
                f"Cannot append pending message {message.id}: "
                f"{self.pending().id} is still pending"
            )
        self._messages.append(message)

    def append(self, message: Message) -> None:
        """Append a message at the end of the conversation.

        Raises:
            MessageValidationError: If the id is already stored, or the message
                is pending while another message is still pending
        """
        self._insert(message)
        self._debug("debug", f"Appended {message.role.value} message {message.id}")
        self._publish()

    def update_text(self, message_id: str, text: str, clear_pending: bool = False) -> bool:
        """Replace the text of a message.

        The caller passes the cumulative text, not a delta. Unknown ids are
        ignored, since a late streaming update may arrive after a reset.

        Args:
            message_id: Id of the message to update
            text: New full text
            clear_pending: Also mark the message as no longer pending

        Returns:
            True if a message was updated

        Raises:
            MessageValidationError: If the id belongs to a user message
        """
        index = self._index_of(message_id)
        if index is None:
            self._debug("debug", f"Ignoring update for unknown message {message_id}")
            return False

        current = self._messages[index]
        if current.role == Role.USER:
            raise MessageValidationError(f"User message {message_id} is immutable")

        update: dict[str, Any] = {"text": text}
        if clear_pending:
            update["pending"] = False
        self._messages[index] = current.model_copy(update=update)
        self._publish()
        return True

    def mark_all_pending_failed(self, fallback_text: str) -> int:
        """Finalize every pending message with a fallback text.

        Idempotent: once nothing is pending this changes nothing and does
        not notify observers.

        Returns:
            Number of messages that were finalized
        """
        changed = 0
        for index, message in enumerate(self._messages):
            if message.pending:
                self._messages[index] = message.model_copy(
                    update={"text": fallback_text, "pending": False}
                )
                changed += 1

        if changed:
            self._debug("warning", f"Finalized {changed} pending message(s) with fallback text")
            self._publish()
        return changed

    def reset(self, messages: Iterable[Message] = ()) -> None:
        """Drop all messages, optionally seeding new ones."""
        self._messages = []
        for message in messages:
            self._insert(message)
        self._debug("info", "Conversation cleared")
        self._publish()
