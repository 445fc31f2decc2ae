"""Unit tests for the message store."""
import pytest

from streamchat.chat import Message, MessageStore, MessageValidationError, Role


class TestAppend:
    """Tests for appending messages."""

    def test_append_preserves_order(self, store: MessageStore):
        """Test messages are kept in insertion order."""
        first = Message.user("hi")
        second = Message.assistant("hello")
        store.append(first)
        store.append(second)

        assert store.messages == (first, second)
        assert len(store) == 2

    def test_duplicate_id_rejected(self, store: MessageStore):
        """Test that an id can only be stored once."""
        message = Message.user("hi")
        store.append(message)

        with pytest.raises(MessageValidationError):
            store.append(Message(id=message.id, role=Role.ASSISTANT, text="other"))

    def test_second_pending_rejected(self, store: MessageStore):
        """Test at most one message is pending."""
        store.append(Message.assistant(pending=True))

        with pytest.raises(MessageValidationError):
            store.append(Message.assistant(pending=True))
        assert len(store) == 1

    def test_validation_error_is_value_error(self):
        """Test that store errors can be caught as ValueError."""
        assert issubclass(MessageValidationError, ValueError)

    def test_seeded_store(self):
        """Test constructing a store with initial messages."""
        seed = [Message.assistant("welcome")]
        store = MessageStore(seed)

        assert store.messages == tuple(seed)

    def test_ids_are_unique(self):
        """Test generated ids differ for messages created together."""
        ids = {Message.user("x").id for _ in range(100)}
        assert len(ids) == 100


class TestUpdateText:
    """Tests for update_text."""

    def test_replaces_text_and_clears_pending(self, store: MessageStore):
        """Test the cumulative text replaces the old one."""
        reply = Message.assistant(pending=True)
        store.append(reply)

        assert store.update_text(reply.id, "Hel", clear_pending=True)
        assert store.update_text(reply.id, "Hello", clear_pending=True)

        updated = store.get(reply.id)
        assert updated.text == "Hello"
        assert updated.pending is False
        assert store.pending() is None

    def test_keeps_pending_by_default(self, store: MessageStore):
        """Test pending is untouched unless asked."""
        reply = Message.assistant(pending=True)
        store.append(reply)
        store.update_text(reply.id, "x")

        assert store.get(reply.id).pending is True

    def test_unknown_id_is_noop(self, store: MessageStore):
        """Test updates to an unknown id change nothing."""
        store.append(Message.user("hi"))
        snapshots = []
        store.subscribe(snapshots.append)

        assert store.update_text("missing", "text") is False
        assert snapshots == []

    def test_user_message_immutable(self, store: MessageStore):
        """Test user messages cannot be edited."""
        message = Message.user("hi")
        store.append(message)

        with pytest.raises(MessageValidationError):
            store.update_text(message.id, "changed")
        assert store.get(message.id).text == "hi"

    def test_snapshots_are_not_mutated(self, store: MessageStore):
        """Test earlier snapshots keep the old message."""
        reply = Message.assistant(pending=True)
        store.append(reply)
        before = store.messages
        store.update_text(reply.id, "new", clear_pending=True)

        assert before[0].text == ""
        assert before[0].pending is True


class TestMarkAllPendingFailed:
    """Tests for mark_all_pending_failed."""

    def test_finalizes_pending(self, store: MessageStore):
        """Test the pending reply gets the fallback text."""
        store.append(Message.user("hi"))
        reply = Message.assistant(pending=True)
        store.append(reply)

        assert store.mark_all_pending_failed("sorry") == 1
        assert store.get(reply.id).text == "sorry"
        assert store.get(reply.id).pending is False

    def test_idempotent(self, store: MessageStore):
        """Test a second call changes nothing and notifies nobody."""
        store.append(Message.assistant(pending=True))
        store.mark_all_pending_failed("sorry")
        snapshots = []
        store.subscribe(snapshots.append)

        assert store.mark_all_pending_failed("sorry") == 0
        assert snapshots == []

    def test_leaves_finalized_messages(self, store: MessageStore):
        """Test messages that already have content keep it."""
        reply = Message.assistant(pending=True)
        store.append(reply)
        store.update_text(reply.id, "partial", clear_pending=True)

        assert store.mark_all_pending_failed("sorry") == 0
        assert store.get(reply.id).text == "partial"


class TestObservers:
    """Tests for subscribe and snapshot publishing."""

    def test_every_mutation_publishes(self, store: MessageStore):
        """Test observers see the full snapshot after each change."""
        snapshots = []
        store.subscribe(snapshots.append)
        reply = Message.assistant(pending=True)
        store.append(Message.user("hi"))
        store.append(reply)
        store.update_text(reply.id, "ok", clear_pending=True)

        assert [len(s) for s in snapshots] == [1, 2, 2]
        assert snapshots[-1][-1].text == "ok"

    def test_unsubscribe(self, store: MessageStore):
        """Test an unsubscribed observer is not called."""
        snapshots = []
        unsubscribe = store.subscribe(snapshots.append)
        unsubscribe()
        unsubscribe()
        store.append(Message.user("hi"))

        assert snapshots == []


class TestQueries:
    """Tests for read-only queries."""

    def test_last_response_skips_pending(self, store: MessageStore):
        """Test last_response returns the last finalized assistant text."""
        assert store.last_response() is None
        store.append(Message.assistant("first"))
        store.append(Message.user("q"))
        store.append(Message.assistant(pending=True))

        assert store.last_response() == "first"

    def test_reset(self, store: MessageStore):
        """Test reset drops messages and reseeds."""
        reply = Message.assistant(pending=True)
        store.append(reply)
        store.reset([Message.assistant("welcome")])

        assert len(store) == 1
        assert store.get(reply.id) is None
        assert store.update_text(reply.id, "late") is False
