"""Tests for the chat session controller."""
import asyncio

import pytest

from streamchat.chat import ChatSession, CodeSegment, Role, SessionState, StreamError, parse_segments
from streamchat.chat.config import APOLOGY_TEXT, CANCELLED_TEXT, WELCOME_TEXT
from streamchat.llm import StreamConfig, StreamingResponse, StreamSource


class GatedSource(StreamSource):
    """Source that yields its fragments, then waits until released."""

    def __init__(self, fragments=()):
        self._fragments = list(fragments)
        self.release = asyncio.Event()

    @property
    def model(self) -> str:
        return "gated"

    async def stream(self, prompt: str, config: StreamConfig) -> StreamingResponse:
        async def _generate():
            for fragment in self._fragments:
                yield fragment
            await self.release.wait()

        return StreamingResponse(_generate())

    async def close(self) -> None:
        pass


async def _wait_for(condition, attempts: int = 200):
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class TestSubmit:
    """Tests for a full request/response cycle."""

    @pytest.mark.asyncio
    async def test_streams_fragments_into_reply(self, make_session, state_log):
        """Test fragments accumulate into one assistant message."""
        session = make_session(["Hel", "lo"])
        state_log.attach(session)

        assert await session.submit("Hi") is True

        user, reply = session.store.messages
        assert user.role == Role.USER and user.text == "Hi"
        assert reply.role == Role.ASSISTANT
        assert reply.text == "Hello"
        assert reply.pending is False
        assert state_log == [
            SessionState.SUBMITTING,
            SessionState.STREAMING,
            SessionState.COMPLETED,
            SessionState.IDLE,
        ]

    @pytest.mark.asyncio
    async def test_observer_sees_pending_then_text(self, make_session):
        """Test the reply is pending until the first fragment arrives."""
        session = make_session(["Hel", "lo"])
        snapshots = []
        session.store.subscribe(snapshots.append)

        await session.submit("Hi")

        assert len(snapshots[0]) == 1
        assert snapshots[1][-1].pending is True
        assert snapshots[2][-1].text == "Hel"
        assert snapshots[2][-1].pending is False
        assert snapshots[-1][-1].text == "Hello"

    @pytest.mark.asyncio
    async def test_uses_input_text_and_clears_it(self, make_session):
        """Test submit without text sends the current input."""
        session = make_session(["ok"])
        session.input_text = "from input"

        await session.submit()

        assert session.source.prompts == ["from input"]
        assert session.input_text == ""

    @pytest.mark.asyncio
    async def test_sends_fixed_config(self, make_session):
        """Test every prompt carries the system instruction and safety settings."""
        session = make_session(["ok"])

        await session.submit("one")
        await session.submit("two")

        configs = session.source.configs
        assert configs[0] == configs[1] == StreamConfig()
        assert len(configs[0].safety_settings) == 5
        assert session.cycles == 2

    @pytest.mark.asyncio
    async def test_blank_input_ignored(self, make_session):
        """Test whitespace-only prompts do nothing."""
        session = make_session(["ok"])

        assert await session.submit("   \n") is False
        assert len(session.store) == 0
        assert session.source.prompts == []
        assert session.state == SessionState.IDLE

    @pytest.mark.asyncio
    async def test_zero_fragments_completes_empty(self, make_session):
        """Test an empty stream finalizes an empty reply."""
        session = make_session([])

        await session.submit("Hi")

        reply = session.store.messages[-1]
        assert reply.text == ""
        assert reply.pending is False
        assert session.last_error is None

    @pytest.mark.asyncio
    async def test_empty_fragments_skipped(self, make_session):
        """Test empty fragments do not clear the pending flag."""
        session = make_session(["", "a"])
        snapshots = []
        session.store.subscribe(snapshots.append)

        await session.submit("Hi")

        assert snapshots[2][-1].text == "a"
        assert session.store.messages[-1].text == "a"

    @pytest.mark.asyncio
    async def test_usage_recorded(self, make_session):
        """Test usage reported by the source is kept."""
        session = make_session(["two words"])

        await session.submit("Hi")

        assert session.last_usage == {
            "prompt_tokens": 1,
            "completion_tokens": 2,
            "total_tokens": 3,
        }

    @pytest.mark.asyncio
    async def test_echo_reply_contains_code_block(self, make_source):
        """Test the echo script streams a fenced block end to end."""
        session = ChatSession(make_source(chunk_size=3), welcome_text=None)

        await session.submit("print(1)")

        segments = parse_segments(session.store.messages[-1].text)
        assert CodeSegment(language="text", content="print(1)\n") in segments


class TestFailures:
    """Tests for source failures."""

    @pytest.mark.asyncio
    async def test_error_at_open_shows_apology(self, make_session, state_log):
        """Test a failure before any fragment replaces the pending reply."""
        session = make_session(error=ConnectionError("offline"))
        state_log.attach(session)

        assert await session.submit("Hi") is True

        reply = session.store.messages[-1]
        assert reply.text == APOLOGY_TEXT
        assert reply.pending is False
        assert session.store.pending() is None
        assert state_log == [SessionState.SUBMITTING, SessionState.FAILED, SessionState.IDLE]

    @pytest.mark.asyncio
    async def test_error_mid_stream_keeps_partial_text(self, make_session):
        """Test text received before the failure is kept."""
        session = make_session(["Hel", "lo"], error=RuntimeError("boom"), fail_after=1)

        await session.submit("Hi")

        assert session.store.messages[-1].text == "Hel"
        error = session.last_error
        assert isinstance(error, StreamError)
        assert error.fragments_received == 1
        assert error.prompt == "Hi"
        assert isinstance(error.__cause__, RuntimeError)
        assert "boom" in str(error)

    @pytest.mark.asyncio
    async def test_error_before_first_fragment_during_iteration(self, make_session):
        """Test a failure on the first read still apologizes."""
        session = make_session(["Hel"], error=RuntimeError("boom"), fail_after=0)

        await session.submit("Hi")

        assert session.store.messages[-1].text == APOLOGY_TEXT

    @pytest.mark.asyncio
    async def test_session_usable_after_failure(self, make_session):
        """Test the next cycle starts cleanly after a failure."""
        session = make_session(["Hel"], error=RuntimeError("boom"), fail_after=1)
        await session.submit("first")
        session.source._error = None

        await session.submit("second")

        assert session.last_error is None
        assert session.store.messages[-1].text == "Hel"
        assert len(session.store) == 4


class TestConcurrency:
    """Tests for busy gating and cancellation."""

    @pytest.mark.asyncio
    async def test_submission_ignored_while_streaming(self):
        """Test a second prompt is dropped while a cycle is in flight."""
        source = GatedSource(["Par"])
        session = ChatSession(source, welcome_text=None)
        task = asyncio.create_task(session.submit("first"))
        await _wait_for(lambda: session.state == SessionState.STREAMING)

        assert session.is_busy
        assert await session.submit("second") is False

        source.release.set()
        assert await task is True
        assert [m.text for m in session.store.messages] == ["first", "Par"]

    @pytest.mark.asyncio
    async def test_cancel_keeps_partial_text(self, state_log):
        """Test cancelling mid-stream finalizes the received text."""
        session = ChatSession(GatedSource(["Par"]), welcome_text=None)
        state_log.attach(session)
        task = asyncio.create_task(session.submit("Hi"))
        await _wait_for(
            lambda: session.state == SessionState.STREAMING
            and session.store.messages[-1].text == "Par"
        )

        assert session.cancel() is True
        with pytest.raises(asyncio.CancelledError):
            await task

        reply = session.store.messages[-1]
        assert reply.text == "Par"
        assert reply.pending is False
        assert state_log[-2:] == [SessionState.CANCELLED, SessionState.IDLE]

    @pytest.mark.asyncio
    async def test_cancel_before_first_fragment(self):
        """Test cancelling with no text leaves a cancellation note."""
        session = ChatSession(GatedSource(), welcome_text=None)
        task = asyncio.create_task(session.submit("Hi"))
        await _wait_for(lambda: session.state == SessionState.STREAMING)

        session.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.store.messages[-1].text == CANCELLED_TEXT
        assert session.store.pending() is None

    def test_cancel_when_idle(self, make_session):
        """Test there is nothing to cancel without a cycle."""
        assert make_session().cancel() is False


class TestWelcomeAndReset:
    """Tests for the seeded greeting and clearing the chat."""

    def test_welcome_message_seeded(self, make_source):
        """Test a new session greets the user."""
        session = ChatSession(make_source())

        (welcome,) = session.store.messages
        assert welcome.role == Role.ASSISTANT
        assert welcome.text == WELCOME_TEXT

    @pytest.mark.asyncio
    async def test_reset_reseeds_welcome(self, make_source):
        """Test reset clears the conversation back to the greeting."""
        session = ChatSession(make_source(["ok"]))
        await session.submit("Hi")
        session.scroll.on_scroll(0, 10, 1000)

        session.reset()

        assert [m.text for m in session.store.messages] == [WELCOME_TEXT]
        assert session.scroll.should_follow

    @pytest.mark.asyncio
    async def test_submit_resets_scroll(self, make_session):
        """Test a new prompt follows new content again."""
        session = make_session(["ok"])
        session.scroll.on_scroll(0, 10, 1000)

        await session.submit("Hi")

        assert session.scroll.should_follow

    @pytest.mark.asyncio
    async def test_debug_callback_receives_logs(self, make_session):
        """Test session, store and source logs reach the callback."""
        session = make_session(["ok"])
        entries = []
        session.set_debug_callback(lambda level, component, message: entries.append((level, component)))

        await session.submit("Hi")

        components = {component for _, component in entries}
        assert {"Session", "Store", "LLM"} <= components
