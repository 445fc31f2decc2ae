"""Pytest configuration and shared fixtures."""
import pytest

from streamchat.chat import ChatSession, MessageStore
from streamchat.llm import ScriptedSource


@pytest.fixture
def store():
    """Return an empty message store."""
    return MessageStore()


@pytest.fixture
def make_source():
    """Return a factory for scripted streaming sources."""
    def _make(fragments=None, **kwargs):
        return ScriptedSource(fragments=fragments, **kwargs)
    return _make


@pytest.fixture
def make_session(make_source):
    """Return a factory for sessions over a scripted source.

    Sessions start without the welcome message unless one is passed.
    """
    def _make(fragments=None, welcome_text=None, **source_kwargs):
        source = make_source(fragments, **source_kwargs)
        return ChatSession(source, welcome_text=welcome_text)
    return _make


@pytest.fixture
def state_log():
    """Return a recorder for session state transitions."""
    class _Recorder(list):
        def attach(self, session):
            session.subscribe_state(self.append)
            return self
    return _Recorder()
