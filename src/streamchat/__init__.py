"""
Streamchat: a terminal chat client that streams Gemini responses.

Streamed text is re-parsed into prose and fenced code segments as it
arrives, so code blocks render live while the reply is still coming in.
"""

__version__ = "0.1.0"

from .chat import (
    ChatSession,
    CodeSegment,
    Message,
    MessageStore,
    ProseSegment,
    Role,
    ScrollFollowPolicy,
    SessionState,
    parse_segments,
)
from .llm import StreamConfig, StreamSource, create_stream_source

__all__ = [
    "ChatSession",
    "CodeSegment",
    "Message",
    "MessageStore",
    "ProseSegment",
    "Role",
    "ScrollFollowPolicy",
    "SessionState",
    "StreamConfig",
    "StreamSource",
    "create_stream_source",
    "parse_segments",
]
