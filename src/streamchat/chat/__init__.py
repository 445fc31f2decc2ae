"""Incremental response pipeline.

Module structure (each module hides a design decision):
- models.py: Message and segment representation
- segments.py: Classification of streamed text into prose and code
- store.py: Message ordering, identity and observer notification
- scroll.py: When the view follows new content
- session.py: Request/response cycle and its failure recovery
"""

from .errors import ChatError, MessageValidationError, StreamError
from .models import CodeSegment, Message, ProseSegment, Role, Segment, new_message_id
from .scroll import FollowState, ScrollFollowPolicy
from .segments import parse_segments, render_fences
from .session import ChatSession, SessionState
from .store import MessageStore

__all__ = [
    "ChatError",
    "ChatSession",
    "CodeSegment",
    "FollowState",
    "Message",
    "MessageStore",
    "MessageValidationError",
    "ProseSegment",
    "Role",
    "ScrollFollowPolicy",
    "Segment",
    "SessionState",
    "StreamError",
    "new_message_id",
    "parse_segments",
    "render_fences",
]
