"""Data models for the chat pipeline.

Messages are immutable snapshots: every mutation in the store replaces the
message with an updated copy, so observers can keep the sequences they were
given without seeing later changes.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from uuid_extensions import uuid7


def new_message_id() -> str:
    """Return a unique, time-ordered message identifier.

    uuid7 embeds a millisecond timestamp plus random bits, so two messages
    created in the same instant still get distinct, sortable ids.
    """
    return str(uuid7())


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id, description="Unique message identifier")
    role: Role = Field(description="Who wrote the message")
    text: str = Field(default="", description="Full accumulated content")
    pending: bool = Field(
        default=False,
        description="True while an assistant reply is waiting for its first content"
    )
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def user(cls, text: str) -> "Message":
        """Create a finalized user message."""
        return cls(role=Role.USER, text=text)

    @classmethod
    def assistant(cls, text: str = "", pending: bool = False) -> "Message":
        """Create an assistant message (pending replies start empty)."""
        return cls(role=Role.ASSISTANT, text=text, pending=pending)


class ProseSegment(BaseModel):
    """Plain text between code fences."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prose"] = "prose"
    content: str


class CodeSegment(BaseModel):
    """A fenced code block, possibly still streaming.

    The opening fence is kept as written so the block can be turned back
    into the exact source text: ``fence_info`` is the raw token after the
    fence when it differs from ``language`` (an empty token falls back to
    plaintext), and ``fence_newline`` records whether a newline followed it.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["code"] = "code"
    language: str
    content: str
    fence_info: str | None = Field(default=None, repr=False)
    fence_newline: bool = Field(default=True, repr=False)


Segment = ProseSegment | CodeSegment
