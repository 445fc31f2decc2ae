from .base import StreamSource
from .factory import create_stream_source
from .models import (
    BlockThreshold,
    HarmCategory,
    SafetySetting,
    StreamConfig,
    StreamingResponse,
)
from .providers import GeminiSource, ScriptedSource

__all__ = [
    "BlockThreshold",
    "GeminiSource",
    "HarmCategory",
    "SafetySetting",
    "ScriptedSource",
    "StreamConfig",
    "StreamSource",
    "StreamingResponse",
    "create_stream_source",
]
