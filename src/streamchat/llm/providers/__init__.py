from .gemini import GeminiSource
from .scripted import ScriptedSource

__all__ = ["GeminiSource", "ScriptedSource"]
