"""In-memory streaming source that replays scripted fragments.

Used for offline runs (``LLM_PROVIDER=scripted``) and tests. Without a
script it echoes the prompt back inside a fenced code block, chunked into
small fragments so the streaming path is exercised end to end.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence

from ..base import StreamSource
from ..models import StreamConfig, StreamingResponse


class ScriptedSource(StreamSource):
    """Streaming source with a fixed script.

    Hidden design decisions:
    - Fragment schedule (pre-set list or chunked echo of the prompt)
    - Failure injection at open or after a number of fragments
    - Artificial delay between fragments
    """

    def __init__(
        self,
        fragments: Sequence[str] | None = None,
        error: Exception | None = None,
        fail_after: int | None = None,
        delay: float = 0.0,
        chunk_size: int = 8,
        model: str = "scripted-echo",
    ):
        """Initialize scripted source.

        Args:
            fragments: Fragments to yield for every prompt (None echoes the prompt)
            error: Exception to raise instead of finishing normally
            fail_after: Raise ``error`` after this many fragments
                (None raises when the stream is opened)
            delay: Seconds to sleep before each fragment
            chunk_size: Fragment size for the echo reply
            model: Reported model name
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._fragments = list(fragments) if fragments is not None else None
        self._error = error
        self._fail_after = fail_after
        self._delay = delay
        self._chunk_size = chunk_size
        self._model = model
        self.prompts: list[str] = []
        self.configs: list[StreamConfig] = []
        self.closed = False

    @property
    def model(self) -> str:
        return self._model

    def _script_for(self, prompt: str) -> list[str]:
        if self._fragments is not None:
            return list(self._fragments)
        reply = f"You said:\n```text\n{prompt}\n```\n"
        return [
            reply[i:i + self._chunk_size]
            for i in range(0, len(reply), self._chunk_size)
        ]

    async def stream(self, prompt: str, config: StreamConfig) -> StreamingResponse:
        """Record the request and return the scripted fragments."""
        self.prompts.append(prompt)
        self.configs.append(config)
        self._debug("debug", f"Scripted stream for prompt {len(self.prompts)}")

        if self._error is not None and self._fail_after is None:
            raise self._error

        script = self._script_for(prompt)
        response: StreamingResponse

        async def _generate() -> AsyncIterator[str]:
            for index, fragment in enumerate(script):
                if self._error is not None and index == self._fail_after:
                    raise self._error
                if self._delay:
                    await asyncio.sleep(self._delay)
                yield fragment

            if self._error is not None and self._fail_after is not None:
                raise self._error

            completion_tokens = sum(len(fragment.split()) for fragment in script)
            response.set_usage({
                "prompt_tokens": len(prompt.split()),
                "completion_tokens": completion_tokens,
                "total_tokens": len(prompt.split()) + completion_tokens,
            })

        response = StreamingResponse(_generate())
        return response

    async def close(self) -> None:
        self.closed = True
