"""Exceptions raised by the chat pipeline."""


class ChatError(Exception):
    """Base class for chat pipeline errors."""


class MessageValidationError(ChatError, ValueError):
    """A message violates the store's identity or pending invariants.

    This is a programming error: the session never produces such messages
    in normal operation.
    """


class StreamError(ChatError):
    """The streaming source failed before or during a response.

    The original exception is chained as ``__cause__``.

    Attributes:
        prompt: The prompt that was being answered
        fragments_received: How many fragments arrived before the failure
    """

    def __init__(self, message: str, *, prompt: str = "", fragments_received: int = 0) -> None:
        self.prompt = prompt
        self.fragments_received = fragments_received
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.__cause__ is not None:
            return f"{base}: {self.__cause__}"
        return base
