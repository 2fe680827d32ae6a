from typing import Optional


class FlexError(Exception):
    """Base class for errors surfaced to the host.

    Every error carries a kind (the user-facing category), a plain message
    and, when known, the source line it refers to.
    """
    kind = 'Error'

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"[line {self.line}] {self.kind}: {self.message}"
        return f"{self.kind}: {self.message}"


class LexerError(FlexError):
    kind = 'LexicalError'


class ParseError(FlexError):
    kind = 'SyntaxError'

    def __init__(self, message: str, line: Optional[int] = None, lexeme: Optional[str] = None):
        super().__init__(message, line)
        self.lexeme = lexeme

    def __str__(self) -> str:
        where = ' at end' if self.lexeme is None else f" at '{self.lexeme}'"
        return f"[line {self.line}] {self.kind}{where}: {self.message}"


class FlexRuntimeError(FlexError):
    kind = 'RuntimeError'


class InputCancelled(FlexRuntimeError):
    """Raised when a pending input wait is resolved with the cancellation marker."""

    def __init__(self, line: Optional[int] = None):
        super().__init__('Input cancelled', line)


class ExecutionStopped(Exception):
    """Internal signal used to unwind a run after the host called stop()."""
    def __init__(self):
        super().__init__('stopped')
