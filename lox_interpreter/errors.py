from dataclasses import dataclass
from typing import Any, List

from .tokens import Token, TokenType


def near(token: Token) -> str:
    """The context snippet for a diagnostic located at `token`."""
    if token.token_type == TokenType.EOF:
        return "end"
    return token.lexeme


class LoxError(Exception):
    """
    Base class for every diagnostic the core reports.
    Carries the source line, a human-readable message and a "near" snippet.
    """
    kind = "Error"

    def __init__(self, line: int, message: str, near: str = ""):
        self.line = line
        self.message = message
        self.near = near
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.near == "end":
            return f"[line {self.line}] {self.kind} at end: {self.message}"
        if self.near:
            return f"[line {self.line}] {self.kind} at '{self.near}': {self.message}"
        return f"[line {self.line}] {self.kind}: {self.message}"


class LexError(LoxError):
    """An unrecognised character or unterminated string."""
    kind = "Lex error"


class ParseError(LoxError):
    """A syntax error within one statement."""
    kind = "Parse error"


class LoxRuntimeError(LoxError):
    """Custom exception for reporting runtime errors."""
    kind = "Runtime error"

    @classmethod
    def at(cls, token: Token, message: str) -> 'LoxRuntimeError':
        return cls(token.line, message, token.lexeme)


class LoxSyntaxError(Exception):
    """Raised by `run` when a unit fails to scan or parse; holds every error found."""
    def __init__(self, errors: List[LoxError]):
        self.errors = errors
        super().__init__("\n".join(str(error) for error in errors))


# --- Control-flow signals ---
# These are returned from statement execution, never raised.

class Signal:
    pass


class Normal(Signal):
    def __repr__(self) -> str:
        return "NORMAL"


NORMAL = Normal()


@dataclass(frozen=True)
class BreakSignal(Signal):
    line: int


@dataclass(frozen=True)
class ReturnSignal(Signal):
    line: int
    value: Any
