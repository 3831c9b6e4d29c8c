"""Error types and reporting for the Lox interpreter."""

import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from lox.tokens import Token, EOF_KIND


# Process exit codes (sysexits.h)
EXIT_OK = 0
EXIT_USAGE = 64
EXIT_STATIC_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_RUNTIME_ERROR = 70


class LoxError(Exception):
    """Base class for errors reported to the user."""


class StaticError(LoxError):
    """An error found before any code runs."""
    def __init__(self, line: int, where: str, message: str):
        super().__init__(f"[line {line}] Error{where}: {message}")
        self.line = line
        self.where = where
        self.message = message

    @classmethod
    def at_token(cls, token: Token, message: str) -> 'StaticError':
        if token.kind == EOF_KIND:
            return cls(token.line, ' at end', message)
        return cls(token.line, f" at '{token.lexeme}'", message)


class ParseError(StaticError):
    """Scanner or parser error."""


class ResolveError(StaticError):
    """Illegal use of a name, `this`, `super` or `return`."""


class LoxRuntimeError(LoxError):
    """Exception used to propagate Lox runtime errors to the driver."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


@dataclass
class ReturnSignal:
    """Result of executing a `return` statement.

    Statement execution yields either None (normal completion) or a
    ReturnSignal, which every enclosing statement hands back up until the
    function call that owns it unwraps the value.
    """
    value: Any


class ErrorReporter:
    """Formats errors for the user. Writes to stderr unless given a stream."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def _write(self, text: str):
        print(text, file=self.stream or sys.stderr)

    def static_error(self, error: StaticError):
        self._write(str(error))

    def runtime_error(self, error: LoxRuntimeError):
        self._write(f"{error.message}\n[line {error.token.line}]")
