"""Token definitions for the Lox language.

Tokens are produced by the scanner and carried by AST nodes so that
diagnostics can name the offending lexeme and source line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


KEYWORDS = (
    'and', 'class', 'else', 'false', 'fun', 'for', 'if', 'nil',
    'or', 'print', 'return', 'super', 'this', 'true', 'var', 'while',
)

# Token kind names. Keywords use their upper-cased spelling (e.g. 'CLASS').
PUNCTUATION = {
    '(': 'LEFT_PAREN', ')': 'RIGHT_PAREN', '{': 'LEFT_BRACE', '}': 'RIGHT_BRACE',
    ',': 'COMMA', '.': 'DOT', '-': 'MINUS', '+': 'PLUS', ';': 'SEMICOLON',
    '/': 'SLASH', '*': 'STAR', '!': 'BANG', '!=': 'BANG_EQUAL', '=': 'EQUAL',
    '==': 'EQUAL_EQUAL', '>': 'GREATER', '>=': 'GREATER_EQUAL', '<': 'LESS',
    '<=': 'LESS_EQUAL',
}

EOF_KIND = 'EOF'


@dataclass(frozen=True)
class Token:
    kind: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.kind} {self.lexeme} {self.literal}"
