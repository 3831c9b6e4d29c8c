"""Scanner for the Lox language.

Lexing is done by the Lark lexer built from the terminal definitions in
`lox.parser`. This module converts Lark tokens into `lox.tokens.Token`
values and turns lexer failures into Lox static errors.
"""

from __future__ import annotations

from typing import List

from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters

from .errors import ParseError
from .tokens import Token, EOF_KIND


def to_token(tok: LarkToken) -> Token:
    """Convert a Lark token into a Lox token, computing its literal value."""
    literal = None
    if tok.type == 'NUMBER':
        literal = float(tok.value)
    elif tok.type == 'STRING':
        literal = tok.value[1:-1]
    return Token(tok.type, str(tok.value), literal, tok.line)


def character_error(exc: UnexpectedCharacters, source: str) -> ParseError:
    # A lone '"' is the only way for a string to fail to lex. The string
    # runs to the end of input, so that is the line reported.
    if exc.char == '"':
        line = exc.line + source.count('\n', exc.pos_in_stream)
        return ParseError(line, '', 'Unterminated string')
    return ParseError(exc.line, '', 'Unexpected character')


def scan_tokens(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with EOF.

    Raises ParseError on the first character that starts no token.
    """
    from .parser import LOX_PARSER

    tokens: List[Token] = []
    try:
        for tok in LOX_PARSER.lex(source):
            tokens.append(to_token(tok))
    except UnexpectedCharacters as e:
        raise character_error(e, source) from None
    tokens.append(Token(EOF_KIND, '', None, source.count('\n') + 1))
    return tokens
