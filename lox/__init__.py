# Lox language package
# This package provides a parser, a static resolver and a tree-walking
# interpreter for the Lox language.
from .interpreter import run_program, run_file, Interpreter
from .parser import parse_program
from .errors import LoxError, LoxRuntimeError, ParseError, ResolveError

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'Interpreter',
    'LoxError',
    'LoxRuntimeError',
    'ParseError',
    'ResolveError',
]
