# Lox language package
# A tree-walking interpreter: lexer, recursive-descent parser and evaluator.
from .lexer import scan
from .lox import run, new_interpreter
from .errors import LoxError, LexError, ParseError, LoxRuntimeError, LoxSyntaxError

__all__ = [
    'scan',
    'run',
    'new_interpreter',
    'LoxError',
    'LexError',
    'ParseError',
    'LoxRuntimeError',
    'LoxSyntaxError',
]
