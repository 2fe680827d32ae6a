# Flex language package
# This package provides a lexer, parser, asyncio interpreter and
# statement-stepping debugger for the Flex scripting language.
from .errors import FlexError, FlexRuntimeError, InputCancelled, LexerError, ParseError
from .interpreter import Interpreter, RunResult, run_program
from .parser import parse_program, validate

__all__ = [
    'FlexError',
    'FlexRuntimeError',
    'InputCancelled',
    'Interpreter',
    'LexerError',
    'ParseError',
    'RunResult',
    'parse_program',
    'run_program',
    'validate',
]
