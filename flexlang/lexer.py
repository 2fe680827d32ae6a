"""Tokenizer for the Flex language.

The lexer makes a single forward pass over the source and produces an
ordered list of tokens terminated by an ``EOF`` token. Whitespace and
``#`` comments are discarded; newlines only advance the line counter used
for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import LexerError


class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = 'LEFT_PAREN'
    RIGHT_PAREN = 'RIGHT_PAREN'
    LEFT_BRACE = 'LEFT_BRACE'
    RIGHT_BRACE = 'RIGHT_BRACE'
    LEFT_BRACKET = 'LEFT_BRACKET'
    RIGHT_BRACKET = 'RIGHT_BRACKET'
    COMMA = 'COMMA'
    DOT = 'DOT'
    MINUS = 'MINUS'
    PLUS = 'PLUS'
    SEMICOLON = 'SEMICOLON'
    SLASH = 'SLASH'
    STAR = 'STAR'

    # One or two character tokens
    BANG = 'BANG'
    BANG_EQUAL = 'BANG_EQUAL'
    EQUAL = 'EQUAL'
    EQUAL_EQUAL = 'EQUAL_EQUAL'
    GREATER = 'GREATER'
    GREATER_EQUAL = 'GREATER_EQUAL'
    LESS = 'LESS'
    LESS_EQUAL = 'LESS_EQUAL'

    # Literals
    IDENTIFIER = 'IDENTIFIER'
    STRING = 'STRING'
    NUMBER = 'NUMBER'

    # Keywords
    AND = 'AND'
    OR = 'OR'
    IF = 'IF'
    ELSE = 'ELSE'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    FOR = 'FOR'
    WHILE = 'WHILE'
    FUNCTION = 'FUNCTION'
    RETURN = 'RETURN'
    NULL = 'NULL'
    PRINT = 'PRINT'
    PRINT_LINE = 'PRINT_LINE'
    INPUT = 'INPUT'

    EOF = 'EOF'


# Reserved words. The print-line and input keywords have localized
# spellings that map onto the same token type.
KEYWORDS: Dict[str, TokenType] = {
    'and': TokenType.AND,
    'or': TokenType.OR,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'for': TokenType.FOR,
    'while': TokenType.WHILE,
    'function': TokenType.FUNCTION,
    'return': TokenType.RETURN,
    'null': TokenType.NULL,
    'print': TokenType.PRINT,
    'etb3': TokenType.PRINT_LINE,
    'da5l': TokenType.INPUT,
    'd5l': TokenType.INPUT,
    'scan': TokenType.INPUT,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    '[': TokenType.LEFT_BRACKET,
    ']': TokenType.RIGHT_BRACKET,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '/': TokenType.SLASH,
    '*': TokenType.STAR,
}

# Operators that may be followed by '=' to form a two-character operator.
PAIRED_TOKENS: Dict[str, tuple] = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any
    line: int
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens.

    Strings are delimited by a matching single or double quote and are
    taken verbatim (no escape processing); they may span lines. Numbers
    are unsigned integers or decimals; a leading minus is left to the
    parser as unary negation.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def peek(offset: int = 0) -> str:
        j = i + offset
        return source[j] if j < length else '\0'

    def advance() -> str:
        nonlocal i, line, col
        c = source[i]
        i += 1
        if c == '\n':
            line += 1
            col = 1
        else:
            col += 1
        return c

    def add(token_type: TokenType, start: int, start_line: int, start_col: int, literal: Optional[Any] = None):
        tokens.append(Token(token_type, source[start:i], literal, start_line, start_col))

    while i < length:
        start, start_line, start_col = i, line, col
        c = advance()
        if c in (' ', '\r', '\t', '\n'):
            continue
        if c == '#':
            while i < length and peek() != '\n':
                advance()
            continue
        if c in SINGLE_CHAR_TOKENS:
            add(SINGLE_CHAR_TOKENS[c], start, start_line, start_col)
            continue
        if c in PAIRED_TOKENS:
            single, double = PAIRED_TOKENS[c]
            if peek() == '=':
                advance()
                add(double, start, start_line, start_col)
            else:
                add(single, start, start_line, start_col)
            continue
        if c in ('"', "'"):
            while i < length and peek() != c:
                advance()
            if i >= length:
                raise LexerError('Unterminated string.', start_line)
            advance()  # closing quote
            add(TokenType.STRING, start, start_line, start_col, source[start + 1:i - 1])
            continue
        if is_digit(c):
            while is_digit(peek()):
                advance()
            # A fraction needs at least one digit after the dot
            if peek() == '.' and is_digit(peek(1)):
                advance()
                while is_digit(peek()):
                    advance()
            add(TokenType.NUMBER, start, start_line, start_col, float(source[start:i]))
            continue
        if is_alpha(c):
            while is_alpha(peek()) or is_digit(peek()):
                advance()
            text = source[start:i]
            add(KEYWORDS.get(text, TokenType.IDENTIFIER), start, start_line, start_col)
            continue
        raise LexerError(f"Unexpected character {c!r}.", start_line)

    tokens.append(Token(TokenType.EOF, '', None, line, col))
    return tokens
