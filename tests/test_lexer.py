import pytest

from flexlang.errors import LexerError
from flexlang.lexer import TokenType, tokenize


def types(source):
    return [t.type for t in tokenize(source)]


def test_two_character_operators_use_lookahead():
    assert types('a == b != c <= d >= e = !f') == [
        TokenType.IDENTIFIER, TokenType.EQUAL_EQUAL, TokenType.IDENTIFIER,
        TokenType.BANG_EQUAL, TokenType.IDENTIFIER, TokenType.LESS_EQUAL,
        TokenType.IDENTIFIER, TokenType.GREATER_EQUAL, TokenType.IDENTIFIER,
        TokenType.EQUAL, TokenType.BANG, TokenType.IDENTIFIER, TokenType.EOF,
    ]


def test_localized_keywords_share_token_types():
    assert types('print etb3 da5l d5l scan') == [
        TokenType.PRINT, TokenType.PRINT_LINE, TokenType.INPUT,
        TokenType.INPUT, TokenType.INPUT, TokenType.EOF,
    ]


def test_numbers_are_unsigned_floats():
    tokens = tokenize('-12.5 7 3.')
    assert tokens[0].type is TokenType.MINUS
    assert tokens[1].literal == 12.5
    assert tokens[2].literal == 7.0
    # A trailing dot is not part of the number
    assert tokens[3].literal == 3.0
    assert tokens[4].type is TokenType.DOT


def test_strings_are_raw_and_may_span_lines():
    tokens = tokenize("'it\\n' \"two\nlines\" x")
    assert tokens[0].literal == 'it\\n'
    assert tokens[1].literal == 'two\nlines'
    assert tokens[2].line == 2


def test_comments_and_whitespace_are_discarded():
    tokens = tokenize('# a comment\n  x # trailing\n y')
    assert [t.lexeme for t in tokens[:-1]] == ['x', 'y']
    assert tokens[0].line == 2
    assert tokens[1].line == 3


def test_identifiers_allow_digits_and_underscores():
    tokens = tokenize('_tmp1 andy')
    assert tokens[0].type is TokenType.IDENTIFIER
    assert tokens[1].type is TokenType.IDENTIFIER


def test_unterminated_string_is_a_lexical_error():
    with pytest.raises(LexerError) as info:
        tokenize('x = "open')
    assert info.value.message == 'Unterminated string.'
    assert info.value.line == 1


def test_unexpected_character_reports_line():
    with pytest.raises(LexerError) as info:
        tokenize('x = 1;\ny = 2 @ 3;')
    assert info.value.line == 2
    assert str(info.value).startswith('[line 2] LexicalError:')
