import pytest

from flexlang.ast import (
    Assign, Binary, Block, Call, ExpressionStatement, FunctionDeclaration, Get,
    InputStatement, Literal, Logical, PrintStatement, Set, Unary, Variable,
    WhileStatement,
)
from flexlang.errors import LexerError, ParseError
from flexlang.parser import parse_program, validate


def expr(source):
    program = parse_program(source)
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_factor_binds_tighter_than_term():
    node = expr('1 + 2 * 3;')
    assert isinstance(node, Binary) and node.op == '+'
    assert isinstance(node.right, Binary) and node.right.op == '*'


def test_binary_operators_are_left_associative():
    node = expr('8 - 4 - 2;')
    assert node.op == '-'
    assert isinstance(node.left, Binary)
    assert node.right == Literal(2.0, 1)


def test_assignment_is_right_associative():
    node = expr('a = b = 3;')
    assert isinstance(node, Assign) and node.name == 'a'
    assert isinstance(node.value, Assign) and node.value.name == 'b'


def test_and_binds_tighter_than_or():
    node = expr('a or b and c;')
    assert isinstance(node, Logical) and node.op == 'or'
    assert isinstance(node.right, Logical) and node.right.op == 'and'


def test_unary_nests():
    node = expr('!-x;')
    assert isinstance(node, Unary) and node.op == '!'
    assert isinstance(node.operand, Unary) and node.operand.op == '-'


def test_postfix_chain_and_index_assignment():
    node = expr('m[1][0] = f(2).length;')
    assert isinstance(node, Set)
    assert isinstance(node.object, Get) and node.object.index is not None
    assert isinstance(node.value, Get) and node.value.name == 'length'
    assert isinstance(node.value.object, Call)


def test_print_statements_record_newline_and_keyword():
    program = parse_program('print(1);\netb3(2);')
    first, second = program.statements
    assert isinstance(first, PrintStatement) and not first.newline
    assert isinstance(second, PrintStatement) and second.newline
    assert second.keyword == 'etb3'
    assert second.line == 2


def test_input_statement_prompt_is_optional():
    program = parse_program('da5l();\nscan("Name? ");')
    assert program.statements[0] == InputStatement(None, 'da5l', 1)
    assert program.statements[1].prompt == Literal('Name? ', 2)


def test_input_keyword_in_expression_position_is_a_call():
    node = expr('name = da5l("Name? ");')
    assert isinstance(node, Assign)
    assert isinstance(node.value, Call)
    assert node.value.callee == Variable('da5l', 1)


def test_for_desugars_into_while():
    program = parse_program('for (i = 0; i < 3; i = i + 1) print(i);')
    outer = program.statements[0]
    assert isinstance(outer, Block)
    init, loop = outer.statements
    assert isinstance(init.expression, Assign)
    assert isinstance(loop, WhileStatement)
    body = loop.body
    assert isinstance(body, Block)
    assert isinstance(body.statements[0], PrintStatement)
    assert isinstance(body.statements[1].expression, Assign)


def test_for_without_clauses_loops_on_true():
    program = parse_program('for (;;) {}')
    loop = program.statements[0]
    assert isinstance(loop, WhileStatement)
    assert loop.condition.value is True


def test_function_declaration():
    program = parse_program('function add(a, b) {\n  return a + b;\n}')
    decl = program.statements[0]
    assert isinstance(decl, FunctionDeclaration)
    assert decl.params == ('a', 'b')
    assert decl.body[0].line == 2


def test_invalid_assignment_target():
    with pytest.raises(ParseError) as info:
        parse_program('1 + 2 = 3;')
    assert info.value.message == 'Invalid assignment target.'
    assert info.value.lexeme == '='


def test_missing_semicolon_reports_at_end():
    with pytest.raises(ParseError) as info:
        parse_program('x = 1')
    assert str(info.value) == "[line 1] SyntaxError at end: Expect ';' after expression."


def test_missing_paren_after_arguments():
    with pytest.raises(ParseError) as info:
        parse_program('f(1, 2;')
    assert info.value.message == "Expect ')' after arguments."
    assert info.value.lexeme == ';'


def test_too_many_arguments():
    args = ', '.join(['1'] * 256)
    with pytest.raises(ParseError) as info:
        parse_program(f'f({args});')
    assert 'more than 255 arguments' in info.value.message


def test_too_many_parameters():
    params = ', '.join(f'p{i}' for i in range(256))
    with pytest.raises(ParseError) as info:
        parse_program(f'function f({params}) {{}}')
    assert 'more than 255 parameters' in info.value.message


def test_validate_collects_every_syntax_error():
    errors = validate('x = ;\ny = 2;\nz = (1;\n')
    assert [e.line for e in errors] == [1, 3]
    assert all(isinstance(e, ParseError) for e in errors)


def test_validate_reports_lexical_error_alone():
    errors = validate('x = 1;\ny = $;')
    assert len(errors) == 1
    assert isinstance(errors[0], LexerError)


def test_validate_clean_program():
    assert validate('etb3(1);') == []
