"""Recursive-descent parser for the Flex language.

Expressions are parsed by precedence climbing, lowest tier first:

    assignment -> or -> and -> equality -> comparison -> term -> factor
               -> unary -> call/index/member -> primary

Binary tiers loop so that they associate to the left; assignment recurses
so that it associates to the right. ``for`` loops are desugared here into
a block holding the initializer and a ``while`` loop, so the interpreter
never sees them.

`parse_program` stops at the first grammar violation. `validate` uses the
synchronization routine to keep going and report every diagnostic.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    ArrayLiteral, Assign, Binary, Block, Call, ExpressionStatement,
    FunctionDeclaration, Get, Grouping, IfStatement, InputStatement, Literal,
    Logical, Node, PrintStatement, Program, ReturnStatement, Set, Unary,
    Variable, WhileStatement,
)
from .errors import FlexError, ParseError
from .lexer import Token, TokenType, tokenize

MAX_ARGUMENTS = 255

T = TokenType

# Token types that begin a statement; synchronization stops before them.
STATEMENT_STARTS = {
    T.FUNCTION, T.IF, T.WHILE, T.FOR, T.RETURN, T.PRINT, T.PRINT_LINE, T.INPUT,
}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type is T.EOF

    def check(self, token_type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        lexeme = None if token.type is T.EOF else token.lexeme
        return ParseError(message, token.line, lexeme)

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is T.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Entry points

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.is_at_end():
            statements.append(self.parse_declaration())
        return Program(tuple(statements))

    def parse_all(self) -> Tuple[Program, List[ParseError]]:
        """Parse as much as possible, collecting every syntax error."""
        statements: List[Node] = []
        errors: List[ParseError] = []
        while not self.is_at_end():
            try:
                statements.append(self.parse_declaration())
            except ParseError as e:
                errors.append(e)
                self.synchronize()
        return Program(tuple(statements)), errors

    # Statements

    def parse_declaration(self) -> Node:
        if self.match(T.FUNCTION):
            return self.parse_function_declaration()
        return self.parse_statement()

    def parse_function_declaration(self) -> FunctionDeclaration:
        line = self.previous().line
        name = self.consume(T.IDENTIFIER, 'Expect function name.')
        self.consume(T.LEFT_PAREN, "Expect '(' after function name.")
        params: List[str] = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    raise self.error(self.peek(), f'Cannot have more than {MAX_ARGUMENTS} parameters.')
                params.append(self.consume(T.IDENTIFIER, 'Expect parameter name.').lexeme)
                if not self.match(T.COMMA):
                    break
        self.consume(T.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(T.LEFT_BRACE, "Expect '{' before function body.")
        body = self.parse_block_statements()
        return FunctionDeclaration(name.lexeme, tuple(params), tuple(body), line)

    def parse_statement(self) -> Node:
        if self.match(T.IF):
            return self.parse_if_statement()
        if self.match(T.WHILE):
            return self.parse_while_statement()
        if self.match(T.FOR):
            return self.parse_for_statement()
        if self.match(T.RETURN):
            return self.parse_return_statement()
        if self.check(T.PRINT) or self.check(T.PRINT_LINE):
            return self.parse_print_statement()
        if self.check(T.INPUT):
            return self.parse_input_statement()
        if self.match(T.LEFT_BRACE):
            line = self.previous().line
            return Block(tuple(self.parse_block_statements()), line)
        return self.parse_expression_statement()

    def parse_block_statements(self) -> List[Node]:
        statements: List[Node] = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.parse_declaration())
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_if_statement(self) -> IfStatement:
        line = self.previous().line
        self.consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(T.ELSE):
            else_branch = self.parse_statement()
        return IfStatement(condition, then_branch, else_branch, line)

    def parse_while_statement(self) -> WhileStatement:
        line = self.previous().line
        self.consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after while condition.")
        body = self.parse_statement()
        return WhileStatement(condition, body, line)

    def parse_for_statement(self) -> Node:
        # for (init; cond; step) body  =>  { init; while (cond) { body; step; } }
        line = self.previous().line
        self.consume(T.LEFT_PAREN, "Expect '(' after 'for'.")
        initializer: Optional[Node] = None
        if not self.match(T.SEMICOLON):
            initializer = self.parse_expression_statement()
        condition: Optional[Node] = None
        if not self.check(T.SEMICOLON):
            condition = self.parse_expression()
        self.consume(T.SEMICOLON, "Expect ';' after loop condition.")
        increment: Optional[Node] = None
        if not self.check(T.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")
        body = self.parse_statement()

        if increment is not None:
            body = Block((body, ExpressionStatement(increment, increment.line)), body.line)
        if condition is None:
            condition = Literal(True, line)
        loop: Node = WhileStatement(condition, body, line)
        if initializer is not None:
            loop = Block((initializer, loop), line)
        return loop

    def parse_return_statement(self) -> ReturnStatement:
        line = self.previous().line
        value = None
        if not self.check(T.SEMICOLON):
            value = self.parse_expression()
        self.consume(T.SEMICOLON, "Expect ';' after return value.")
        return ReturnStatement(value, line)

    def parse_print_statement(self) -> PrintStatement:
        keyword = self.advance()
        self.consume(T.LEFT_PAREN, f"Expect '(' after '{keyword.lexeme}'.")
        expression = self.parse_expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after print value.")
        self.consume(T.SEMICOLON, "Expect ';' after print statement.")
        return PrintStatement(expression, keyword.type is T.PRINT_LINE, keyword.lexeme, keyword.line)

    def parse_input_statement(self) -> InputStatement:
        keyword = self.advance()
        self.consume(T.LEFT_PAREN, f"Expect '(' after '{keyword.lexeme}'.")
        prompt = None
        if not self.check(T.RIGHT_PAREN):
            prompt = self.parse_expression()
        self.consume(T.RIGHT_PAREN, f"Expect ')' after {keyword.lexeme} arguments.")
        self.consume(T.SEMICOLON, f"Expect ';' after {keyword.lexeme} statement.")
        return InputStatement(prompt, keyword.lexeme, keyword.line)

    def parse_expression_statement(self) -> ExpressionStatement:
        line = self.peek().line
        expression = self.parse_expression()
        self.consume(T.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expression, line)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assignment()

    def parse_assignment(self) -> Node:
        expr = self.parse_or()
        if self.match(T.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value, expr.line)
            if isinstance(expr, Get):
                return Set(expr.object, value, expr.name, expr.index, expr.line)
            raise self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_or(self) -> Node:
        expr = self.parse_and()
        while self.match(T.OR):
            right = self.parse_and()
            expr = Logical(expr, 'or', right, expr.line)
        return expr

    def parse_and(self) -> Node:
        expr = self.parse_equality()
        while self.match(T.AND):
            right = self.parse_equality()
            expr = Logical(expr, 'and', right, expr.line)
        return expr

    def parse_equality(self) -> Node:
        expr = self.parse_comparison()
        while self.match(T.BANG_EQUAL, T.EQUAL_EQUAL):
            op = self.previous().lexeme
            right = self.parse_comparison()
            expr = Binary(expr, op, right, expr.line)
        return expr

    def parse_comparison(self) -> Node:
        expr = self.parse_term()
        while self.match(T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL):
            op = self.previous().lexeme
            right = self.parse_term()
            expr = Binary(expr, op, right, expr.line)
        return expr

    def parse_term(self) -> Node:
        expr = self.parse_factor()
        while self.match(T.MINUS, T.PLUS):
            op = self.previous().lexeme
            right = self.parse_factor()
            expr = Binary(expr, op, right, expr.line)
        return expr

    def parse_factor(self) -> Node:
        expr = self.parse_unary()
        while self.match(T.SLASH, T.STAR):
            op = self.previous().lexeme
            right = self.parse_unary()
            expr = Binary(expr, op, right, expr.line)
        return expr

    def parse_unary(self) -> Node:
        if self.match(T.BANG, T.MINUS):
            op_token = self.previous()
            operand = self.parse_unary()
            return Unary(op_token.lexeme, operand, op_token.line)
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        expr = self.parse_primary()
        while True:
            if self.match(T.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(T.LEFT_BRACKET):
                index = self.parse_expression()
                self.consume(T.RIGHT_BRACKET, "Expect ']' after index.")
                expr = Get(expr, index=index, line=expr.line)
            elif self.match(T.DOT):
                name = self.consume(T.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name=name.lexeme, line=expr.line)
            else:
                break
        return expr

    def finish_call(self, callee: Node) -> Call:
        args: List[Node] = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGUMENTS:
                    raise self.error(self.peek(), f'Cannot have more than {MAX_ARGUMENTS} arguments.')
                args.append(self.parse_expression())
                if not self.match(T.COMMA):
                    break
        self.consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, tuple(args), callee.line)

    def parse_primary(self) -> Node:
        token = self.peek()
        if self.match(T.FALSE):
            return Literal(False, token.line)
        if self.match(T.TRUE):
            return Literal(True, token.line)
        if self.match(T.NULL):
            return Literal(None, token.line)
        if self.match(T.NUMBER, T.STRING):
            return Literal(token.literal, token.line)
        if self.match(T.IDENTIFIER):
            return Variable(token.lexeme, token.line)
        # In expression position the print and input keywords name the
        # natives registered under the same spelling.
        if self.check(T.PRINT) or self.check(T.PRINT_LINE) or self.check(T.INPUT):
            self.advance()
            return Variable(token.lexeme, token.line)
        if self.match(T.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr, token.line)
        if self.match(T.LEFT_BRACKET):
            elements: List[Node] = []
            if not self.check(T.RIGHT_BRACKET):
                while True:
                    elements.append(self.parse_expression())
                    if not self.match(T.COMMA):
                        break
            self.consume(T.RIGHT_BRACKET, "Expect ']' after array elements.")
            return ArrayLiteral(tuple(elements), token.line)
        raise self.error(token, 'Expect expression.')


def parse_tokens(tokens: List[Token]) -> Program:
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse source code into a Program.

    Lexical and syntax errors are raised; nothing is returned for a
    program that does not compile.
    """
    return parse_tokens(tokenize(source))


def validate(source: str) -> List[FlexError]:
    """Return every diagnostic for ``source`` without executing it.

    A lexical error ends validation immediately since no token stream is
    available; syntax errors are collected using statement
    synchronization.
    """
    try:
        tokens = tokenize(source)
    except FlexError as e:
        return [e]
    _, errors = Parser(tokens).parse_all()
    return list(errors)
