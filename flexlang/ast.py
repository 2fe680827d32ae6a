"""Abstract Syntax Tree (AST) definitions for the Flex language.

The parser builds these nodes once per compile; the interpreter and the
debugger only read them. Nodes are frozen and hold tuples so that a tree
can be shared by several runs. Every node records the source line of the
first token it was built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class Literal(Node):
    value: Any
    line: int = 0


@dataclass(frozen=True)
class Variable(Node):
    name: str
    line: int = 0


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node
    line: int = 0


@dataclass(frozen=True)
class Binary(Node):
    left: Node
    op: str  # '+', '-', '*', '/', '==', '!=', '<', '<=', '>', '>='
    right: Node
    line: int = 0


@dataclass(frozen=True)
class Logical(Node):
    left: Node
    op: str  # 'and' or 'or'
    right: Node
    line: int = 0


@dataclass(frozen=True)
class Unary(Node):
    op: str  # '!' or '-'
    operand: Node
    line: int = 0


@dataclass(frozen=True)
class Call(Node):
    callee: Node
    args: Tuple[Node, ...]
    line: int = 0


@dataclass(frozen=True)
class Grouping(Node):
    expression: Node
    line: int = 0


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple[Node, ...]
    line: int = 0


@dataclass(frozen=True)
class Get(Node):
    """Member access (``a.name``) or index read (``a[i]``).

    Exactly one of ``name`` and ``index`` is set.
    """
    object: Node
    name: Optional[str] = None
    index: Optional[Node] = None
    line: int = 0


@dataclass(frozen=True)
class Set(Node):
    object: Node
    value: Node
    name: Optional[str] = None
    index: Optional[Node] = None
    line: int = 0


# Statements

@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Node
    line: int = 0


@dataclass(frozen=True)
class PrintStatement(Node):
    expression: Node
    newline: bool
    keyword: str = 'print'
    line: int = 0


@dataclass(frozen=True)
class InputStatement(Node):
    prompt: Optional[Node]
    keyword: str = 'da5l'
    line: int = 0


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...]
    line: int = 0


@dataclass(frozen=True)
class IfStatement(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node]
    line: int = 0


@dataclass(frozen=True)
class WhileStatement(Node):
    condition: Node
    body: Node
    line: int = 0


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: str
    params: Tuple[str, ...]
    body: Tuple[Node, ...]
    line: int = 0


@dataclass(frozen=True)
class ReturnStatement(Node):
    value: Optional[Node]
    line: int = 0


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Node, ...]
