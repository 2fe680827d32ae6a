"""JSON serialization/deserialization for the Flex AST.

This module converts between AST dataclasses and plain dict/list
structures suitable for JSON encoding. Source lines are kept so that a
program loaded from JSON reports errors and breakpoints against the
original file.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    ArrayLiteral,
    Assign,
    Binary,
    Block,
    Call,
    ExpressionStatement,
    FunctionDeclaration,
    Get,
    Grouping,
    IfStatement,
    InputStatement,
    Literal,
    Logical,
    PrintStatement,
    Program,
    ReturnStatement,
    Set,
    Unary,
    Variable,
    WhileStatement,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}

    obj: Dict[str, Any]
    if isinstance(node, ExpressionStatement):
        obj = {"type": "ExpressionStatement", "expression": ast_to_obj(node.expression)}
    elif isinstance(node, PrintStatement):
        obj = {
            "type": "PrintStatement",
            "expression": ast_to_obj(node.expression),
            "newline": node.newline,
            "keyword": node.keyword,
        }
    elif isinstance(node, InputStatement):
        obj = {"type": "InputStatement", "prompt": ast_to_obj(node.prompt), "keyword": node.keyword}
    elif isinstance(node, Block):
        obj = {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    elif isinstance(node, IfStatement):
        obj = {
            "type": "IfStatement",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    elif isinstance(node, WhileStatement):
        obj = {"type": "WhileStatement", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    elif isinstance(node, FunctionDeclaration):
        obj = {
            "type": "FunctionDeclaration",
            "name": node.name,
            "params": list(node.params),
            "body": [ast_to_obj(s) for s in node.body],
        }
    elif isinstance(node, ReturnStatement):
        obj = {"type": "ReturnStatement", "value": ast_to_obj(node.value)}
    elif isinstance(node, Literal):
        obj = {"type": "Literal", "value": node.value}
    elif isinstance(node, Variable):
        obj = {"type": "Variable", "name": node.name}
    elif isinstance(node, Assign):
        obj = {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    elif isinstance(node, Binary):
        obj = {"type": "Binary", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    elif isinstance(node, Logical):
        obj = {"type": "Logical", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    elif isinstance(node, Unary):
        obj = {"type": "Unary", "op": node.op, "operand": ast_to_obj(node.operand)}
    elif isinstance(node, Call):
        obj = {"type": "Call", "callee": ast_to_obj(node.callee), "args": [ast_to_obj(a) for a in node.args]}
    elif isinstance(node, Grouping):
        obj = {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    elif isinstance(node, ArrayLiteral):
        obj = {"type": "ArrayLiteral", "elements": [ast_to_obj(e) for e in node.elements]}
    elif isinstance(node, Get):
        obj = {"type": "Get", "object": ast_to_obj(node.object), "name": node.name, "index": ast_to_obj(node.index)}
    elif isinstance(node, Set):
        obj = {
            "type": "Set",
            "object": ast_to_obj(node.object),
            "name": node.name,
            "index": ast_to_obj(node.index),
            "value": ast_to_obj(node.value),
        }
    else:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    obj["line"] = node.line
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    line = obj.get("line", 0)
    if t == "Program":
        return Program(tuple(ast_from_obj(s) for s in obj["statements"]))
    if t == "ExpressionStatement":
        return ExpressionStatement(ast_from_obj(obj["expression"]), line)
    if t == "PrintStatement":
        return PrintStatement(
            ast_from_obj(obj["expression"]),
            bool(obj["newline"]),
            obj.get("keyword", "print"),
            line,
        )
    if t == "InputStatement":
        return InputStatement(ast_from_obj(obj.get("prompt")), obj.get("keyword", "da5l"), line)
    if t == "Block":
        return Block(tuple(ast_from_obj(s) for s in obj["statements"]), line)
    if t == "IfStatement":
        return IfStatement(
            ast_from_obj(obj["condition"]),
            ast_from_obj(obj["then_branch"]),
            ast_from_obj(obj.get("else_branch")),
            line,
        )
    if t == "WhileStatement":
        return WhileStatement(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]), line)
    if t == "FunctionDeclaration":
        return FunctionDeclaration(
            obj["name"],
            tuple(obj["params"]),
            tuple(ast_from_obj(s) for s in obj["body"]),
            line,
        )
    if t == "ReturnStatement":
        return ReturnStatement(ast_from_obj(obj.get("value")), line)
    if t == "Literal":
        value = obj["value"]
        # JSON has a single number type; Flex numbers are always floats
        if isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        return Literal(value, line)
    if t == "Variable":
        return Variable(obj["name"], line)
    if t == "Assign":
        return Assign(obj["name"], ast_from_obj(obj["value"]), line)
    if t == "Binary":
        return Binary(ast_from_obj(obj["left"]), obj["op"], ast_from_obj(obj["right"]), line)
    if t == "Logical":
        return Logical(ast_from_obj(obj["left"]), obj["op"], ast_from_obj(obj["right"]), line)
    if t == "Unary":
        return Unary(obj["op"], ast_from_obj(obj["operand"]), line)
    if t == "Call":
        return Call(ast_from_obj(obj["callee"]), tuple(ast_from_obj(a) for a in obj["args"]), line)
    if t == "Grouping":
        return Grouping(ast_from_obj(obj["expression"]), line)
    if t == "ArrayLiteral":
        return ArrayLiteral(tuple(ast_from_obj(e) for e in obj["elements"]), line)
    if t == "Get":
        return Get(ast_from_obj(obj["object"]), obj.get("name"), ast_from_obj(obj.get("index")), line)
    if t == "Set":
        return Set(
            ast_from_obj(obj["object"]),
            ast_from_obj(obj["value"]),
            obj.get("name"),
            ast_from_obj(obj.get("index")),
            line,
        )

    raise ValueError(f"Unknown AST node type: {t}")
