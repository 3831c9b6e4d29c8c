"""JSON serialization/deserialization for Lox AST.

This module converts between Lox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types and `Token`. A deserialized tree is made of
fresh node objects, so it must be resolved again before it is run.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    ExprStmt,
    PrintStmt,
    VarDecl,
    Block,
    IfStmt,
    WhileStmt,
    FuncDecl,
    ReturnStmt,
    ClassDecl,
    Literal,
    Grouping,
    UnaryOp,
    BinaryOp,
    Logical,
    Variable,
    Assign,
    Call,
    Get,
    SetProperty,
    This,
    Super,
)
from .tokens import Token


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {"kind": t.kind, "lexeme": t.lexeme, "literal": t.literal, "line": t.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(o["kind"], o["lexeme"], o.get("literal"), o["line"])


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    if isinstance(node, Token):
        return token_to_obj(node)

    # Statements
    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": ast_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": ast_to_obj(node.name),
            "params": [ast_to_obj(p) for p in node.params],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "keyword": ast_to_obj(node.keyword), "value": ast_to_obj(node.value)}
    if isinstance(node, ClassDecl):
        return {
            "type": "ClassDecl",
            "name": ast_to_obj(node.name),
            "superclass": ast_to_obj(node.superclass),
            "methods": [ast_to_obj(m) for m in node.methods],
        }

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": ast_to_obj(node.value)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "operator": ast_to_obj(node.operator), "operand": ast_to_obj(node.operand)}
    if isinstance(node, (BinaryOp, Logical)):
        return {
            "type": type(node).__name__,
            "left": ast_to_obj(node.left),
            "operator": ast_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": ast_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": ast_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "paren": ast_to_obj(node.paren),
            "args": [ast_to_obj(a) for a in node.args],
        }
    if isinstance(node, Get):
        return {"type": "Get", "target": ast_to_obj(node.target), "name": ast_to_obj(node.name)}
    if isinstance(node, SetProperty):
        return {
            "type": "SetProperty",
            "target": ast_to_obj(node.target),
            "name": ast_to_obj(node.name),
            "value": ast_to_obj(node.value),
        }
    if isinstance(node, This):
        return {"type": "This", "keyword": ast_to_obj(node.keyword)}
    if isinstance(node, Super):
        return {"type": "Super", "keyword": ast_to_obj(node.keyword), "method": ast_to_obj(node.method)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    if "type" not in obj and "lexeme" in obj:
        return token_from_obj(obj)
    t = obj.get("type")
    if t == "Program":
        return Program(body=[ast_from_obj(n) for n in obj["body"]])
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj["expr"]))
    if t == "VarDecl":
        return VarDecl(name=ast_from_obj(obj["name"]), initializer=ast_from_obj(obj.get("initializer")))
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "FuncDecl":
        return FuncDecl(
            name=ast_from_obj(obj["name"]),
            params=[ast_from_obj(p) for p in obj["params"]],
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "ReturnStmt":
        return ReturnStmt(keyword=ast_from_obj(obj["keyword"]), value=ast_from_obj(obj.get("value")))
    if t == "ClassDecl":
        return ClassDecl(
            name=ast_from_obj(obj["name"]),
            superclass=ast_from_obj(obj.get("superclass")),
            methods=[ast_from_obj(m) for m in obj["methods"]],
        )
    if t == "Literal":
        return Literal(value=ast_from_obj(obj["value"]))
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "UnaryOp":
        return UnaryOp(operator=ast_from_obj(obj["operator"]), operand=ast_from_obj(obj["operand"]))
    if t == "BinaryOp":
        return BinaryOp(
            left=ast_from_obj(obj["left"]),
            operator=ast_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Logical":
        return Logical(
            left=ast_from_obj(obj["left"]),
            operator=ast_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Variable":
        return Variable(name=ast_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=ast_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "Call":
        return Call(
            callee=ast_from_obj(obj["callee"]),
            paren=ast_from_obj(obj["paren"]),
            args=[ast_from_obj(a) for a in obj["args"]],
        )
    if t == "Get":
        return Get(target=ast_from_obj(obj["target"]), name=ast_from_obj(obj["name"]))
    if t == "SetProperty":
        return SetProperty(
            target=ast_from_obj(obj["target"]),
            name=ast_from_obj(obj["name"]),
            value=ast_from_obj(obj["value"]),
        )
    if t == "This":
        return This(keyword=ast_from_obj(obj["keyword"]))
    if t == "Super":
        return Super(keyword=ast_from_obj(obj["keyword"]), method=ast_from_obj(obj["method"]))

    raise ValueError(f"Unknown AST node type: {t}")
