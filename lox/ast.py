"""Abstract Syntax Tree (AST) definitions for the Lox language.

Nodes are frozen and compare by identity (``eq=False``), so each node is
hashable and two structurally equal variable references stay distinct
keys in the resolver's distance table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass(frozen=True, eq=False)
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################

@dataclass(frozen=True, eq=False)
class Expr(Node):
    pass


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class UnaryOp(Expr):
    operator: Token
    operand: Expr


@dataclass(frozen=True, eq=False)
class BinaryOp(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token  # 'and' / 'or'
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, for error lines
    args: List[Expr]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    target: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class SetProperty(Expr):
    target: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


###############################################################################
# Statements
###############################################################################

@dataclass(frozen=True, eq=False)
class Stmt(Node):
    pass


@dataclass(frozen=True, eq=False)
class Program(Node):
    body: List[Stmt]


@dataclass(frozen=True, eq=False)
class ExprStmt(Stmt):
    expr: Expr


@dataclass(frozen=True, eq=False)
class PrintStmt(Stmt):
    expr: Expr


@dataclass(frozen=True, eq=False)
class VarDecl(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True, eq=False)
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True, eq=False)
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class FuncDecl(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]  # executed directly in the call environment


@dataclass(frozen=True, eq=False)
class ReturnStmt(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(frozen=True, eq=False)
class ClassDecl(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[FuncDecl]
