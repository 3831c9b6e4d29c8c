"""Static scope resolution for Lox programs.

The resolver walks the AST once before execution. For every variable
reference (including `this` and `super`) declared in a local scope it
records how many scopes lie between the reference and the declaration;
references it cannot find are globals and get no entry. It also reports
the uses of `return`, `this` and `super` that are illegal where they
appear. Errors are collected, never raised: a program with any resolve
error must not run.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ast import (
    Expr, Stmt, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt,
    FuncDecl, ReturnStmt, ClassDecl, Literal, Grouping, UnaryOp, BinaryOp,
    Logical, Variable, Assign, Call, Get, SetProperty, This, Super,
)
from .errors import ResolveError
from .tokens import Token


# Kinds of function body being resolved
FUNCTION = 'function'
METHOD = 'method'
INITIALIZER = 'initializer'

# Kinds of class body being resolved
CLASS = 'class'
SUBCLASS = 'subclass'


class Resolver:
    def __init__(self):
        # Innermost scope last. Values: False while declared, True once defined.
        self.scopes: List[Dict[str, bool]] = []
        self.locals: Dict[Expr, int] = {}
        self.errors: List[ResolveError] = []
        self.current_function: Optional[str] = None
        self.current_class: Optional[str] = None

    def resolve(self, statements: List[Stmt]) -> Dict[Expr, int]:
        """Resolve a list of statements and return the distance table."""
        for stmt in statements:
            self.resolve_stmt(stmt)
        return self.locals

    def error(self, token: Token, message: str):
        self.errors.append(ResolveError.at_token(token, message))

    # Scope handling
    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, 'Already a variable with this name in this scope')
        scope[name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token):
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr] = distance
                return
        # Not found: left unresolved, looked up in the globals at run time.

    def resolve_function(self, function: FuncDecl, kind: str):
        enclosing_function = self.current_function
        self.current_function = kind
        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        # The body shares the parameter scope, as it does at run time.
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()
        self.current_function = enclosing_function

    # Statements
    def resolve_stmt(self, node: Stmt):
        if isinstance(node, Block):
            self.begin_scope()
            for stmt in node.statements:
                self.resolve_stmt(stmt)
            self.end_scope()
            return
        if isinstance(node, VarDecl):
            self.declare(node.name)
            if node.initializer is not None:
                self.resolve_expr(node.initializer)
            self.define(node.name)
            return
        if isinstance(node, FuncDecl):
            # Defined before the body so the function can recurse.
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node, FUNCTION)
            return
        if isinstance(node, ClassDecl):
            self.resolve_class(node)
            return
        if isinstance(node, (ExprStmt, PrintStmt)):
            self.resolve_expr(node.expr)
            return
        if isinstance(node, IfStmt):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.then_branch)
            if node.else_branch is not None:
                self.resolve_stmt(node.else_branch)
            return
        if isinstance(node, WhileStmt):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.body)
            return
        if isinstance(node, ReturnStmt):
            if self.current_function is None:
                self.error(node.keyword, "Can't return from top-level code")
            if node.value is not None:
                if self.current_function == INITIALIZER:
                    self.error(node.keyword, "Can't return a value from an initializer")
                self.resolve_expr(node.value)
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")

    def resolve_class(self, node: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = CLASS
        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.error(node.superclass.name, "A class can't inherit from itself")
            self.current_class = SUBCLASS
            self.resolve_expr(node.superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True
        for method in node.methods:
            kind = INITIALIZER if method.name.lexeme == 'init' else METHOD
            self.resolve_function(method, kind)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()
        self.current_class = enclosing_class

    # Expressions
    def resolve_expr(self, node: Expr):
        if isinstance(node, Variable):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.error(node.name, "Can't read local variable in its own initializer")
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Assign):
            self.resolve_expr(node.value)
            self.resolve_local(node, node.name)
            return
        if isinstance(node, (BinaryOp, Logical)):
            self.resolve_expr(node.left)
            self.resolve_expr(node.right)
            return
        if isinstance(node, UnaryOp):
            self.resolve_expr(node.operand)
            return
        if isinstance(node, Grouping):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, Literal):
            return
        if isinstance(node, Call):
            self.resolve_expr(node.callee)
            for arg in node.args:
                self.resolve_expr(arg)
            return
        if isinstance(node, Get):
            # Properties are looked up dynamically; only the object is resolved.
            self.resolve_expr(node.target)
            return
        if isinstance(node, SetProperty):
            self.resolve_expr(node.value)
            self.resolve_expr(node.target)
            return
        if isinstance(node, This):
            if self.current_class is None:
                self.error(node.keyword, "Can't use 'this' outside of a class")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Super):
            if self.current_class is None:
                self.error(node.keyword, "Can't use 'super' outside of a class")
            elif self.current_class != SUBCLASS:
                self.error(node.keyword, "Can't use 'super' in a class with no superclass")
            self.resolve_local(node, node.keyword)
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")
