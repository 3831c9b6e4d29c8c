"""Parenthesised prefix rendering of the Lox AST, for debugging.

    -123 * (45.67)   =>   (* (- 123) (group 45.67))
"""

from typing import List

from .ast import (
    Node, Program, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt,
    FuncDecl, ReturnStmt, ClassDecl, Literal, Grouping, UnaryOp, BinaryOp,
    Logical, Variable, Assign, Call, Get, SetProperty, This, Super,
)
from .values import stringify


class AstPrinter:
    def print(self, node: Node) -> str:
        if isinstance(node, Program):
            return '\n'.join(self.print(stmt) for stmt in node.body)

        # Expressions
        if isinstance(node, Literal):
            if isinstance(node.value, str):
                return f'"{node.value}"'
            return stringify(node.value)
        if isinstance(node, Grouping):
            return self.parenthesize('group', node.expression)
        if isinstance(node, UnaryOp):
            return self.parenthesize(node.operator.lexeme, node.operand)
        if isinstance(node, (BinaryOp, Logical)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, Variable):
            return node.name.lexeme
        if isinstance(node, Assign):
            return self.parenthesize(f"= {node.name.lexeme}", node.value)
        if isinstance(node, Call):
            return self.parenthesize('call', node.callee, *node.args)
        if isinstance(node, Get):
            return self.parenthesize(f". {node.name.lexeme}", node.target)
        if isinstance(node, SetProperty):
            return self.parenthesize(f"= . {node.name.lexeme}", node.target, node.value)
        if isinstance(node, This):
            return 'this'
        if isinstance(node, Super):
            return f"(super {node.method.lexeme})"

        # Statements
        if isinstance(node, ExprStmt):
            return self.parenthesize(';', node.expr)
        if isinstance(node, PrintStmt):
            return self.parenthesize('print', node.expr)
        if isinstance(node, VarDecl):
            if node.initializer is None:
                return f"(var {node.name.lexeme})"
            return self.parenthesize(f"var {node.name.lexeme} =", node.initializer)
        if isinstance(node, Block):
            return self.parenthesize('block', *node.statements)
        if isinstance(node, IfStmt):
            if node.else_branch is None:
                return self.parenthesize('if', node.condition, node.then_branch)
            return self.parenthesize('if-else', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, WhileStmt):
            return self.parenthesize('while', node.condition, node.body)
        if isinstance(node, FuncDecl):
            params = ' '.join(p.lexeme for p in node.params)
            return self.parenthesize(f"fun {node.name.lexeme} ({params})", *node.body)
        if isinstance(node, ReturnStmt):
            if node.value is None:
                return '(return)'
            return self.parenthesize('return', node.value)
        if isinstance(node, ClassDecl):
            name = f"class {node.name.lexeme}"
            if node.superclass is not None:
                name += f" < {node.superclass.name.lexeme}"
            return self.parenthesize(name, *node.methods)

        raise TypeError(f"Unsupported node for printing: {type(node).__name__}")

    def parenthesize(self, name: str, *nodes: Node) -> str:
        parts: List[str] = [name]
        for node in nodes:
            parts.append(self.print(node))
        return '(' + ' '.join(parts) + ')'
