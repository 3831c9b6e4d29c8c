"""Tree-walking interpreter for the Lox language.

The interpreter executes statements against a single "current environment"
register, seeded from the global environment. Variable references found by
the resolver are read and written at their recorded distance; all other
references go straight to the globals.

The module also provides the drivers that chain scanning, parsing,
resolution and execution for a piece of source text.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional

from .ast import (
    Program, Expr, Stmt, ExprStmt, PrintStmt, VarDecl, Block, IfStmt,
    WhileStmt, FuncDecl, ReturnStmt, ClassDecl, Literal, Grouping, UnaryOp,
    BinaryOp, Logical, Variable, Assign, Call, Get, SetProperty, This, Super,
)
from .builtin_function import define_builtins
from .environment import Environment
from .errors import (
    LoxRuntimeError, ReturnSignal, ErrorReporter,
    EXIT_OK, EXIT_STATIC_ERROR, EXIT_RUNTIME_ERROR,
)
from .parser import Parser
from .resolver import Resolver
from .runtime import LoxCallable, LoxFunction, LoxClass, LoxInstance
from .tokens import Token
from .values import is_number, is_truthy, is_equal, divide, stringify, type_name


# Each Lox call costs about six Python frames.
RECURSION_LIMIT = 20000


class Interpreter:
    """Core interpreter that executes Lox AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.globals = Environment()
        define_builtins(self.globals)
        self.environment = self.globals
        self.locals: Dict[Expr, int] = {}
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def resolve(self, locals_table: Dict[Expr, int]):
        """Adopt the distances computed by a resolver pass."""
        self.locals.update(locals_table)

    def run(self, program: Program):
        """Execute a resolved program. LoxRuntimeError aborts the whole run."""
        if self.debug_level >= 1:
            self.debug(f"run {len(program.body)} statements")
        try:
            for stmt in program.body:
                result = self.execute(stmt)
                if isinstance(result, ReturnSignal):
                    # The resolver rejects top-level returns.
                    raise RuntimeError('return signal escaped to top level')
        except LoxRuntimeError as e:
            if self.debug_level >= 1:
                self.debug(f"runtime error at line {e.token.line}: {e.message}")
            raise

    # Statements
    def execute_block(self, statements: List[Stmt], environment: Environment) -> Optional[ReturnSignal]:
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                result = self.execute(stmt)
                # propagate return signals
                if isinstance(result, ReturnSignal):
                    return result
            return None
        finally:
            self.environment = previous

    def execute(self, node: Stmt) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expr)
            print(stringify(value))
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(self.environment))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch)
            if node.else_branch is not None:
                return self.execute(node.else_branch)
            return None
        if isinstance(node, WhileStmt):
            while is_truthy(self.evaluate(node.condition)):
                result = self.execute(node.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(node, FuncDecl):
            function = LoxFunction(node, self.environment)
            self.environment.define(node.name.lexeme, function)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, ClassDecl):
            self.execute_class(node)
            return None
        # catch any other nodes
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_class(self, node: ClassDecl):
        superclass = None
        if node.superclass is not None:
            superclass = self.evaluate(node.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(node.superclass.name, 'Superclass must be a class')

        self.environment.define(node.name.lexeme, None)

        if superclass is not None:
            # Methods close over a scope binding `super`, mirroring the resolver.
            self.environment = Environment(self.environment)
            self.environment.define('super', superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in node.methods:
            is_initializer = method.name.lexeme == 'init'
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)
        klass = LoxClass(node.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(node.name, klass)
        if self.debug_level >= 2:
            parent = f" < {superclass.name}" if superclass is not None else ''
            self.debug(f"define class {klass.name}{parent} with {len(methods)} methods")

    # Expressions
    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            distance = self.locals.get(node)
            if distance is not None:
                self.environment.assign_at(distance, node.name, value)
            else:
                self.globals.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left)
            # Short-circuit, yielding the deciding operand itself
            if node.operator.kind == 'OR':
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            if node.operator.kind == 'MINUS':
                self.check_number_operand(node.operator, operand)
                return -operand
            if node.operator.kind == 'BANG':
                return not is_truthy(operand)
            raise NotImplementedError(f"unsupported unary operator {node.operator.lexeme}")
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee)
            args = [self.evaluate(arg) for arg in node.args]
            return self.call_function(callee, args, node.paren)
        if isinstance(node, Get):
            target = self.evaluate(node.target)
            if isinstance(target, LoxInstance):
                return target.get(node.name)
            raise LoxRuntimeError(node.name, 'Only instances have properties')
        if isinstance(node, SetProperty):
            target = self.evaluate(node.target)
            if not isinstance(target, LoxInstance):
                raise LoxRuntimeError(node.name, 'Only instances have fields')
            value = self.evaluate(node.value)
            target.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node)
        if isinstance(node, Super):
            distance = self.locals[node]
            superclass = self.environment.get_at(distance, 'super')
            # `this` is always bound one scope inside `super`.
            instance = self.environment.get_at(distance - 1, 'this')
            method = superclass.find_method(node.method.lexeme)
            if method is None:
                raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'")
            return method.bind(instance)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def look_up_variable(self, name: Token, node: Expr) -> Any:
        distance = self.locals.get(node)
        if self.debug_level >= 3:
            where = f"at distance {distance}" if distance is not None else 'in globals'
            self.debug(f"lookup {name.lexeme} {where}")
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def call_function(self, callee: Any, args: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions and classes')
        # Checked before the body runs
        if len(args) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(args)}")
        if self.debug_level >= 3:
            self.debug(f"call {callee} with {len(args)} arguments")
        try:
            return callee.call(self, args)
        except RecursionError:
            raise LoxRuntimeError(paren, 'Stack overflow') from None

    def check_number_operand(self, operator: Token, operand: Any):
        if is_number(operand):
            return
        raise LoxRuntimeError(operator, 'Operand must be a number')

    def check_number_operands(self, operator: Token, left: Any, right: Any):
        if is_number(left) and is_number(right):
            return
        raise LoxRuntimeError(operator, 'Operands must be numbers')

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        kind = operator.kind
        if kind == 'PLUS':
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            # A string on either side turns the other operand into text.
            if isinstance(a, str) or isinstance(b, str):
                return stringify(a) + stringify(b)
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings')
        if kind == 'EQUAL_EQUAL':
            return is_equal(a, b)
        if kind == 'BANG_EQUAL':
            return not is_equal(a, b)
        # Everything else is numeric only
        self.check_number_operands(operator, a, b)
        if kind == 'MINUS':
            return a - b
        if kind == 'STAR':
            return a * b
        if kind == 'SLASH':
            return divide(a, b)
        if kind == 'GREATER':
            return a > b
        if kind == 'GREATER_EQUAL':
            return a >= b
        if kind == 'LESS':
            return a < b
        if kind == 'LESS_EQUAL':
            return a <= b
        raise NotImplementedError(f"unknown operator {operator.lexeme}")


###############################################################################
# Drivers
###############################################################################


def execute_program(program: Program, interpreter: Interpreter, reporter: ErrorReporter) -> int:
    """Resolve and run a parsed program, returning a process exit code."""
    resolver = Resolver()
    locals_table = resolver.resolve(program.body)
    if resolver.errors:
        for error in resolver.errors:
            reporter.static_error(error)
        return EXIT_STATIC_ERROR
    if interpreter.debug_level >= 1:
        interpreter.debug(f"resolved {len(locals_table)} local references")
    interpreter.resolve(locals_table)
    try:
        interpreter.run(program)
    except LoxRuntimeError as e:
        reporter.runtime_error(e)
        return EXIT_RUNTIME_ERROR
    return EXIT_OK


def run_program(source: str, interpreter: Optional[Interpreter] = None,
                reporter: Optional[ErrorReporter] = None, debug_level: int = 0) -> int:
    """Convenience function to parse, resolve and run Lox source text.

    Returns the exit code: 0 on success, 65 after static errors and 70
    after a runtime error. Errors are written by `reporter`.
    """
    if interpreter is None:
        interpreter = Interpreter(debug_level=debug_level)
    if reporter is None:
        reporter = ErrorReporter()
    parser = Parser(source)
    program = parser.parse()
    if parser.errors:
        for error in parser.errors:
            reporter.static_error(error)
        return EXIT_STATIC_ERROR
    return execute_program(program, interpreter, reporter)


def run_file(file_path: str, debug_level: int = 0) -> int:
    """Run a Lox script file in a fresh interpreter."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return run_program(source, interpreter)
    finally:
        interpreter.close()
