"""Parser for the Lox language.

The source text is parsed by a Lark LALR parser configured with the Lox
grammar below. The resulting parse tree is transformed into the AST
defined in `lox.ast` by `ASTTransformer`, which also desugars `for`
loops into `while` loops wrapped in blocks.

`Parser(source).parse()` collects static errors in `Parser.errors`;
`parse_program(source)` is the strict entry point and raises the first
one.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from .ast import (
    Program, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt,
    FuncDecl, ReturnStmt, ClassDecl, Literal, Grouping, UnaryOp, BinaryOp,
    Logical, Variable, Assign, Call, Get, SetProperty, This, Super,
)
from .errors import ParseError
from .scanner import to_token, character_error
from .tokens import Token, PUNCTUATION, EOF_KIND


MAX_ARGUMENTS = 255


LOX_GRAMMAR = r"""
    start: declaration*

    // Declarations and statements
    ?declaration: class_decl
                | fun_decl
                | var_decl
                | statement

    class_decl: "class" IDENTIFIER ["<" IDENTIFIER] "{" function* "}"
    fun_decl: "fun" function
    function: IDENTIFIER "(" [parameters] ")" block
    parameters: IDENTIFIER ("," IDENTIFIER)*
    var_decl: "var" IDENTIFIER ["=" expression] ";"

    ?statement: expr_stmt
              | for_stmt
              | if_stmt
              | print_stmt
              | return_stmt
              | while_stmt
              | block

    expr_stmt: expression ";"
    for_stmt: "for" "(" for_init [expression] ";" [expression] ")" statement
    for_init: var_decl
            | expr_stmt
            | ";"
    if_stmt: "if" "(" expression ")" statement ["else" statement]
    print_stmt: "print" expression ";"
    return_stmt: RETURN [expression] ";"
    while_stmt: "while" "(" expression ")" statement
    block: "{" declaration* "}"

    // Expressions with precedence
    ?expression: assignment
    ?assignment: logic_or EQUAL assignment -> assign
               | logic_or
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: equality (AND equality)*
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary -> unary_op
          | call
    ?call: primary
         | call "(" [arguments] RIGHT_PAREN -> call_expr
         | call "." IDENTIFIER -> get_expr
    arguments: expression ("," expression)*
    ?primary: "true" -> true
            | "false" -> false
            | "nil" -> nil
            | NUMBER -> number
            | STRING -> string
            | THIS -> this_expr
            | SUPER "." IDENTIFIER -> super_expr
            | IDENTIFIER -> variable
            | "(" expression ")" -> grouping

    // Tokens
    LEFT_PAREN: "("
    RIGHT_PAREN: ")"
    LEFT_BRACE: "{"
    RIGHT_BRACE: "}"
    COMMA: ","
    DOT: "."
    MINUS: "-"
    PLUS: "+"
    SEMICOLON: ";"
    SLASH: "/"
    STAR: "*"
    BANG: "!"
    BANG_EQUAL: "!="
    EQUAL: "="
    EQUAL_EQUAL: "=="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="

    AND: "and"
    CLASS: "class"
    ELSE: "else"
    FALSE: "false"
    FUN: "fun"
    FOR: "for"
    IF: "if"
    NIL: "nil"
    OR: "or"
    PRINT: "print"
    RETURN: "return"
    SUPER: "super"
    THIS: "this"
    TRUE: "true"
    VAR: "var"
    WHILE: "while"

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %import common.WS
    %ignore WS
"""


# The basic lexer is enough for Lox: no terminal depends on parser state.
# The dangling `else` is a shift/reduce conflict that Lark resolves as a
# shift, binding `else` to the nearest `if`.
LOX_PARSER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=True,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST.

    Errors that do not stop the parse (bad assignment targets, too many
    arguments) are appended to `errors`.
    """

    def __init__(self):
        super().__init__()
        self.errors: List[ParseError] = []

    def error(self, token: Token, message: str):
        self.errors.append(ParseError.at_token(token, message))

    def start(self, items):
        return Program(body=list(items))

    # Declarations
    def class_decl(self, items):
        name, superclass, *methods = items
        superclass_var = Variable(to_token(superclass)) if superclass is not None else None
        return ClassDecl(to_token(name), superclass_var, methods)

    def fun_decl(self, items):
        return items[0]

    def function(self, items):
        name, params, body = items
        params = [to_token(p) for p in params or []]
        if len(params) > MAX_ARGUMENTS:
            self.error(params[MAX_ARGUMENTS], f"Can't have more than {MAX_ARGUMENTS} parameters")
        return FuncDecl(to_token(name), params, body.statements)

    def parameters(self, items):
        return list(items)

    def var_decl(self, items):
        name, initializer = items
        return VarDecl(to_token(name), initializer)

    # Statements
    def expr_stmt(self, items):
        return ExprStmt(items[0])

    def for_stmt(self, items):
        # for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        initializer, condition, increment, body = items
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        if condition is None:
            condition = Literal(True)
        body = WhileStmt(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def for_init(self, items):
        return items[0] if items else None

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return IfStmt(condition, then_branch, else_branch)

    def print_stmt(self, items):
        return PrintStmt(items[0])

    def return_stmt(self, items):
        keyword, value = items
        return ReturnStmt(to_token(keyword), value)

    def while_stmt(self, items):
        condition, body = items
        return WhileStmt(condition, body)

    def block(self, items):
        return Block(statements=list(items))

    # Expressions
    def assign(self, items):
        target, equals, value = items
        if isinstance(target, Variable):
            return Assign(target.name, value)
        if isinstance(target, Get):
            return SetProperty(target.target, target.name, value)
        # Reported but not fatal: the parse goes on with the left operand.
        self.error(to_token(equals), 'Invalid assignment target')
        return target

    def _fold_binary(self, items, node_type):
        # items pattern: expr ( op expr )*, folded left-associatively
        left = items[0]
        for i in range(1, len(items), 2):
            left = node_type(left, to_token(items[i]), items[i + 1])
        return left

    def logic_or(self, items):
        return self._fold_binary(items, Logical)

    def logic_and(self, items):
        return self._fold_binary(items, Logical)

    def equality(self, items):
        return self._fold_binary(items, BinaryOp)

    def comparison(self, items):
        return self._fold_binary(items, BinaryOp)

    def term(self, items):
        return self._fold_binary(items, BinaryOp)

    def factor(self, items):
        return self._fold_binary(items, BinaryOp)

    def unary_op(self, items):
        operator, operand = items
        return UnaryOp(to_token(operator), operand)

    def call_expr(self, items):
        callee, args, paren = items
        args = args or []
        if len(args) > MAX_ARGUMENTS:
            self.error(to_token(paren), f"Can't have more than {MAX_ARGUMENTS} arguments")
        return Call(callee, to_token(paren), args)

    def get_expr(self, items):
        target, name = items
        return Get(target, to_token(name))

    def arguments(self, items):
        return list(items)

    def true(self, items):
        return Literal(True)

    def false(self, items):
        return Literal(False)

    def nil(self, items):
        return Literal(None)

    def number(self, items):
        return Literal(to_token(items[0]).literal)

    def string(self, items):
        return Literal(to_token(items[0]).literal)

    def this_expr(self, items):
        return This(to_token(items[0]))

    def super_expr(self, items):
        keyword, method = items
        return Super(to_token(keyword), to_token(method))

    def variable(self, items):
        return Variable(to_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])


_SPELLING = {kind: text for text, kind in PUNCTUATION.items()}


def _expectation(expected) -> str:
    expected = set(expected)
    if {'IDENTIFIER', 'NUMBER'} <= expected:
        return 'Expect expression'
    if 'SEMICOLON' in expected:
        return "Expect ';'"
    if len(expected) == 1:
        kind = expected.pop()
        return f"Expect '{_SPELLING.get(kind, kind.lower())}'"
    return 'Unexpected token'


def syntax_error(exc: UnexpectedInput, source: str) -> ParseError:
    """Convert a Lark parse failure into a located Lox static error."""
    if isinstance(exc, UnexpectedCharacters):
        return character_error(exc, source)
    if isinstance(exc, UnexpectedToken):
        tok = exc.token
        if tok.type == '$END':
            token = Token(EOF_KIND, '', None, tok.line if isinstance(tok.line, int) else 1)
        else:
            token = to_token(tok)
        return ParseError.at_token(token, _expectation(exc.expected))
    return ParseError(getattr(exc, 'line', 1), '', 'Unexpected input')


class Parser:
    def __init__(self, source: str):
        self.source = source
        self.errors: List[ParseError] = []

    def parse(self) -> Optional[Program]:
        """Parse the source. Returns None when a syntax error stops the parse."""
        try:
            tree = LOX_PARSER.parse(self.source)
        except UnexpectedInput as e:
            self.errors.append(syntax_error(e, self.source))
            return None
        transformer = ASTTransformer()
        program = transformer.transform(tree)
        self.errors.extend(transformer.errors)
        return program


def parse_program(source: str) -> Program:
    """Parse Lox source code into an AST Program.

    Raises the first ParseError found.
    """
    parser = Parser(source)
    program = parser.parse()
    if parser.errors:
        raise parser.errors[0]
    return program
