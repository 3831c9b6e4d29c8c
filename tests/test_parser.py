import pytest

from lox.ast import Block, ClassDecl, ExprStmt, IfStmt, Literal, PrintStmt, VarDecl, Variable, WhileStmt
from lox.errors import ParseError
from lox.parser import Parser, parse_program
from lox.printer import AstPrinter


def print_expr(source: str) -> str:
    program = parse_program(source + ';')
    return AstPrinter().print(program.body[0].expr)


def test_precedence_and_grouping():
    assert print_expr('-123 * (45.67)') == '(* (- 123) (group 45.67))'
    assert print_expr('1 + 2 * 3') == '(+ 1 (* 2 3))'
    assert print_expr('1 - 2 - 3') == '(- (- 1 2) 3)'
    assert print_expr('1 < 2 == true') == '(== (< 1 2) true)'
    assert print_expr('!!true') == '(! (! true))'


def test_logical_operators_bind_looser_than_equality():
    assert print_expr('a or b and c') == '(or a (and b c))'
    assert print_expr('a == b or c') == '(or (== a b) c)'


def test_assignment_is_right_associative():
    assert print_expr('a = b = 1') == '(= a (= b 1))'


def test_calls_and_properties():
    assert print_expr('a.b.c(1, "two")') == '(call (. c (. b a)) 1 "two")'
    assert print_expr('a.b = 3') == '(= . b a 3)'
    assert print_expr('f()()') == '(call (call f))'
    assert print_expr('super.m(this)') == '(call (super m) this)'


def test_for_loop_is_desugared_into_while():
    program = parse_program('for (var i = 0; i < 3; i = i + 1) print i;')
    outer = program.body[0]
    assert isinstance(outer, Block)
    initializer, loop = outer.statements
    assert isinstance(initializer, VarDecl)
    assert isinstance(loop, WhileStmt)
    body, increment = loop.body.statements
    assert isinstance(body, PrintStmt)
    assert isinstance(increment, ExprStmt)
    assert AstPrinter().print(program) == (
        '(block (var i = 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))'
    )


def test_empty_for_clauses_loop_forever():
    program = parse_program('for (;;) print 1;')
    loop = program.body[0]
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.condition, Literal) and loop.condition.value is True
    assert isinstance(loop.body, PrintStmt)


def test_else_binds_to_nearest_if():
    program = parse_program('if (a) if (b) print 1; else print 2;')
    outer = program.body[0]
    assert isinstance(outer, IfStmt)
    assert outer.else_branch is None
    assert isinstance(outer.then_branch, IfStmt)
    assert outer.then_branch.else_branch is not None


def test_class_declaration():
    program = parse_program('class B < A { init(x, y) { this.x = x; } m() {} }')
    decl = program.body[0]
    assert isinstance(decl, ClassDecl)
    assert decl.name.lexeme == 'B'
    assert isinstance(decl.superclass, Variable)
    assert decl.superclass.name.lexeme == 'A'
    assert [m.name.lexeme for m in decl.methods] == ['init', 'm']
    assert [p.lexeme for p in decl.methods[0].params] == ['x', 'y']


def test_function_body_is_a_statement_list():
    program = parse_program('fun add(a, b) { var c = a + b; return c; }')
    function = program.body[0]
    assert [p.lexeme for p in function.params] == ['a', 'b']
    assert len(function.body) == 2


def test_invalid_assignment_target():
    with pytest.raises(ParseError) as info:
        parse_program('1 = 2;')
    assert info.value.message == 'Invalid assignment target'
    assert info.value.where == " at '='"


def test_invalid_assignment_target_does_not_stop_the_parse():
    parser = Parser('a + b = c;\nprint 1;')
    program = parser.parse()
    assert len(parser.errors) == 1
    assert len(program.body) == 2


def test_missing_expression():
    with pytest.raises(ParseError) as info:
        parse_program('print ;')
    assert str(info.value) == "[line 1] Error at ';': Expect expression"


def test_missing_semicolon_at_end():
    with pytest.raises(ParseError) as info:
        parse_program('print 1')
    assert info.value.where == ' at end'
    assert info.value.message == "Expect ';'"


def test_too_many_arguments():
    parser = Parser('f(' + ', '.join(['1'] * 256) + ');')
    parser.parse()
    assert [e.message for e in parser.errors] == ["Can't have more than 255 arguments"]


def test_too_many_parameters():
    params = ', '.join(f'p{i}' for i in range(256))
    parser = Parser(f'fun f({params}) {{}}')
    parser.parse()
    assert [e.message for e in parser.errors] == ["Can't have more than 255 parameters"]
