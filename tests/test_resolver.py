from lox.interpreter import run_program
from lox.parser import parse_program
from lox.resolver import Resolver


def resolve(source: str):
    program = parse_program(source)
    resolver = Resolver()
    table = resolver.resolve(program.body)
    return program, resolver, table


def messages(source: str):
    _, resolver, _ = resolve(source)
    return [e.message for e in resolver.errors]


def test_shadowing_reference_resolves_to_its_own_block():
    source = """
    {
      var a = 1;
      {
        var a = 2;
        {
          {
            var a = 3;
            print a;
          }
        }
      }
    }
    """
    program, resolver, table = resolve(source)
    level1 = program.body[0]
    level2 = level1.statements[1]
    level3 = level2.statements[1]
    level4 = level3.statements[0]
    print_stmt = level4.statements[1]
    assert resolver.errors == []
    assert table[print_stmt.expr] == 0


def test_distance_counts_enclosing_scopes():
    program, _, table = resolve('{ var a = 1; { { print a; } } }')
    inner = program.body[0].statements[1].statements[0]
    assert table[inner.statements[0].expr] == 2


def test_globals_are_left_unresolved():
    program, _, table = resolve('var a = 1; print a; { print a; }')
    assert table == {}


def test_table_is_keyed_by_node_not_name():
    program, _, table = resolve('{ var a = 1; print a; { print a; } }')
    block = program.body[0]
    first = block.statements[1].expr
    second = block.statements[2].statements[0].expr
    assert table[first] == 0
    assert table[second] == 1


def test_parameters_and_body_share_a_scope():
    program, _, table = resolve('fun f(x) { return x; }')
    assert table[program.body[0].body[0].value] == 0


def test_closure_assignment_distance():
    program, _, table = resolve('fun outer() { var c = 0; fun inner() { c = c + 1; } }')
    inner = program.body[0].body[1]
    assign = inner.body[0].expr
    assert table[assign] == 1
    assert table[assign.value.left] == 1


def test_this_resolves_past_method_scope():
    program, _, table = resolve('class A { m() { return this; } }')
    this = program.body[0].methods[0].body[0].value
    assert table[this] == 1


def test_super_resolves_past_this_scope():
    program, _, table = resolve('class A {} class B < A { m() { return super.m; } }')
    get = program.body[1].methods[0].body[0].value
    assert table[get] == 2


def test_self_reference_in_initializer():
    assert messages('{ var a = a; }') == ["Can't read local variable in its own initializer"]
    assert messages('var a = 1; { var a = a; }') == ["Can't read local variable in its own initializer"]
    # allowed at global scope
    assert messages('var a = a;') == []


def test_return_outside_function():
    assert messages('return 1;') == ["Can't return from top-level code"]
    assert messages('{ return; }') == ["Can't return from top-level code"]


def test_this_outside_class():
    assert messages('print this;') == ["Can't use 'this' outside of a class"]
    assert messages('fun f() { return this; }') == ["Can't use 'this' outside of a class"]


def test_super_misuse():
    assert messages('super.m();') == ["Can't use 'super' outside of a class"]
    assert messages('class A { m() { super.m(); } }') == [
        "Can't use 'super' in a class with no superclass"
    ]


def test_class_inheriting_from_itself():
    assert messages('class A < A {}') == ["A class can't inherit from itself"]


def test_initializer_return_value():
    assert messages('class A { init() { return 1; } }') == ["Can't return a value from an initializer"]
    assert messages('class A { init() { return; } }') == []
    assert messages('class A { m() { return 1; } }') == []


def test_duplicate_local_declaration():
    assert messages('{ var a = 1; var a = 2; }') == ["Already a variable with this name in this scope"]
    assert messages('var a = 1; var a = 2;') == []


def test_all_errors_are_collected():
    assert len(messages('return 1;\nprint this;\nclass A < A {}')) == 3


def test_resolve_errors_prevent_execution(capsys):
    status = run_program('print "before";\nreturn 1;')
    captured = capsys.readouterr()
    assert status == 65
    assert captured.out == ''
    assert captured.err == "[line 2] Error at 'return': Can't return from top-level code\n"
