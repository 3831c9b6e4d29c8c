def test_fields_and_methods(run_lox):
    source = """
    class Point {
      init(x, y) {
        this.x = x;
        this.y = y;
      }
      sum() { return this.x + this.y; }
    }
    var p = Point(1, 2);
    print p.x;
    p.x = 10;
    print p.sum();
    """
    assert run_lox(source) == (0, '1\n12\n', '')


def test_fields_can_be_added_from_outside(run_lox):
    source = 'class Box {} var b = Box(); b.contents = "cat"; print b.contents;'
    assert run_lox(source) == (0, 'cat\n', '')


def test_fields_shadow_methods(run_lox):
    source = """
    class A { m() { return "method"; } }
    var a = A();
    print a.m();
    a.m = "field";
    print a.m;
    """
    assert run_lox(source) == (0, 'method\nfield\n', '')


def test_bound_methods_remember_their_instance(run_lox):
    source = """
    class Person {
      init(name) { this.name = name; }
      greet() { print "I am " + this.name; }
    }
    var method = Person("Jane").greet;
    method();
    """
    assert run_lox(source) == (0, 'I am Jane\n', '')


def test_this_inside_nested_closure(run_lox):
    source = """
    class Thing {
      getCallback() {
        fun localFunction() { print this; }
        return localFunction;
      }
    }
    var callback = Thing().getCallback();
    callback();
    """
    assert run_lox(source) == (0, 'Thing instance\n', '')


def test_initializer_returns_instance(run_lox):
    source = """
    class Foo {
      init() {
        this.value = 1;
        return;
      }
    }
    var foo = Foo();
    print foo.init();
    print foo.init() == foo;
    """
    assert run_lox(source) == (0, 'Foo instance\ntrue\n', '')


def test_class_arity_comes_from_initializer(run_lox):
    status, out, err = run_lox('class A { init(a) {} }\nA();')
    assert status == 70
    assert err == 'Expected 1 arguments but got 0\n[line 2]\n'
    status, out, err = run_lox('class B {}\nB(1);')
    assert err == 'Expected 0 arguments but got 1\n[line 2]\n'


def test_inherited_methods_and_initializer(run_lox):
    source = """
    class Base {
      init(v) { this.v = v; }
      describe() { return "base " + this.v; }
    }
    class Derived < Base {}
    print Derived(3).describe();
    """
    assert run_lox(source) == (0, 'base 3\n', '')


def test_super_dispatch_uses_the_declaring_class(run_lox):
    source = """
    class A {
      method() { print "A method"; }
    }
    class B < A {
      method() { print "B method"; }
      test() { super.method(); }
    }
    class C < B {}
    C().test();
    """
    assert run_lox(source) == (0, 'A method\n', '')


def test_super_chain_across_three_levels(run_lox):
    source = """
    class A { name() { return "A"; } }
    class B < A { name() { return "B" + super.name(); } }
    class C < B { name() { return "C" + super.name(); } }
    print C().name();
    """
    assert run_lox(source) == (0, 'CBA\n', '')


def test_super_method_is_bound_to_this(run_lox):
    source = """
    class A { tag() { return this.label; } }
    class B < A {
      init() { this.label = "bound"; }
      tag() { var m = super.tag; return m(); }
    }
    print B().tag();
    """
    assert run_lox(source) == (0, 'bound\n', '')


def test_class_identity_equality(run_lox):
    source = """
    class A {}
    var a = A();
    var b = A();
    print a == a;
    print a == b;
    print A == A;
    """
    assert run_lox(source) == (0, 'true\nfalse\ntrue\n', '')


def test_superclass_must_be_a_class(run_lox):
    status, out, err = run_lox('var NotAClass = "nope";\nclass Sub < NotAClass {}')
    assert status == 70
    assert err == 'Superclass must be a class\n[line 2]\n'


def test_undefined_property(run_lox):
    status, out, err = run_lox('class A {}\nprint A().missing;')
    assert status == 70
    assert err == "Undefined property 'missing'\n[line 2]\n"


def test_undefined_super_method(run_lox):
    source = 'class A {}\nclass B < A { m() { return super.nothing; } }\nB().m();'
    status, out, err = run_lox(source)
    assert status == 70
    assert err == "Undefined property 'nothing'\n[line 2]\n"


def test_properties_on_non_instances(run_lox):
    status, out, err = run_lox('var s = "str";\nprint s.length;')
    assert (status, err) == (70, 'Only instances have properties\n[line 2]\n')
    status, out, err = run_lox('var n = 1;\nn.field = 2;')
    assert (status, err) == (70, 'Only instances have fields\n[line 2]\n')


def test_instances_are_not_callable(run_lox):
    status, out, err = run_lox('class A {}\nvar a = A();\na();')
    assert (status, err) == (70, 'Can only call functions and classes\n[line 3]\n')


def test_class_name_is_visible_in_its_methods(run_lox):
    source = """
    class Node {
      make() { return Node(); }
    }
    print Node().make();
    """
    assert run_lox(source) == (0, 'Node instance\n', '')


def test_local_class_declaration(run_lox):
    source = """
    {
      class Local < Base { hello() { return "local " + super.hello(); } }
      print Local().hello();
    }
    """
    source = 'class Base { hello() { return "base"; } }\n' + source
    assert run_lox(source) == (0, 'local base\n', '')
