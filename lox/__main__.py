"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [script]
    python -m lox [-v...] --emit-ast <script>
    python -m lox [-v...] --ast <ast_json_file>
    python -m lox --print-ast <script>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --print-ast   Parse the given .lox file and print its AST as S-expressions

Without a script an interactive prompt is started. Debug information is
written to `debug.txt` in the current directory when verbosity is greater
than zero. The exit code is 64 after a usage error, 65 after a static
error and 70 after a runtime error.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import ErrorReporter, EXIT_OK, EXIT_USAGE, EXIT_STATIC_ERROR, EXIT_NO_INPUT
from .interpreter import Interpreter, run_program, execute_program
from .parser import Parser
from .printer import AstPrinter


class LoxArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def existing_path(name: str) -> Path:
    path = Path(name)
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EXIT_NO_INPUT)
    return path


def read_source(path: Path) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(name: str, reporter: ErrorReporter):
    parser = Parser(read_source(existing_path(name)))
    program = parser.parse()
    if parser.errors:
        for error in parser.errors:
            reporter.static_error(error)
        sys.exit(EXIT_STATIC_ERROR)
    return program


def run_prompt(interpreter: Interpreter, reporter: ErrorReporter):
    """Read-eval-print loop. The globals survive from one line to the next."""
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        # Errors are reported by run_program; the session continues.
        run_program(line, interpreter, reporter)


def main(argv: list[str] | None = None) -> None:
    parser = LoxArgumentParser(prog="lox", description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--print-ast', metavar='LOX_FILE', help='print the AST of the given .lox file')
    parser.add_argument('script', nargs='?', help='Lox script (.lox) to execute')
    args = parser.parse_args(argv)
    reporter = ErrorReporter()

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = parse_or_exit(args.emit_ast, reporter)
        obj = ast_to_obj(program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Print AST mode
    if args.print_ast:
        program = parse_or_exit(args.print_ast, reporter)
        print(AstPrinter().print(program))
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        # Execute from AST JSON
        if args.ast:
            with open(existing_path(args.ast), 'r', encoding='utf-8') as f:
                data = json.load(f)
            status = execute_program(ast_from_obj(data), interpreter, reporter)
        elif args.script:
            status = run_program(read_source(existing_path(args.script)), interpreter, reporter)
        else:
            run_prompt(interpreter, reporter)
            status = EXIT_OK
    finally:
        interpreter.close()
    if status != EXIT_OK:
        sys.exit(status)


if __name__ == '__main__':
    main()
