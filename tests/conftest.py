import pytest

from lox.interpreter import Interpreter, run_program


@pytest.fixture
def run_lox(capsys):
    """Run source in a fresh interpreter; returns (status, stdout, stderr)."""
    def run(source: str):
        status = run_program(source, Interpreter())
        captured = capsys.readouterr()
        return status, captured.out, captured.err
    return run
