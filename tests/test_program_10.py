from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_static_error_prevents_execution(capsys):
    with open(EXAMPLES / 'program_10.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert not interp.run_source(source)
    captured = capsys.readouterr()
    # Nothing runs, not even the statements before the error
    assert captured.out == ''
    assert captured.err.strip() == "[line 2] Error at 'a': Can't read local variable in its own initializer."
