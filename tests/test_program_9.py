from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_runtime_error_stops_the_run(capsys):
    with open(EXAMPLES / 'program_9.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert not interp.run_source(source)
    captured = capsys.readouterr()
    assert captured.out.strip() == 'before'
    assert captured.err.strip() == 'Cannot divide by 0.\n[line 2]'
    assert interp.diagnostics.had_runtime_error
