from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_independent_closures(capsys):
    with open(EXAMPLES / 'program_3.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert interp.run_source(source)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['1', '2', '1', '3']
