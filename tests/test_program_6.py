from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_break_and_continue(capsys):
    with open(EXAMPLES / 'program_6.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert interp.run_source(source)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['4', '4', '4', '3', '3']
