from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_operators(capsys):
    with open(EXAMPLES / 'program_8.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert interp.run_source(source)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['ab', 'x1', '1x', '3.5', '0.30000000000000004', '-6', 'true', 'false', 'true', 'false', 'true', 'default', 'zero is truthy', 'empty is truthy']
