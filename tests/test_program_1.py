from pathlib import Path

from ling.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1(capsys):
    with open(EXAMPLES / 'program_1.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert interp.run_source(source)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
