from pathlib import Path

from flexlang.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5(capsys):
    with open(EXAMPLES / 'program_5.lx', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    assert result.succeeded
    out = capsys.readouterr().out.strip()
    assert out == '1\n2\n11\n3\n15'
