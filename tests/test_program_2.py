from pathlib import Path

from flexlang.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2(capsys):
    with open(EXAMPLES / 'program_2.lx', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    assert result.succeeded
    out = capsys.readouterr().out.strip()
    assert out == '7\na1\n2.5\n13\n-3\ntrue\ntrue\ntrue\nfalse'
