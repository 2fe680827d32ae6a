from pathlib import Path

from flexlang.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10(capsys):
    with open(EXAMPLES / 'program_10.lx', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    assert result.succeeded
    out = capsys.readouterr().out.strip()
    assert out == '2\ninside\nlocal'
