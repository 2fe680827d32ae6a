from pathlib import Path

from flexlang.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9(capsys):
    with open(EXAMPLES / 'program_9.lx', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    assert result.succeeded
    out = capsys.readouterr().out.strip()
    assert out == '4\n3\n3\n4\n1024\n4\n2\n8\n43\n3.5\nNaN\n314'
