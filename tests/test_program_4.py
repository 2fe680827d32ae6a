from pathlib import Path

from flexlang.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4(capsys):
    with open(EXAMPLES / 'program_4.lx', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    assert result.succeeded
    out = capsys.readouterr().out.strip()
    assert out == '6\n[1, 2, 3, null, null, 9]\n2\n7\nx\n[null, null, null]\n3'
