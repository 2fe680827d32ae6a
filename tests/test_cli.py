import json

import pytest

from flexlang.__main__ import main


@pytest.fixture
def program_file(tmp_path):
    path = tmp_path / 'hello.lx'
    path.write_text('x = 2;\netb3("x is " + x);\n')
    return path


def test_run_program_file(program_file, capsys):
    main([str(program_file)])
    assert capsys.readouterr().out == 'x is 2\n'


def test_emit_and_run_ast(program_file, capsys):
    main(['--emit-ast', str(program_file)])
    ast_path = program_file.with_name('hello.lx.ast.json')
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text())['type'] == 'Program'
    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == 'x is 2\n'


def test_runtime_error_exits_with_status_1(tmp_path, capsys):
    path = tmp_path / 'bad.lx'
    path.write_text('etb3("before");\netb3(1 / 0);\n')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert '[line 2] RuntimeError: Division by zero' in captured.err


def test_syntax_error_runs_nothing(tmp_path, capsys):
    path = tmp_path / 'broken.lx'
    path.write_text('etb3("never");\nx = (1;\n')
    with pytest.raises(SystemExit):
        main([str(path)])
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'SyntaxError' in captured.err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'nope.lx')])
    assert 'not found' in capsys.readouterr().err


def test_store_save_list_and_load(program_file, tmp_path, capsys):
    store = str(tmp_path / 'store')
    main(['--store', store, '--save', 'hello', str(program_file)])
    identifier = capsys.readouterr().out.strip()
    main(['--store', store, '--list'])
    listing = capsys.readouterr().out
    assert identifier in listing
    assert listing.strip().endswith('hello')
    main(['--store', store, '--load', 'hello'])
    assert capsys.readouterr().out == 'x is 2\n'
    with pytest.raises(SystemExit):
        main(['--store', store, '--load', 'other'])


def test_store_commands_require_store(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['--list'])
    assert exc.value.code == 2
