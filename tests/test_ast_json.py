import json

import pytest

from flexlang.ast import FunctionDeclaration, Literal, Program
from flexlang.ast_json import ast_from_obj, ast_to_obj
from flexlang.interpreter import Interpreter
from flexlang.parser import parse_program
from flexlang.terminal import ScriptedIO

SOURCE = '''function greet(name) {
  if (name == null or name == "") { return "nobody"; }
  return "hi " + name;
}
items = [1, -2, 3];
items[1] = items[0] * 10;
i = 0;
while (i < items.length) { print(items[i]); i = i + 1; }
etb3("");
etb3(greet("flex"));
etb3(!true);
'''


def reload(program: Program) -> Program:
    return ast_from_obj(json.loads(json.dumps(ast_to_obj(program))))


@pytest.mark.asyncio
async def test_reloaded_program_runs_the_same():
    program = parse_program(SOURCE)
    outputs = []
    for candidate in (program, reload(program)):
        io = ScriptedIO()
        result = await Interpreter(io=io).run(candidate)
        assert result.succeeded
        outputs.append(io.output)
    assert outputs[0] == outputs[1] == '1103\nhi flex\nfalse\n'


def test_lines_survive_serialization():
    program = reload(parse_program(SOURCE))
    assert [stmt.line for stmt in program.statements] == [1, 5, 6, 7, 8, 9, 10, 11]
    function = program.statements[0]
    assert isinstance(function, FunctionDeclaration)
    assert function.params == ('name',)
    assert function.body[1].line == 3


def test_integer_literals_load_as_numbers():
    literal = ast_from_obj({'type': 'Literal', 'value': 2, 'line': 4})
    assert literal == Literal(2.0, 4)
    assert isinstance(literal.value, float)
    assert ast_from_obj({'type': 'Literal', 'value': True, 'line': 1}).value is True


def test_unknown_node_types_are_rejected():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Goto', 'line': 1})
    with pytest.raises(TypeError):
        ast_from_obj(['not', 'a', 'node'])
