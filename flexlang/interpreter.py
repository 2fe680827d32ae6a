"""Tree-walking evaluator for Flex.

The interpreter runs as a coroutine so that it can suspend where the
language has to wait on its host: input statements, the ``sleep`` native,
loop iterations (to keep a shared event loop responsive) and debugger
pauses. Statements yield a `Normal` or `Returning` outcome; ``return``
unwinds to the nearest call boundary through those outcomes and is never
raised as an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional
import asyncio
import inspect
import time

from .ast import (
    ArrayLiteral, Assign, Binary, Block, Call, ExpressionStatement,
    FunctionDeclaration, Get, Grouping, IfStatement, InputStatement, Literal,
    Logical, Node, PrintStatement, Program, ReturnStatement, Set, Unary,
    Variable, WhileStatement,
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import ExecutionStopped, FlexError, FlexRuntimeError, InputCancelled
from .parser import parse_program
from .types import ArrayVal, format_number, is_number, is_truthy, to_string, values_equal

DEFAULT_PROMPT = 'Input: '

StatementHook = Callable[[Node, Environment], Awaitable[None]]


class FunctionValue:
    """A user-defined Flex function together with its defining environment."""
    def __init__(self, name: str, params: tuple, body: tuple, closure: Environment):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    def __repr__(self) -> str:
        return f"<function {self.name}>"


@dataclass
class Normal:
    value: Any = None


@dataclass
class Returning:
    value: Any = None


@dataclass
class CallFrame:
    name: str
    line: int


@dataclass
class RunResult:
    """Outcome of one run."""
    succeeded: bool
    value: Any = None
    error: Optional[FlexError] = None
    elapsed: float = 0.0
    stopped: bool = False


class Interpreter:
    """Core interpreter that executes a Flex AST."""
    def __init__(self, io=None, registry=None, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_call_depth: int = 128, yield_to_host: bool = True):
        if io is None:
            from .terminal import ConsoleIO
            io = ConsoleIO()
        if registry is None:
            from .std import default_registry
            registry = default_registry()
        self.io = io
        self.registry = registry
        self.global_env = Environment()
        self.registry.install(self.global_env)
        self.max_call_depth = max_call_depth
        self.yield_to_host = yield_to_host

        self.call_stack: List[CallFrame] = []
        self.current_line = 0
        self.statement_hook: Optional[StatementHook] = None
        self.on_stop: Optional[Callable[[], None]] = None
        self.stopped = False
        self.running = False
        self._pending_input: Optional[asyncio.Future] = None

        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    @property
    def call_depth(self) -> int:
        return len(self.call_stack)

    # Public API

    async def run(self, program: Program) -> RunResult:
        if self.running:
            raise RuntimeError('Interpreter is already running a program')
        self.running = True
        self.stopped = False
        self.call_stack = []
        self.current_line = 0
        started = time.perf_counter()
        self.debug(f"run: {len(program.statements)} top-level statements")
        try:
            value = None
            for stmt in program.statements:
                result = await self.execute(stmt, self.global_env)
                value = result.value
                if isinstance(result, Returning):
                    break
            elapsed = time.perf_counter() - started
            self.debug(f"run: completed in {elapsed:.6f}s")
            return RunResult(True, value, elapsed=elapsed)
        except ExecutionStopped:
            self.debug('run: stopped')
            return RunResult(False, elapsed=time.perf_counter() - started, stopped=True)
        except RecursionError:
            error = FlexRuntimeError('Maximum call depth exceeded', self.current_line)
            return RunResult(False, error=error, elapsed=time.perf_counter() - started)
        except FlexError as e:
            if e.line is None:
                e.line = self.current_line
            self.debug(f"run: failed: {e}")
            return RunResult(False, error=e, elapsed=time.perf_counter() - started, stopped=self.stopped)
        finally:
            self.running = False
            self.call_stack = []
            self._pending_input = None

    async def run_source(self, source: str) -> RunResult:
        """Compile and run source text.

        Lexical and syntax errors produce a failed result and nothing is
        executed.
        """
        started = time.perf_counter()
        try:
            program = parse_program(source)
        except FlexError as e:
            self.debug(f"compile: failed: {e}")
            return RunResult(False, error=e, elapsed=time.perf_counter() - started)
        return await self.run(program)

    def stop(self):
        """Request cooperative cancellation of the current run."""
        self.stopped = True
        if self._pending_input is not None and not self._pending_input.done():
            self._pending_input.set_result(None)
        if self.on_stop is not None:
            self.on_stop()

    def provide_input(self, text: str) -> bool:
        """Resolve a pending input wait. Returns False if nothing is waiting."""
        if self._pending_input is None or self._pending_input.done():
            return False
        self._pending_input.set_result(text)
        return True

    @property
    def awaiting_input(self) -> bool:
        return self._pending_input is not None and not self._pending_input.done()

    async def read_input(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        slot = loop.create_future()
        self._pending_input = slot
        request = asyncio.ensure_future(self.io.request_input(prompt))

        def forward(task: asyncio.Future):
            if slot.done():
                return
            if task.cancelled():
                slot.set_result(None)
            elif task.exception() is not None:
                slot.set_exception(task.exception())
            else:
                slot.set_result(task.result())

        request.add_done_callback(forward)
        try:
            text = await slot
        finally:
            self._pending_input = None
            if not request.done():
                request.cancel()
        if text is None:
            raise InputCancelled(self.current_line)
        return text

    # Statements

    async def execute(self, node: Node, env: Environment) -> Any:
        if self.stopped:
            raise ExecutionStopped()
        if not isinstance(node, Block):
            self.current_line = node.line
        if self.statement_hook is not None:
            await self.statement_hook(node, env)
            if self.stopped:
                raise ExecutionStopped()
        try:
            return await self.execute_statement(node, env)
        except FlexError as e:
            if e.line is None:
                e.line = node.line
            raise

    async def execute_block(self, statements, env: Environment) -> Any:
        for stmt in statements:
            result = await self.execute(stmt, env)
            if isinstance(result, Returning):
                return result
        return Normal()

    async def execute_statement(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExpressionStatement):
            return Normal(await self.evaluate(node.expression, env))
        if isinstance(node, PrintStatement):
            text = to_string(await self.evaluate(node.expression, env))
            if node.newline:
                self.io.write_line(text)
            else:
                self.io.write(text)
            return Normal()
        if isinstance(node, InputStatement):
            prompt = DEFAULT_PROMPT
            if node.prompt is not None:
                prompt = to_string(await self.evaluate(node.prompt, env))
            return Normal(await self.read_input(prompt))
        if isinstance(node, Block):
            return await self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStatement):
            cond = await self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return await self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return await self.execute(node.else_branch, env)
            return Normal()
        if isinstance(node, WhileStatement):
            while True:
                cond = await self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)} -> {is_truthy(cond)}")
                if not is_truthy(cond):
                    break
                result = await self.execute(node.body, env)
                if isinstance(result, Returning):
                    return result
                if self.yield_to_host:
                    await asyncio.sleep(0)
            return Normal()
        if isinstance(node, FunctionDeclaration):
            env.define(node.name, FunctionValue(node.name, node.params, node.body, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return Normal()
        if isinstance(node, ReturnStatement):
            value = await self.evaluate(node.value, env) if node.value is not None else None
            return Returning(value)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    # Expressions

    async def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return await self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = await self.evaluate(node.value, env)
            # Undeclared names become globals; existing bindings are updated in place
            if env.exists(node.name):
                env.assign(node.name, value)
            else:
                self.global_env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {to_string(value)}")
            return value
        if isinstance(node, ArrayLiteral):
            return ArrayVal([await self.evaluate(el, env) for el in node.elements])
        if isinstance(node, Logical):
            left = await self.evaluate(node.left, env)
            if node.op == 'or':
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return await self.evaluate(node.right, env)
        if isinstance(node, Unary):
            operand = await self.evaluate(node.operand, env)
            if node.op == '!':
                return not is_truthy(operand)
            if not is_number(operand):
                raise FlexRuntimeError('Operand must be a number.', node.line)
            return -operand
        if isinstance(node, Binary):
            left = await self.evaluate(node.left, env)
            right = await self.evaluate(node.right, env)
            try:
                return self.apply_binary_op(node.op, left, right)
            except FlexRuntimeError as e:
                if e.line is None:
                    e.line = node.line
                raise
        if isinstance(node, Call):
            callee = await self.evaluate(node.callee, env)
            args = [await self.evaluate(arg, env) for arg in node.args]
            return await self.call_function(callee, args, node.line)
        if isinstance(node, Get):
            return await self.evaluate_get(node, env)
        if isinstance(node, Set):
            return await self.evaluate_set(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    async def evaluate_get(self, node: Get, env: Environment) -> Any:
        target = await self.evaluate(node.object, env)
        if target is None:
            raise FlexRuntimeError('Cannot read property of null.', node.line)
        if node.index is not None:
            index = await self.evaluate(node.index, env)
            if isinstance(target, (ArrayVal, str)):
                i = self.array_index(index, node.line)
                items = target.items if isinstance(target, ArrayVal) else target
                if i >= len(items):
                    raise FlexRuntimeError(f"Array index out of bounds: {format_number(index)}", node.line)
                return items[i]
            raise FlexRuntimeError('Only arrays and strings can be indexed.', node.line)
        if node.name == 'length' and isinstance(target, (ArrayVal, str)):
            return float(len(target))
        raise FlexRuntimeError(f"Undefined property: {node.name}", node.line)

    async def evaluate_set(self, node: Set, env: Environment) -> Any:
        target = await self.evaluate(node.object, env)
        if target is None:
            raise FlexRuntimeError('Cannot set property of null.', node.line)
        if node.index is None:
            raise FlexRuntimeError(f"Cannot set property: {node.name}", node.line)
        index = await self.evaluate(node.index, env)
        value = await self.evaluate(node.value, env)
        if not isinstance(target, ArrayVal):
            raise FlexRuntimeError('Only arrays support index assignment.', node.line)
        i = self.array_index(index, node.line)
        if i >= len(target.items):
            target.items.extend([None] * (i + 1 - len(target.items)))
        target.items[i] = value
        return value

    def array_index(self, index: Any, line: int) -> int:
        if not is_number(index) or not float(index).is_integer() or index < 0:
            raise FlexRuntimeError('Invalid array index', line)
        return int(index)

    async def call_function(self, func: Any, args: List[Any], line: int = 0) -> Any:
        if isinstance(func, BuiltinFunction):
            # None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise FlexRuntimeError(f"Expected {func.arity} arguments but got {len(args)}.", line)
            if self.debug_level >= 2:
                self.debug(f"call native {func.name}({', '.join(to_string(a) for a in args)})")
            result = func.fn(self, args)
            if inspect.isawaitable(result):
                result = await result
            return result
        if isinstance(func, FunctionValue):
            if len(args) != len(func.params):
                raise FlexRuntimeError(f"Expected {len(func.params)} arguments but got {len(args)}.", line)
            if len(self.call_stack) >= self.max_call_depth:
                raise FlexRuntimeError('Maximum call depth exceeded', line)
            if self.debug_level >= 2:
                self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
            call_env = Environment(parent=func.closure)
            for param, arg in zip(func.params, args):
                call_env.define(param, arg)
            self.call_stack.append(CallFrame(func.name, line))
            try:
                result = await self.execute_block(func.body, call_env)
            finally:
                self.call_stack.pop()
            return result.value if isinstance(result, Returning) else None
        raise FlexRuntimeError('Can only call functions.', line)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            raise FlexRuntimeError('Operands must be numbers or strings.')
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        if not (is_number(a) and is_number(b)):
            raise FlexRuntimeError('Operands must be numbers.')
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise FlexRuntimeError('Division by zero')
            return a / b
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        raise FlexRuntimeError(f"Unknown operator {op}")


def run_program(source: str, io=None, debug_level: int = 0) -> RunResult:
    """Convenience function to compile and run a Flex program synchronously."""
    interpreter = Interpreter(io=io, debug_level=debug_level)
    try:
        return asyncio.run(interpreter.run_source(source))
    finally:
        interpreter.close()
