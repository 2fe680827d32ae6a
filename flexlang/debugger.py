"""Statement-stepping debug controller.

A `DebugSession` runs the interpreter as a background task and installs a
statement hook. Before every non-block statement the hook decides whether
to pause; while paused it waits on a command queue, so nothing advances
until the host issues a step, continue or stop. Each command method
returns once the run has settled again (paused, completed or stopped).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set
import asyncio
import json

from .ast import Block, Node, Program, WhileStatement
from .environment import Environment
from .errors import FlexError
from .interpreter import Interpreter, RunResult
from .parser import parse_program
from .types import to_string


class DebugState(Enum):
    IDLE = 'Idle'
    PREPARING = 'Preparing'
    PAUSED = 'Paused'
    RUNNING = 'Running'
    COMPLETED = 'Completed'
    STOPPED = 'Stopped'


class StepMode(Enum):
    NONE = 'continue'
    INTO = 'into'
    OVER = 'over'
    OUT = 'out'


FINISHED = (DebugState.COMPLETED, DebugState.STOPPED)


@dataclass
class DebugSnapshot:
    line: int
    cursor: int
    variables: Dict[str, str] = field(default_factory=dict)
    call_stack: List[str] = field(default_factory=list)


class SourceView(ABC):
    """Editor-side collaborator: breakpoints in, highlights and snapshots out."""

    @abstractmethod
    def breakpoints(self) -> Set[int]:
        pass

    @abstractmethod
    def highlight_line(self, line: int) -> None:
        pass

    @abstractmethod
    def show_snapshot(self, snapshot: DebugSnapshot) -> None:
        pass


class RecordingView(SourceView):
    """A view that keeps its breakpoints in a set and records what it is shown."""
    def __init__(self, breakpoints: Iterable[int] = ()):
        self.breakpoint_lines: Set[int] = set(breakpoints)
        self.highlights: List[int] = []
        self.snapshots: List[DebugSnapshot] = []

    def toggle_breakpoint(self, line: int) -> bool:
        if line in self.breakpoint_lines:
            self.breakpoint_lines.discard(line)
            return False
        self.breakpoint_lines.add(line)
        return True

    def breakpoints(self) -> Set[int]:
        return self.breakpoint_lines

    def highlight_line(self, line: int) -> None:
        self.highlights.append(line)

    def show_snapshot(self, snapshot: DebugSnapshot) -> None:
        self.snapshots.append(snapshot)


def format_value(value) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return to_string(value)


class DebugSession:
    def __init__(self, interpreter: Interpreter, view: Optional[SourceView] = None):
        self.interpreter = interpreter
        self.view = view if view is not None else RecordingView()
        self.state = DebugState.IDLE
        self.step_mode = StepMode.NONE
        self.step_depth = 0
        self.cursor = 0
        self.current_line: Optional[int] = None
        self.program: Optional[Program] = None
        self.result: Optional[RunResult] = None
        self._top_level: Dict[int, int] = {}
        self._last_line: Optional[int] = None
        self._loop_bodies: Set[int] = set()
        self._commands: Optional[asyncio.Queue] = None
        self._settled: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def io(self):
        return self.interpreter.io

    async def start(self, source: str) -> DebugState:
        if self.state is not DebugState.IDLE:
            raise RuntimeError('Debug session already started')
        if self.interpreter.running:
            raise RuntimeError('Interpreter is already running a program')
        self.state = DebugState.PREPARING
        self.io.write_line('Preparing for debug...', 'info')
        try:
            self.program = parse_program(source)
        except FlexError as e:
            self.io.write_line(f"Failed to parse program for debugging: {e}", 'error')
            self.state = DebugState.STOPPED
            return self.state

        statements = self.program.statements
        if not statements:
            self.state = DebugState.COMPLETED
            self.io.write_line('Debug session completed.', 'success')
            return self.state

        self._top_level = {id(stmt): index for index, stmt in enumerate(statements)}
        self._commands = asyncio.Queue()
        self._settled = asyncio.Event()
        # Pause before the first statement
        self.step_mode = StepMode.INTO
        self.step_depth = 0
        self.interpreter.statement_hook = self._on_statement
        self.interpreter.on_stop = self._interpreter_stopped
        self.io.write_line('Starting debug session...', 'info')
        self._task = asyncio.ensure_future(self._run())
        await self._settled.wait()
        return self.state

    async def step_into(self) -> DebugState:
        return await self._command(StepMode.INTO)

    async def step_over(self) -> DebugState:
        return await self._command(StepMode.OVER)

    async def step_out(self) -> DebugState:
        return await self._command(StepMode.OUT)

    async def resume(self) -> DebugState:
        return await self._command(StepMode.NONE)

    def stop(self) -> None:
        if self.state in FINISHED:
            return
        # Calls back into _interpreter_stopped while a run is hooked
        self.interpreter.stop()
        self._interpreter_stopped()

    def _interpreter_stopped(self) -> None:
        if self.state in FINISHED:
            return
        self.state = DebugState.STOPPED
        if self._commands is not None:
            # Wake a pause that is waiting for a command
            self._commands.put_nowait(None)
        self.io.write_line('Debug session stopped.', 'info')

    async def join(self) -> Optional[RunResult]:
        if self._task is not None:
            await self._task
        return self.result

    async def _command(self, mode: StepMode) -> DebugState:
        if self.state is not DebugState.PAUSED:
            self.interpreter.debug(f"debugger: ignored {mode.value} while {self.state.value}")
            return self.state
        self._settled.clear()
        self.state = DebugState.RUNNING
        self._commands.put_nowait(mode)
        await self._settled.wait()
        return self.state

    async def _run(self):
        try:
            self.result = await self.interpreter.run(self.program)
        finally:
            self.interpreter.statement_hook = None
            self.interpreter.on_stop = None
            if self.result is None or self.state is DebugState.STOPPED:
                self.state = DebugState.STOPPED
            elif self.result.succeeded:
                self.state = DebugState.COMPLETED
                self.io.write_line('Debug session completed.', 'success')
            else:
                self.state = DebugState.STOPPED
                self.io.write_line(f"Debug execution error: {self.result.error}", 'error')
            self._settled.set()

    def should_pause(self, line: int) -> bool:
        if line in self.view.breakpoints() and line != self._last_line:
            return True
        depth = self.interpreter.call_depth
        if self.step_mode is StepMode.INTO:
            return True
        if self.step_mode is StepMode.OVER:
            return depth <= self.step_depth
        if self.step_mode is StepMode.OUT:
            return depth < self.step_depth
        return False

    async def _on_statement(self, node: Node, env: Environment):
        if id(node) in self._loop_bodies:
            # A new iteration may pause on the same line again
            self._last_line = None
        if isinstance(node, WhileStatement):
            self._loop_bodies.add(id(node.body))
        if isinstance(node, Block):
            return
        index = self._top_level.get(id(node))
        if index is not None:
            self.cursor = index
        if self.should_pause(node.line):
            await self._pause(node, env)
        self._last_line = node.line

    async def _pause(self, node: Node, env: Environment):
        self.state = DebugState.PAUSED
        self.current_line = node.line
        self.view.highlight_line(node.line)
        self.view.show_snapshot(self.snapshot(node.line, env))
        self.io.write_line(f"Paused at line {node.line}", 'info')
        self._settled.set()

        mode = await self._commands.get()
        if mode is None:
            # stop(); the interpreter sees its stopped flag after this hook
            return
        self.step_mode = mode
        self.step_depth = self.interpreter.call_depth

    def snapshot(self, line: int, env: Environment) -> DebugSnapshot:
        registry = self.interpreter.registry
        chain = []
        scope: Optional[Environment] = env
        while scope is not None:
            chain.append(scope)
            scope = scope.parent
        variables: Dict[str, str] = {}
        # Outermost first so that inner bindings shadow outer ones
        for scope in reversed(chain):
            for name, value in scope.snapshot().items():
                if registry.is_native_binding(name, value):
                    continue
                variables[name] = format_value(value)
        call_stack = [f"{frame.name} (line {frame.line})" for frame in reversed(self.interpreter.call_stack)]
        call_stack.append('Main Program')
        return DebugSnapshot(line, self.cursor, variables, call_stack)
