"""CLI entry point for the Flex interpreter.

Usage:
    python -m flexlang [-v|-vv|-vvv] <program_file>
    python -m flexlang [-v...] --emit-ast <program_file>
    python -m flexlang [-v...] --ast <ast_json_file>
    python -m flexlang --debug [-b LINE ...] <program_file>
    python -m flexlang --store DIR --save NAME <program_file>
    python -m flexlang --store DIR --load NAME
    python -m flexlang --store DIR --list

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lx file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --debug       Step through the program; commands are read from stdin:
                s (step into), n (step over), o (step out), c (continue),
                v (show variables and call stack), q (quit)
  -b LINE       Set a breakpoint (with --debug; can be repeated)
  --store DIR   Program store directory used by --save, --load and --list

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style

from .ast_json import ast_from_obj, ast_to_obj
from .debugger import DebugSession, DebugSnapshot, DebugState, RecordingView
from .errors import FlexError
from .interpreter import Interpreter, RunResult
from .parser import parse_program
from .storage import ProgramStore, StorageError
from .terminal import ConsoleIO

DEBUG_HELP = 's=step into, n=step over, o=step out, c=continue, v=variables, q=quit'


def report_error(message: str) -> None:
    print(f"{Fore.RED}{message}{Style.RESET_ALL}", file=sys.stderr)


def read_file(path: Path) -> str:
    if not path.exists():
        report_error(f"Error: file {path} not found")
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


class ConsoleView(RecordingView):
    """Prints the paused source line; keeps the latest snapshot for ``v``."""
    def __init__(self, source: str, breakpoints=()):
        super().__init__(breakpoints)
        self.source_lines = source.splitlines()

    def highlight_line(self, line: int) -> None:
        super().highlight_line(line)
        text = self.source_lines[line - 1] if 0 < line <= len(self.source_lines) else ''
        print(f"-> {line:4d}  {text}")

    def print_snapshot(self) -> None:
        if not self.snapshots:
            return
        snapshot: DebugSnapshot = self.snapshots[-1]
        print('Variables:')
        if not snapshot.variables:
            print('  (none)')
        for name, value in snapshot.variables.items():
            print(f"  {name} = {value}")
        print('Call stack:')
        for frame in snapshot.call_stack:
            print(f"  {frame}")


async def debug_program(interpreter: Interpreter, source: str, breakpoints: List[int]) -> Optional[RunResult]:
    view = ConsoleView(source, breakpoints)
    session = DebugSession(interpreter, view)
    state = await session.start(source)
    if state is DebugState.PAUSED:
        print(DEBUG_HELP)
    loop = asyncio.get_running_loop()
    while state is DebugState.PAUSED:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        command = line.strip().lower() if line else 'q'
        if command == 's':
            state = await session.step_into()
        elif command == 'n':
            state = await session.step_over()
        elif command == 'o':
            state = await session.step_out()
        elif command == 'c':
            state = await session.resume()
        elif command == 'v':
            view.print_snapshot()
        elif command == 'q':
            session.stop()
            break
        else:
            print(DEBUG_HELP)
    return await session.join()


def finish(result: Optional[RunResult]) -> None:
    if result is None or result.stopped:
        sys.exit(1)
    if not result.succeeded:
        if result.error is not None:
            report_error(str(result.error))
        sys.exit(1)


def store_commands(args, parser: argparse.ArgumentParser) -> bool:
    """Handle --save/--load/--list. Returns True if the command is complete."""
    if not (args.save or args.load or args.list):
        return False
    if not args.store:
        parser.error('--save, --load and --list require --store DIR')
    store = ProgramStore(args.store)
    try:
        if args.list:
            for record in store.list():
                print(f"{record.identifier}  {record.last_modified}  {record.name}")
            return True
        if args.save:
            if not args.program:
                parser.error('--save requires a program file')
            record = store.save(args.save, read_file(Path(args.program)))
            print(record.identifier)
            return True
    except StorageError as e:
        report_error(f"Error: {e}")
        sys.exit(1)
    return False


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Flex language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LX_FILE', help='emit AST JSON for the given .lx file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('--debug', action='store_true', help='run under the interactive debugger')
    parser.add_argument('-b', '--break', dest='breakpoints', metavar='LINE', type=int, action='append',
                        default=[], help='breakpoint line for --debug (can be repeated)')
    parser.add_argument('--store', metavar='DIR', help='program store directory')
    parser.add_argument('--save', metavar='NAME', help='save the program file to the store under NAME')
    parser.add_argument('--load', metavar='NAME', help='run the stored program NAME')
    parser.add_argument('--list', action='store_true', help='list stored programs')
    parser.add_argument('program', nargs='?', help='Flex program file (.lx) to execute')
    args = parser.parse_args(argv)

    if store_commands(args, parser):
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_file(program_file)
        try:
            ast_program = parse_program(source)
        except FlexError as e:
            report_error(str(e))
            sys.exit(1)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(io=ConsoleIO(), debug_level=args.v)
    try:
        # Execute from AST JSON
        if args.ast:
            data = json.loads(read_file(Path(args.ast)))
            finish(asyncio.run(interpreter.run(ast_from_obj(data))))
            return

        if args.load:
            try:
                record = ProgramStore(args.store).find(args.load)
            except StorageError as e:
                report_error(f"Error: {e}")
                sys.exit(1)
            if record is None:
                report_error(f"Error: no stored program named {args.load!r}")
                sys.exit(1)
            source = record.source
        else:
            if not args.program:
                parser.error('missing program file; or use --emit-ast/--ast/--load')
            source = read_file(Path(args.program))

        if args.debug:
            finish(asyncio.run(debug_program(interpreter, source, args.breakpoints)))
        else:
            finish(asyncio.run(interpreter.run_source(source)))
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
