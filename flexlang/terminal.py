"""Host I/O collaborators.

The interpreter never touches stdin or stdout directly. It writes program
output and reads input lines through a `HostIO`, which lets the same core
run against a real console, a test transcript or an editor front end.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, List, Optional, Tuple
import asyncio
import sys

import colorama
from colorama import Fore, Style

SEVERITY_COLORS = {
    'info': Fore.CYAN,
    'success': Fore.GREEN,
    'warning': Fore.YELLOW,
    'error': Fore.RED,
}


class HostIO(ABC):
    @abstractmethod
    def write(self, text: str) -> None:
        """Write text without a trailing newline."""

    @abstractmethod
    def write_line(self, text: str, severity: Optional[str] = None) -> None:
        """Write a line. ``severity`` marks host status messages
        ('info', 'success', 'warning' or 'error'); program output has none."""

    @abstractmethod
    async def request_input(self, prompt: str) -> Optional[str]:
        """Wait for one line of input. None means the request was cancelled."""

    @abstractmethod
    def clear(self) -> None:
        pass


class ConsoleIO(HostIO):
    """Console implementation: stdout for output, stdin for input."""
    def __init__(self, color: bool = True):
        self.color = color
        if color:
            colorama.just_fix_windows_console()

    # sys.stdout is looked up on each call so that redirection (and pytest's
    # capture) made after construction is honoured
    def write(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_line(self, text: str, severity: Optional[str] = None) -> None:
        if severity and self.color and severity in SEVERITY_COLORS:
            text = f"{SEVERITY_COLORS[severity]}{text}{Style.RESET_ALL}"
        sys.stdout.write(text + '\n')
        sys.stdout.flush()

    async def request_input(self, prompt: str) -> Optional[str]:
        self.write(prompt)
        loop = asyncio.get_running_loop()
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if line == '':
            # EOF
            return None
        return line.rstrip('\r\n')

    def clear(self) -> None:
        sys.stdout.write('\x1b[2J\x1b[H')
        sys.stdout.flush()


class ScriptedIO(HostIO):
    """In-memory I/O used by tests and embedding hosts.

    Program output accumulates in ``output``; status lines written with a
    severity go to ``messages`` instead. Input requests are answered from
    ``inputs`` in order. When the script runs out the request is cancelled,
    unless ``wait_when_empty`` is set, in which case it stays pending until
    the interpreter's ``provide_input`` or ``stop`` resolves it.
    """
    def __init__(self, inputs: Iterable[str] = (), wait_when_empty: bool = False):
        self.inputs = deque(inputs)
        self.wait_when_empty = wait_when_empty
        self.chunks: List[str] = []
        self.messages: List[Tuple[str, str]] = []
        self.prompts: List[str] = []
        self.clear_count = 0

    @property
    def output(self) -> str:
        return ''.join(self.chunks)

    @property
    def lines(self) -> List[str]:
        return self.output.splitlines()

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def write_line(self, text: str, severity: Optional[str] = None) -> None:
        if severity is None:
            self.chunks.append(text + '\n')
        else:
            self.messages.append((text, severity))

    async def request_input(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if self.inputs:
            return self.inputs.popleft()
        if self.wait_when_empty:
            # Resolved from outside; this request is cancelled afterwards
            await asyncio.get_running_loop().create_future()
        return None

    def clear(self) -> None:
        self.chunks.clear()
        self.clear_count += 1
