"""Operator terminal I/O."""
import sys
from typing import Optional, Protocol, TextIO, runtime_checkable


@runtime_checkable
class Prompter(Protocol):
    """Minimal interactive I/O used by the guardian."""

    def ask(self, question: str) -> str:
        """Show ``question`` and return one line of input.

        Raises:
            EOFError: If input is exhausted
        """
        ...

    def say(self, text: str) -> None:
        """Write ``text`` followed by a newline."""
        ...


class TerminalPrompter:
    """Prompter reading stdin and writing stdout."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def ask(self, question: str) -> str:
        self.stdout.write(question)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("No input")
        return line.rstrip("\r\n")

    def say(self, text: str) -> None:
        self.stdout.write(text + "\n")
        self.stdout.flush()

    def is_interactive(self) -> bool:
        """True when both streams are attached to a terminal."""
        return _isatty(self.stdin) and _isatty(self.stdout)


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
