"""The interactive loop and the handling of one line of input."""

from __future__ import annotations

import sys
from typing import Callable, Sequence

from .builtins import ShellExit
from .executor import run_line
from .heredoc import prompt_reader
from .parser import parse_line
from .scanner import ParseError
from .signals import INTERRUPTED_STATUS, install_handlers
from .state import Shell
from .words import QuoteError

PROMPT = "Input : "
SYNTAX_STATUS = 2


def handle_input(shell: Shell, text: str) -> int:
    """Parse and run one line, returning the shell's status afterwards.

    An unclosed quote is reported and leaves the status alone; other
    syntax errors set it to 2. Raises ShellExit when ``exit`` runs.
    """
    shell.signals.set_interactive(False)
    if not text.strip(" "):
        return shell.last_status
    try:
        line = parse_line(text, shell.env, shell.last_status)
    except QuoteError:
        sys.stdout.write("\033[31mIncorrect quote\n\033[0m")
        return shell.last_status
    except ParseError as error:
        sys.stdout.write(f"{error}\n")
        shell.last_status = SYNTAX_STATUS
        return shell.last_status
    return run_line(shell, line)


def repl(shell: Shell, read_line: Callable[[], "str | None"]) -> int:
    """Read and run lines until end of input or ``exit``; return the status."""
    while True:
        shell.signals.set_interactive(True)
        try:
            text = read_line()
        except KeyboardInterrupt:
            text = ""
        if shell.signals.take_status() == INTERRUPTED_STATUS:
            shell.last_status = INTERRUPTED_STATUS
        if text is None:
            sys.stdout.write("exit\n")
            sys.stdout.flush()
            return shell.last_status
        if not text:
            continue
        try:
            handle_input(shell, text)
        except ShellExit as done:
            return done.status


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive shell on the process environment."""
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    shell = Shell.from_environ()
    install_handlers(shell.signals)
    return repl(shell, prompt_reader(PROMPT))


if __name__ == "__main__":
    sys.exit(main())