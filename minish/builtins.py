"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import string
import sys
from typing import Callable, Sequence, TextIO

from .environment import split_assignment
from .parsed import Command
from .state import Shell

_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_DIGITS = frozenset(string.digits)
_BLANKS = frozenset("\t\n\v\f\r ")


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        self.status = status & 0xFF
        super().__init__(f"exit {self.status}")


def _finish(shell: Shell, status: int) -> int:
    shell.last_status = status
    return status


def _is_n_flag(word: str) -> bool:
    return word.startswith("-") and set(word[1:]) <= {"n"}


def echo(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Print the arguments separated by spaces.

    Leading arguments made of ``-`` and any number of ``n`` suppress the
    newline. No space is written before an empty argument.
    """
    words = list(args[1:])
    if not words:
        out.write("\n")
        return _finish(shell, 0)
    newline = True
    index = 0
    while index < len(words) and _is_n_flag(words[index]):
        newline = False
        index += 1
    pieces: list[str] = []
    for position, word in enumerate(words[index:]):
        if position and word != "":
            pieces.append(" ")
        pieces.append(word)
    if newline:
        pieces.append("\n")
    out.write("".join(pieces))
    return _finish(shell, 0)


def pwd(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Print the current directory."""
    try:
        path = os.getcwd()
    except OSError as error:
        sys.stderr.write(f"pwd: {error.strerror}\n")
        return _finish(shell, 1)
    out.write(f"{path}\n")
    return _finish(shell, 0)


def _update_pwd(shell: Shell) -> None:
    if "PWD" not in shell.env:
        return
    try:
        shell.env.set("PWD", os.getcwd())
    except OSError:
        shell.env.set("PWD", "")


def cd(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Change directory to the argument, or to ``HOME`` without one.

    ``-`` prints the current directory. ``PWD`` is updated when it is set.
    """
    if not args:
        return shell.last_status
    if len(args) > 2:
        return _finish(shell, 1)
    if len(args) == 1:
        target = shell.env.get("HOME")
        if target is None:
            sys.stderr.write("minishell: cd: HOME not set\n")
            return _finish(shell, 1)
    elif args[1] == "-":
        pwd(shell, args, out)
        return _finish(shell, 0)
    else:
        target = args[1]
    try:
        os.chdir(target)
    except OSError as error:
        sys.stderr.write(f"minishell: cd: {target}: {error.strerror}\n")
        return _finish(shell, 1)
    _update_pwd(shell)
    return _finish(shell, 0)


def _export_error(text: str) -> str | None:
    if text[:1] not in _NAME_START:
        return f"\033[31m'{text}': not a valid identifier.\033[0m\n"
    name = text.partition("=")[0]
    if any(char not in _NAME_CHARS for char in name):
        return f"\033[31m'{text}': not a valid identifier\033[0m\n"
    return None


def export(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Assign every ``NAME=value`` argument; arguments without ``=`` are skipped."""
    for arg in args[1:]:
        if "=" not in arg:
            continue
        error = _export_error(arg)
        if error is not None:
            sys.stdout.write(error)
            return _finish(shell, 1)
        name, value = split_assignment(arg)
        shell.env.set(name, value)
    return _finish(shell, 0)


def _valid_unset_name(text: str) -> bool:
    return text[:1] in _NAME_START and all(char in _NAME_CHARS for char in text)


def unset(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Remove the named variables, stopping at the first invalid name."""
    for arg in args[1:]:
        if not _valid_unset_name(arg):
            sys.stdout.write(
                f"\033[31m unset: {arg}: invalid parameter name.\033[0m\n"
            )
            return _finish(shell, 1)
        shell.env.unset(arg)
    return _finish(shell, 0)


def env(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """Print every variable as ``NAME=value``."""
    for line in shell.env.lines():
        out.write(line)
    return _finish(shell, 0)


def parse_exit_status(text: str) -> int:
    """Read the numeric argument of ``exit``.

    Leading blanks and one sign are allowed. Digits followed by anything
    else print an error and give 2; text without digits gives 0.
    """
    index = 0
    while index < len(text) and text[index] in _BLANKS:
        index += 1
    sign = 1
    if index < len(text) and text[index] in "+-":
        sign = -1 if text[index] == "-" else 1
        index += 1
    start = index
    value = 0
    while index < len(text) and text[index] in _DIGITS:
        value = value * 10 + int(text[index])
        index += 1
    if index > start and index < len(text):
        sys.stdout.write(f"{text}: numeric argument required\n")
        return 2
    return sign * value


def exit_builtin(shell: Shell, args: Sequence[str], out: TextIO) -> int:
    """End the shell, with the argument as status when one is given.

    Raises ShellExit. With more than two arguments nothing ends and the
    status becomes 127.
    """
    if len(args) > 3:
        sys.stdout.write("bash: exit: too many arguments\n")
        _finish(shell, 127)
        return 1
    if len(args) == 2:
        shell.last_status = parse_exit_status(args[1])
    raise ShellExit(shell.last_status)


Builtin = Callable[[Shell, Sequence[str], TextIO], int]

_BUILTINS: dict[str, Builtin] = {
    "echo": echo,
    "cd": cd,
    "pwd": pwd,
    "export": export,
    "unset": unset,
    "env": env,
    "exit": exit_builtin,
}


def is_builtin(name: str | None) -> bool:
    """Tell whether ``name`` is run by the shell itself."""
    return name in _BUILTINS


def run_builtin(shell: Shell, command: Command, out: TextIO) -> bool:
    """Run ``command`` if it is a builtin and tell whether it was."""
    if command.name is None:
        return False
    handler = _BUILTINS.get(command.name)
    if handler is None:
        return False
    handler(shell, command.args, out)
    return True