"""Running a parsed line: builtins in the shell, programs as children."""

from __future__ import annotations

import io
import os
import string
import subprocess
import sys
import threading
from typing import IO, Any, Iterable

from .builtins import ShellExit, is_builtin, run_builtin
from .environment import Environment
from .heredoc import collect_heredoc, prompt_reader
from .parsed import Command, ParsedLine
from .redirect import RedirectError, close_redirections, open_input, open_redirections
from .redirection import RedirKind, Redirection
from .state import Shell
from .status import NOT_FOUND_STATUS, status_from_returncode

HEREDOC_PROMPT = "heredoc> "
_OUTPUT_KINDS = (RedirKind.OUTPUT, RedirKind.APPEND)
_INPUT_KINDS = (RedirKind.INPUT, RedirKind.HEREDOC)


def find_executable(name: str, path: str | None) -> str:
    """Look ``name`` up in the directories of ``path``.

    Returns the first executable candidate, or ``name`` itself when none
    is found or no search path is set.
    """
    if path is None:
        return name
    for directory in path.split(":"):
        if not directory:
            continue
        candidate = f"{directory}/{name}"
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return name


def pipe_count(line: ParsedLine) -> int:
    """Return the number of pipes in the line."""
    return sum(1 for entry in line.line if entry == "|")


def _stage(line: ParsedLine, index: int) -> list[str]:
    stages: list[list[str]] = [[]]
    for entry in line.line:
        if entry == "|":
            stages.append([])
        else:
            stages[-1].append(entry)
    return stages[index] if 0 <= index < len(stages) else []


def _find(
    redirections: Iterable[Redirection], name: str, kinds: tuple[RedirKind, ...]
) -> Redirection | None:
    for redirection in redirections:
        if redirection.name == name and redirection.kind in kinds:
            return redirection
    return None


def _redirection_for(
    line: ParsedLine, index: int, kinds: tuple[RedirKind, ...]
) -> Redirection | None:
    found = None
    for entry in _stage(line, index):
        if entry.startswith("!"):
            match = _find(line.redirections, entry[1:], kinds)
            if match is not None:
                found = match
    return found


def output_for(line: ParsedLine, index: int) -> Redirection | None:
    """Return the last output redirection of pipeline stage ``index``."""
    return _redirection_for(line, index, _OUTPUT_KINDS)


def input_for(line: ParsedLine, index: int) -> Redirection | None:
    """Return the last input or heredoc redirection of stage ``index``."""
    return _redirection_for(line, index, _INPUT_KINDS)


def _stage_command(line: ParsedLine, index: int) -> Command | None:
    for entry in _stage(line, index):
        if entry[:1] and entry[:1] in string.digits:
            position = int(entry)
            if position < len(line.commands):
                command = line.commands[position]
                return command if command.name else None
    return None


def _discard(feed: Any) -> None:
    if hasattr(feed, "close"):
        feed.close()


def _collect(limit: str, path: str) -> str:
    return collect_heredoc(limit, path, prompt_reader(HEREDOC_PROMPT))


def _run_child_builtin(shell: Shell, command: Command) -> str:
    child = Shell(Environment(shell.env), shell.signals)
    child.last_status = shell.last_status
    buffer = io.StringIO()
    try:
        run_builtin(child, command, buffer)
    except ShellExit:
        pass
    return buffer.getvalue()


def _write_in_background(stream: IO[bytes], data: bytes) -> threading.Thread:
    def feed() -> None:
        try:
            stream.write(data)
        except BrokenPipeError:
            pass
        finally:
            try:
                stream.close()
            except BrokenPipeError:
                pass

    thread = threading.Thread(target=feed, daemon=True)
    thread.start()
    return thread


def _run_pipeline(shell: Shell, line: ParsedLine, stages: int) -> None:
    feed: Any = None
    processes: list[subprocess.Popen[bytes]] = []
    writers: list[threading.Thread] = []
    last: subprocess.Popen[bytes] | int | None = None
    sys.stdout.flush()
    for index in range(stages):
        is_last = index == stages - 1
        command = _stage_command(line, index)
        source = input_for(line, index)
        if source is not None:
            _discard(feed)
            feed = source.stream if source.stream is not None else open_input(source.name)
        target = output_for(line, index)
        out_stream = target.stream if target is not None else None
        last = None
        if command is None:
            _discard(feed)
            feed = b""
            continue
        if is_builtin(command.name):
            text = _run_child_builtin(shell, command)
            _discard(feed)
            feed = b""
            if out_stream is not None:
                out_stream.write(text)
                out_stream.flush()
            elif is_last:
                sys.stdout.write(text)
                sys.stdout.flush()
            else:
                feed = text.encode()
            continue
        if out_stream is not None:
            out_stream.flush()
            stdout: Any = out_stream
        else:
            stdout = None if is_last else subprocess.PIPE
        stdin: Any = subprocess.PIPE if isinstance(feed, bytes) else feed
        executable = find_executable(command.name or "", shell.env.get("PATH"))
        if os.sep not in executable:
            executable = os.path.join(".", executable)
        try:
            process = subprocess.Popen(
                command.args,
                executable=executable,
                stdin=stdin,
                stdout=stdout,
                env=dict(shell.env),
            )
        except OSError:
            sys.stderr.write(f"minishell: Command '{command.name}' not found\n")
            _discard(feed)
            feed = b""
            last = NOT_FOUND_STATUS
            continue
        if isinstance(feed, bytes):
            assert process.stdin is not None
            writers.append(_write_in_background(process.stdin, feed))
        else:
            _discard(feed)
        processes.append(process)
        last = process
        if stdout is subprocess.PIPE:
            feed = process.stdout
        else:
            feed = b"" if out_stream is not None else None
    _discard(feed)
    for writer in writers:
        writer.join()
    for process in processes:
        process.wait()
    if isinstance(last, subprocess.Popen):
        shell.last_status = status_from_returncode(last.returncode, shell.last_status)
    elif isinstance(last, int):
        shell.last_status = last


def run_line(shell: Shell, line: ParsedLine) -> int:
    """Run a parsed line and return the shell's new status.

    A lone builtin runs in the shell itself; anything else runs as a
    pipeline of child processes. Heredocs are read from the terminal, and
    every redirection file is closed and every heredoc file removed at
    the end. Raises ShellExit when a lone ``exit`` ends the shell.
    """
    try:
        open_redirections(line.redirections, _collect)
    except RedirectError as error:
        sys.stdout.write(f"{error}\n")
        return shell.last_status
    try:
        count = pipe_count(line)
        command = _stage_command(line, 0)
        if count == 0 and command is not None and is_builtin(command.name):
            target = output_for(line, 0)
            out = target.stream if target is not None and target.stream else sys.stdout
            try:
                run_builtin(shell, command, out)
            finally:
                out.flush()
            return shell.last_status
        _run_pipeline(shell, line, count + 1)
    finally:
        close_redirections(line.redirections)
    return shell.last_status