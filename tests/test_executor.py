import io
import os
import signal
import stat
import sys

import pytest

from minish.builtins import ShellExit
from minish.environment import Environment
from minish.executor import find_executable, input_for, output_for, pipe_count, run_line
from minish.parsed import Command, ParsedLine
from minish.redirection import RedirKind, Redirection
from minish.state import Shell

UPPER = "import sys; sys.stdout.write(sys.stdin.read().upper())"


def _shell():
    return Shell(Environment(os.environ.items()))


def test_find_executable_in_path(tmp_path):
    program = tmp_path / "tool"
    program.write_text("#!/bin/sh\n")
    program.chmod(program.stat().st_mode | stat.S_IXUSR)
    found = find_executable("tool", f"/nonexistent:{tmp_path}")
    assert found == f"{tmp_path}/tool"


def test_find_executable_falls_back_to_name(tmp_path):
    assert find_executable("tool", str(tmp_path)) == "tool"
    assert find_executable("tool", None) == "tool"


def test_pipe_count_and_redirection_lookup(tmp_path):
    out = Redirection("out", RedirKind.OUTPUT)
    inp = Redirection("in", RedirKind.INPUT)
    line = ParsedLine(
        line=["0", "!in", "|", "1", "!out"],
        commands=[Command(["a"]), Command(["b"])],
        redirections=[inp, out],
    )
    assert pipe_count(line) == 1
    assert input_for(line, 0) is inp
    assert output_for(line, 0) is None
    assert output_for(line, 1) is out
    assert input_for(line, 1) is None


def test_single_builtin_writes_to_redirection(tmp_path):
    target = tmp_path / "out.txt"
    line = ParsedLine(
        line=["0", "!" + str(target)],
        commands=[Command(["echo", "hello"])],
        redirections=[Redirection(str(target), RedirKind.OUTPUT)],
    )
    shell = _shell()
    assert run_line(shell, line) == 0
    assert target.read_text() == "hello\n"


def test_builtin_piped_into_program(tmp_path):
    target = tmp_path / "out.txt"
    line = ParsedLine(
        line=["0", "|", "1", "!" + str(target)],
        commands=[Command(["echo", "hello"]), Command([sys.executable, "-c", UPPER])],
        redirections=[Redirection(str(target), RedirKind.OUTPUT)],
    )
    run_line(_shell(), line)
    assert target.read_text() == "HELLO\n"


def test_input_redirection(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("abc\n")
    target = tmp_path / "out.txt"
    line = ParsedLine(
        line=["0", "!" + str(source), "!" + str(target)],
        commands=[Command([sys.executable, "-c", UPPER])],
        redirections=[
            Redirection(str(source), RedirKind.INPUT),
            Redirection(str(target), RedirKind.OUTPUT),
        ],
    )
    run_line(_shell(), line)
    assert target.read_text() == "ABC\n"


def test_heredoc_feeds_program_and_is_removed(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("line one\nEND\n"))
    doc = tmp_path / "heredoc0"
    target = tmp_path / "out.txt"
    line = ParsedLine(
        line=["0", "!" + str(doc), "!" + str(target)],
        commands=[Command([sys.executable, "-c", UPPER])],
        redirections=[
            Redirection(str(doc), RedirKind.HEREDOC, "END"),
            Redirection(str(target), RedirKind.OUTPUT),
        ],
    )
    run_line(_shell(), line)
    assert target.read_text() == "LINE ONE\n"
    assert not doc.exists()


def test_missing_command_gives_127(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    line = ParsedLine(line=["0"], commands=[Command(["no-such-command-here"])])
    assert run_line(_shell(), line) == 127
    assert "Command 'no-such-command-here' not found" in capsys.readouterr().err


def test_killed_child_status():
    code = "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"
    line = ParsedLine(line=["0"], commands=[Command([sys.executable, "-c", code])])
    assert run_line(_shell(), line) == 128 + signal.SIGTERM


def test_normal_exit_keeps_previous_status():
    shell = _shell()
    shell.last_status = 5
    line = ParsedLine(line=["0"], commands=[Command([sys.executable, "-c", "pass"])])
    assert run_line(shell, line) == 5


def test_missing_input_file_is_reported(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    line = ParsedLine(
        line=["0", "!" + missing],
        commands=[Command(["echo", "x"])],
        redirections=[Redirection(missing, RedirKind.INPUT)],
    )
    shell = _shell()
    shell.last_status = 3
    assert run_line(shell, line) == 3
    assert "No such file or directory" in capsys.readouterr().out


def test_lone_exit_raises():
    line = ParsedLine(line=["0"], commands=[Command(["exit", "4"])])
    with pytest.raises(ShellExit) as info:
        run_line(_shell(), line)
    assert info.value.status == 4


def test_builtin_in_pipeline_does_not_change_shell(tmp_path):
    target = tmp_path / "out.txt"
    line = ParsedLine(
        line=["0", "|", "1", "!" + str(target)],
        commands=[
            Command(["export", "ZZ_PIPE=1"]),
            Command([sys.executable, "-c", UPPER]),
        ],
        redirections=[Redirection(str(target), RedirKind.OUTPUT)],
    )
    shell = _shell()
    run_line(shell, line)
    assert "ZZ_PIPE" not in shell.env
    assert target.read_text() == ""