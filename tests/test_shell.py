import os

import pytest

from minish.builtins import ShellExit
from minish.environment import Environment
from minish.shell import handle_input, repl
from minish.state import Shell


def _shell():
    return Shell(Environment(os.environ.items()))


def _reader(lines):
    items = iter(lines)
    return lambda: next(items, None)


def test_export_changes_environment():
    shell = _shell()
    handle_input(shell, "export FOO=bar")
    assert shell.env.get("FOO") == "bar"


def test_echo_prints(capsys):
    shell = _shell()
    assert handle_input(shell, "echo hi") == 0
    assert capsys.readouterr().out == "hi\n"


def test_unclosed_quote_keeps_status(capsys):
    shell = _shell()
    shell.last_status = 4
    assert handle_input(shell, 'echo "abc') == 4
    assert "Incorrect quote" in capsys.readouterr().out


def test_trailing_pipe_is_syntax_error(capsys):
    shell = _shell()
    assert handle_input(shell, "echo hi |") == 2
    assert "syntax error near '|'" in capsys.readouterr().out


def test_exit_raises():
    with pytest.raises(ShellExit) as info:
        handle_input(_shell(), "exit 3")
    assert info.value.status == 3


def test_repl_ends_at_eof(capsys):
    assert repl(_shell(), _reader([])) == 0
    assert capsys.readouterr().out == "exit\n"


def test_repl_exit_status():
    assert repl(_shell(), _reader(["exit 7", "echo never"])) == 7


def test_repl_skips_empty_lines_and_keeps_state():
    shell = _shell()
    repl(shell, _reader(["", "export A=1"]))
    assert shell.env.get("A") == "1"


def test_repl_interrupt_sets_status():
    shell = _shell()
    calls = iter(range(2))

    def read():
        if next(calls) == 0:
            shell.signals.handle_interrupt(2, None)
        return None

    assert repl(shell, read) == 130