import os

import pytest

from minish.redirect import (
    RedirectError,
    close_redirections,
    open_input,
    open_output,
    open_redirections,
)
from minish.redirection import RedirKind, Redirection


def test_open_output_truncates(tmp_path):
    path = tmp_path / "out"
    path.write_text("old content")
    with open_output(str(path)) as stream:
        stream.write("new")
    assert path.read_text() == "new"


def test_open_output_appends(tmp_path):
    path = tmp_path / "out"
    path.write_text("a")
    with open_output(str(path), append=True) as stream:
        stream.write("b")
    assert path.read_text() == "ab"


def test_open_output_mode_is_at_most_0644(tmp_path):
    path = tmp_path / "fresh"
    open_output(str(path)).close()
    assert os.stat(path).st_mode & 0o777 & ~0o644 == 0


def test_open_input_reads(tmp_path):
    path = tmp_path / "in"
    path.write_text("data")
    with open_input(str(path)) as stream:
        assert stream.read() == "data"


def test_open_input_missing(tmp_path):
    missing = str(tmp_path / "missing")
    with pytest.raises(RedirectError) as info:
        open_input(missing)
    assert str(info.value) == f"minishell: {missing}: No such file or directory"
    assert info.value.path == missing


def test_open_output_missing_directory(tmp_path):
    target = str(tmp_path / "nodir" / "file")
    with pytest.raises(RedirectError) as info:
        open_output(target)
    assert "No such file or directory" in str(info.value)


def test_open_and_close_redirections(tmp_path):
    source = tmp_path / "in"
    source.write_text("x")
    heredoc = tmp_path / "heredoc0"
    calls = []

    def collect(limit, path):
        calls.append((limit, path))
        with open(path, "w") as handle:
            handle.write("line\n")

    redirections = [
        Redirection(str(source), RedirKind.INPUT),
        Redirection(str(tmp_path / "out"), RedirKind.OUTPUT),
        Redirection(str(tmp_path / "app"), RedirKind.APPEND),
        Redirection(str(heredoc), RedirKind.HEREDOC, "EOF"),
    ]
    open_redirections(redirections, collect)
    assert calls == [("EOF", str(heredoc))]
    assert heredoc.read_text() == "line\n"
    streams = [r.stream for r in redirections[:3]]
    assert all(stream is not None and not stream.closed for stream in streams)
    assert redirections[3].stream is None

    close_redirections(redirections)
    assert all(stream.closed for stream in streams)
    assert all(r.stream is None for r in redirections)
    assert not heredoc.exists()
    assert (tmp_path / "out").exists()


def test_failure_closes_opened_streams(tmp_path):
    first = Redirection(str(tmp_path / "out"), RedirKind.OUTPUT)
    second = Redirection(str(tmp_path / "missing"), RedirKind.INPUT)
    with pytest.raises(RedirectError):
        open_redirections([first, second], lambda limit, path: None)
    assert first.stream is None
    assert second.stream is None


def test_heredoc_collector_error_becomes_redirect_error(tmp_path):
    def collect(limit, path):
        raise FileNotFoundError(2, "No such file or directory", path)

    target = str(tmp_path / "heredoc0")
    with pytest.raises(RedirectError) as info:
        open_redirections([Redirection(target, RedirKind.HEREDOC, "EOF")], collect)
    assert info.value.path == target


def test_close_reports_missing_heredoc(tmp_path, capsys):
    name = str(tmp_path / "heredoc9")
    close_redirections([Redirection(name, RedirKind.HEREDOC, "EOF")])
    err = capsys.readouterr().err
    assert "cannot remove" in err
    assert name in err