# minish

minish is a small interactive shell. It reads a line, expands variables,
splits it into commands joined by pipes, sets up file redirections and
here-documents, and then runs builtins in the shell itself or starts
external programs found on `PATH`.

## Installing

```
pip install .
```

## Running

```
minish
```

or, without installing the script:

```
python -m minish.shell
```

The prompt is `Input : `. Ctrl-D at the prompt prints `exit` and leaves
the shell. Ctrl-C abandons the line being typed and sets the last status
to 130. Ctrl-\ is ignored.

## What it understands

- Words separated by spaces, with single and double quotes. An unclosed
  quote is reported as `Incorrect quote` and the line is not run.
- `$NAME` expands to a variable of the shell's environment and `$?` to
  the last status. Nothing is expanded inside single quotes.
- Pipes: `cmd1 | cmd2 | cmd3`. A line that starts or ends with a pipe,
  or holds two pipes in a row, is a syntax error and sets the status to 2.
- Redirections: `< file`, `> file`, `>> file`, and here-documents
  `<< DELIM`, which prompt with `heredoc> ` until the delimiter line.
  Here-document text is kept in temporary files named `heredoc0`,
  `heredoc1`, … in the current directory and removed once the line has run.
- Builtins: `echo` (with `-n`), `cd` (no argument goes to `HOME`),
  `pwd`, `export NAME=value`, `unset NAME`, `env` and `exit [status]`.
  A builtin that is the only command of a line runs in the shell itself,
  so `cd`, `export`, `unset` and `exit` take effect there; inside a
  pipeline a builtin works on a copy of the environment.

## Using it from Python

The parser and executor can be used without the prompt:

```python
from minish.state import Shell
from minish.shell import handle_input

shell = Shell.from_environ({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = handle_input(shell, "echo hello | cat")
```

- `minish.parser.parse_line(text, env, last_status, namer)` turns a line
  of text into a `minish.parsed.ParsedLine` holding its layout, its
  `Command` objects and its `Redirection` records. It raises
  `minish.words.QuoteError` or `minish.scanner.ParseError` on bad input.
- `minish.executor.run_line(shell, line)` runs a parsed line and returns
  the new status; `minish.builtins.ShellExit` is raised when `exit` ends
  the shell.
- `minish.shell.repl(shell, read_line)` runs the loop with any callable
  that returns a line, or None at end of input.
- `minish.environment.Environment` keeps variables in the order they
  were defined.

## What it does not do

There is no `;`, `&&` or `||`, no wildcard expansion, no background jobs
or job control, no subshells, and no history kept between sessions.