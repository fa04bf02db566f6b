# babashell

babashell is a small interactive command shell. It reads one line at a time,
expands variables, splits the line into commands and runs them. Each command
runs either as a builtin or as an external program found on `PATH`.

## Features

- Single and double quotes. If a quote is left open, the shell prints
  `Error: Unmatched quotation mark detected` and skips the line.
- `$NAME` expands to the variable's value. `$?` expands to the last exit status.
  Nothing is expanded inside single quotes. Unknown names expand to nothing.
- Pipelines joined with `|`. Each stage of a pipeline works on its own copy of
  the shell's variables and directory. A builtin such as `cd` or `export` inside
  a pipeline therefore does not change the session. The status of a pipeline is
  the status of its last stage.
- Redirections: `<`, `>`, `>>`, and here-documents with `<<`. If an operator is
  followed by nothing or by another operator, the shell reports a syntax error
  and sets the status to 2.
- Builtins:
  - `echo`, with `-n` as the first argument to leave off the newline.
  - `pwd`.
  - `env`.
  - `cd [dir|~|-]`. This keeps `PWD` and `OLDPWD` up to date.
  - `export [NAME[=value] ...]`. Without arguments it lists the variables.
  - `unset NAME ...`. Names beginning with `_` are kept.
  - `exit [n]`. The status is taken modulo 256.
- An external program that exits because of a signal gives status 130. A command
  that cannot be found gives status 127.
- Ctrl-C abandons the line being typed. Ctrl-D ends the session.
- Error messages go to standard error and are prefixed with `babatunde shell:`.

## Installation

```
pip install .
```

## Usage

To start an interactive session, run:

```
babashell
```

The prompt is `babatunde shell: `. For example:

```
babatunde shell: export GREETING=hello
babatunde shell: echo $GREETING world | cat > out.txt
babatunde shell: cat << END
> some text
> END
babatunde shell: exit 3
```

The command's exit status is the code given to `exit`. When the session ends at
end of input, the exit status is 0. The shell takes no arguments. If you pass
any, it exits at once without reading input.

## Use from Python

A `babashell.shell.Shell` can run lines one at a time without a terminal.
`run_line` returns the exit status of the line:

```python
from babashell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
shell.run_line("export NAME=world")
status = shell.run_line("echo hello $NAME")
```

`Shell.run_line` raises `babashell.builtins.ShellExit` when the line runs `exit`.
The exception's `code` attribute holds the status. `Shell.repl(read_line)` runs
the read-evaluate loop with any function that takes a prompt and returns a line,
or `None` at end of input.

The stages of the shell can also be used on their own:

- `babashell.expand.expand_variables(line, state)`
- `babashell.lexer.tokenize(line)`
- `babashell.parser.parse(tokens)`, which returns a list of `Command`
- `babashell.executor.run_commands(commands, state)`

Here `state` is a `babashell.environment.ShellState`, which holds an
`Environment`, the current directory and the last exit status.

## Limitations

The shell has no command lists with `;`, `&&` or `||`, and no background jobs or
job control. It does no filename globbing and has no backslash escapes. The
history of entered lines is not saved between sessions.

## Running the tests

```
pip install .[test]
pytest
```