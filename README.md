# minish

`minish` is a small interactive shell. It reads a line and splits it into
words and operators. It then expands variables and runs the line. A line
can be a single command or several commands joined into a pipeline.

## Features

- Single and double quotes. Inside single quotes, `$` is taken literally.
- Variable expansion of `$NAME` and of `$?`, the status of the last command.
- Pipelines with `|`.
- Redirections with `<`, `>` and `>>`, and here-documents with `<<`.
  When several output files are given, each one is created, but only the
  last one receives the output.
- Builtins: `echo` (with `-n`), `cd`, `pwd`, `env`, `export`, `unset` and
  `exit`.
- Any other command is looked up in the directories listed in `PATH`.
- `SHLVL` is raised by one when the shell starts.

Error messages have the form `-minishell: ...`. The exit statuses follow
usual shell practice:

| Status | Cause |
|---|---|
| 127 | Command not found |
| 258 | Syntax error |
| 255 | Non-numeric argument to `exit` |
| 1 | Too many arguments to `exit` |
| 130 or 131 | A child was stopped by SIGINT or SIGQUIT |

## Installation

```
pip install .
```

## Usage

Start the interactive shell:

```
minish
```

The shell can also be started with `python -m minish.shell`.

A short session:

```
minishell$ export GREETING=hello
minishell$ echo $GREETING world | cat > out.txt
minishell$ cat < out.txt
hello world
minishell$ exit 3
exit
```

- Ctrl-D at the prompt prints `exit` and leaves the shell with the status of the last command.
- Ctrl-C drops the current line and shows a new prompt.
- If the `readline` module is available, lines can be edited and history is kept.

## Use from Python

```python
from minish.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = shell.process_line("echo hi")
```

- `Shell.process_line` runs one line and returns its status. If the line calls `exit`, it raises `minish.errors.ShellExit`.
- `Shell.run(read_line)` reads lines until end of input or `exit`, and returns the final exit status. `read_line` takes a prompt and returns a line, or `None` at end of input.

## Limitations

- A builtin inside a pipeline runs on a copy of the environment. So `export`, `unset` and `cd` change the shell only when they are the whole line.
- There is no `;`, `&&`, `||`, no globbing, no subshells and no job control.

## Tests

```
pip install .[test]
pytest
```