"""Commands the shell runs itself: echo, cd, pwd, env, export, unset, exit."""

import os
import sys

from minish.environment import atoi
from minish.errors import (
    CommandNotFoundError,
    NumericArgumentError,
    ShellExit,
    TooManyArgumentsError,
)

BUILTINS = frozenset({"echo", "cd", "pwd", "env", "export", "unset", "exit"})


def is_builtin(name):
    """Tell whether ``name`` is run by the shell itself."""
    return name in BUILTINS


def is_n_flag(argument):
    """Tell whether ``argument`` is an ``-n``, ``-nn``... option of echo."""
    return len(argument) > 1 and argument[0] == "-" and set(argument[1:]) == {"n"}


def echo(args, out):
    """Write the arguments separated by spaces; ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    while words and is_n_flag(words[0]):
        words.pop(0)
        newline = False
    out.write(" ".join(words) + ("\n" if newline else ""))
    return 0


def _cwd():
    try:
        return os.getcwd()
    except OSError:
        return None


def pwd(out):
    """Write the current directory."""
    cwd = _cwd()
    if cwd is not None:
        print(cwd, file=out)
    return 0


def cd(args, env, out):
    """Change directory, keeping ``OLDPWD`` and ``PWD`` up to date."""
    cwd = _cwd()
    if cwd is not None:
        env.replace_value("OLDPWD", cwd)
    if len(args) < 2:
        try:
            home = env["HOME"]
        except KeyError:
            print("-minishell: cd: HOME not set", file=out)
            return 1
        try:
            os.chdir(home)
        except OSError:
            pass
    else:
        try:
            os.chdir(args[1])
        except OSError:
            print(f"-minishell: cd: {args[1]}: No such file or directory", file=out)
            return 1
    cwd = _cwd()
    if cwd is not None:
        env.replace_value("PWD", cwd)
    return 0


def is_numeric(text):
    """Tell whether ``text`` is an optionally signed run of digits."""
    digits = text[1:] if text[:1] in ("+", "-") else text
    return bool(digits) and all(char in "0123456789" for char in digits)


def exit_builtin(args, interactive, out):
    """Leave the shell by raising ShellExit.

    A status of None means the last command's status is kept.
    """
    if interactive:
        print("exit", file=out)
    if len(args) < 2:
        raise ShellExit(None)
    argument = args[1]
    if not is_numeric(argument):
        error = NumericArgumentError(argument)
        print(error.message, file=sys.stderr)
        raise ShellExit(error.status)
    if len(args) > 2:
        error = TooManyArgumentsError("exit")
        print(error.message, file=sys.stderr)
        raise ShellExit(error.status)
    raise ShellExit(atoi(argument) % 256)


def run_builtin(args, env, out, interactive=False):
    """Run the builtin named by ``args[0]`` and return its status."""
    name = args[0] if args else ""
    if name == "echo":
        return echo(args, out)
    if name == "cd":
        return cd(args, env, out)
    if name == "pwd":
        return pwd(out)
    if name == "env":
        return env.print(out)
    if name == "export":
        return env.export(args[1:], sys.stderr)
    if name == "unset":
        return env.unset(args[1:], sys.stderr)
    if name == "exit":
        exit_builtin(args, interactive, out)
    raise CommandNotFoundError(name)