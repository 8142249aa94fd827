import io
import os

import pytest

from minish.builtins import (
    cd,
    echo,
    exit_builtin,
    is_builtin,
    is_n_flag,
    is_numeric,
    pwd,
    run_builtin,
)
from minish.environment import Environment
from minish.errors import CommandNotFoundError, ShellExit


def _echo(*words):
    out = io.StringIO()
    status = echo(["echo", *words], out)
    return status, out.getvalue()


@pytest.mark.parametrize("name", ["echo", "cd", "pwd", "env", "export", "unset", "exit"])
def test_known_builtins(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "Echo", "", "exit2"])
def test_not_builtins(name):
    assert is_builtin(name) is False


@pytest.mark.parametrize("argument,expected", [
    ("-n", True), ("-nnn", True), ("-", False), ("-na", False), ("n", False), ("", False),
])
def test_is_n_flag(argument, expected):
    assert is_n_flag(argument) is expected


def test_echo_without_arguments_prints_newline():
    assert _echo() == (0, "\n")


def test_echo_joins_words():
    assert _echo("hello", "world") == (0, "hello world\n")


def test_echo_n_flags_drop_newline():
    assert _echo("-n", "-nn", "a", "-n") == (0, "a -n")


def test_echo_only_flag_prints_nothing():
    assert _echo("-n") == (0, "")


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert pwd(out) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_cd_updates_pwd_and_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    target = tmp_path / "sub"
    target.mkdir()
    env = Environment(["PWD=x", "OLDPWD=y"])
    out = io.StringIO()
    assert cd(["cd", "sub"], env, out) == 0
    assert env["OLDPWD"] == start
    assert env["PWD"] == os.getcwd()
    assert os.path.samefile(os.getcwd(), target)
    assert out.getvalue() == ""


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    env = Environment(["PWD=" + start])
    out = io.StringIO()
    assert cd(["cd", "nowhere"], env, out) == 1
    assert out.getvalue() == "-minishell: cd: nowhere: No such file or directory\n"
    assert os.getcwd() == start


def test_cd_without_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert cd(["cd"], Environment([]), out) == 1
    assert out.getvalue() == "-minishell: cd: HOME not set\n"


def test_cd_goes_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment([f"HOME={home}", "PWD=x"])
    assert cd(["cd"], env, io.StringIO()) == 0
    assert os.path.samefile(os.getcwd(), home)
    assert env["PWD"] == os.getcwd()


@pytest.mark.parametrize("text,expected", [
    ("42", True), ("-1", True), ("+0", True), ("", False), ("+", False), ("4a", False),
])
def test_is_numeric(text, expected):
    assert is_numeric(text) is expected


def test_exit_with_number():
    with pytest.raises(ShellExit) as caught:
        exit_builtin(["exit", "42"], False, io.StringIO())
    assert caught.value.status == 42


def test_exit_interactive_prints_exit():
    out = io.StringIO()
    with pytest.raises(ShellExit) as caught:
        exit_builtin(["exit"], True, out)
    assert out.getvalue() == "exit\n"
    assert caught.value.status is None


def test_exit_non_numeric(capsys):
    with pytest.raises(ShellExit) as caught:
        exit_builtin(["exit", "abc", "1"], False, io.StringIO())
    assert caught.value.status == 255
    assert capsys.readouterr().err == "-minishell: exit: abc: numeric argument required\n"


def test_exit_too_many_arguments(capsys):
    with pytest.raises(ShellExit) as caught:
        exit_builtin(["exit", "1", "2"], False, io.StringIO())
    assert caught.value.status == 1
    assert capsys.readouterr().err == "-minishell: exit: too many arguments\n"


def test_run_builtin_dispatches_env_and_export():
    env = Environment(["A=1"])
    out = io.StringIO()
    assert run_builtin(["export", "B=2"], env, out) == 0
    assert run_builtin(["env"], env, out) == 0
    assert out.getvalue() == "A=1\nB=2\n"


def test_run_builtin_unset_error_goes_to_stderr(capsys):
    env = Environment(["A=1"])
    out = io.StringIO()
    assert run_builtin(["unset", "9"], env, out) == 1
    assert out.getvalue() == ""
    assert "`9'" in capsys.readouterr().err


def test_run_builtin_echo():
    out = io.StringIO()
    assert run_builtin(["echo", "hi"], Environment([]), out) == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_exit_raises():
    with pytest.raises(ShellExit) as caught:
        run_builtin(["exit", "7"], Environment([]), io.StringIO(), interactive=False)
    assert caught.value.status == 7


def test_run_builtin_unknown_raises():
    with pytest.raises(CommandNotFoundError) as caught:
        run_builtin(["ls"], Environment([]), io.StringIO())
    assert caught.value.status == 127