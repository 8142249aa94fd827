import io
import os

from minish.errors import CommandNotFoundError, ShellSyntaxError
from minish.shell import PROMPT, Shell, main


def reader(lines):
    feed = iter(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        return next(feed, None)

    return read_line, prompts


def make_shell(environ=None):
    out = io.StringIO()
    env = dict(os.environ) if environ is None else environ
    return Shell(env, out), out


def test_shlvl_is_raised():
    shell, _ = make_shell({"SHLVL": "1"})
    assert shell.env["SHLVL"] == "2"


def test_process_line_echo():
    shell, out = make_shell()
    assert shell.process_line("echo hello") == 0
    assert out.getvalue() == "hello\n"


def test_syntax_error_sets_status(capsys):
    shell, out = make_shell()
    assert shell.process_line("echo |") == 258
    assert ShellSyntaxError("|").message in capsys.readouterr().err
    assert out.getvalue() == ""


def test_status_expansion_after_error():
    shell, out = make_shell()
    shell.process_line("echo |")
    shell.process_line("echo $?")
    assert out.getvalue() == "258\n"


def test_blank_line_keeps_status():
    shell, out = make_shell()
    shell.exit_status = 9
    assert shell.process_line("   \t") == 9
    assert out.getvalue() == ""


def test_run_until_end_of_input():
    shell, out = make_shell()
    read_line, prompts = reader(["echo a"])
    assert shell.run(read_line) == 0
    assert out.getvalue() == "a\nexit\n"
    assert prompts == [PROMPT, PROMPT]


def test_run_exit_builtin():
    shell, out = make_shell()
    read_line, _ = reader(["exit 3", "echo never"])
    assert shell.run(read_line) == 3
    assert out.getvalue() == "exit\n"


def test_exported_variable_is_expanded():
    shell, out = make_shell({})
    read_line, _ = reader(["export A=b", "echo $A"])
    shell.run(read_line)
    assert out.getvalue() == "b\nexit\n"


def test_exit_keeps_last_status(capsys):
    shell, _ = make_shell()
    read_line, _ = reader(["no_such_command_zz", "exit"])
    assert shell.run(read_line) == 127
    assert CommandNotFoundError("no_such_command_zz").message in capsys.readouterr().err


def test_cd_updates_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    environ = {"PWD": str(tmp_path), "OLDPWD": "placeholder"}
    shell, _ = make_shell(environ)
    assert shell.process_line(f"cd {target}") == 0
    assert shell.env["PWD"] == os.getcwd()
    assert shell.env["OLDPWD"] == str(tmp_path)


def test_main_reads_from_input(monkeypatch, capsys):
    feed = iter(["echo hi"])

    def fake_input(prompt):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    assert main([]) == 0
    assert capsys.readouterr().out == "hi\nexit\n"