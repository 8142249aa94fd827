"""Running typed command lines: lone builtins in the shell, pipelines as processes."""

import io
import subprocess
import sys
import threading
from dataclasses import dataclass

from minish.builtins import is_builtin, run_builtin
from minish.environment import Environment
from minish.errors import CommandNotFoundError, NoSuchFileError, ShellExit
from minish.lexer import TokenType
from minish.pathsearch import resolve_command
from minish.pipeline import (
    build_command,
    build_pipeline,
    prepare_files,
    read_heredoc,
)

_SIGINT = 2
_SIGQUIT = 3


def has_pipe(tokens):
    """Tell whether the line holds a pipe operator."""
    return any(token.type is TokenType.PIPE for token in tokens)


def is_single_builtin(tokens):
    """Tell whether the line is one builtin command without pipes."""
    if has_pipe(tokens):
        return False
    command = next((t for t in tokens if t.type is TokenType.COMMAND), None)
    return command is not None and is_builtin(command.content)


def _prompt_line(prompt):
    try:
        return input(prompt)
    except EOFError:
        return None


def _report(error):
    print(error.message, file=sys.stderr)


def _close(upstream):
    if upstream is not None and not isinstance(upstream, bytes):
        upstream.close()


def _open_output(command, binary):
    path = command.output_file
    if path is None:
        return None
    mode = ("a" if command.append else "w") + ("b" if binary else "")
    return open(path, mode)


def _feed(pipe, data):
    try:
        pipe.write(data)
    except OSError:
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


def _wait(process):
    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            continue


@dataclass
class _Stage:
    """What one command of a pipeline left behind."""

    status: int = 0
    process: subprocess.Popen | None = None
    output: object = None
    capture: bool = False
    feeder: threading.Thread | None = None


class Executor:
    """Runs parsed lines against an environment and an output stream."""

    def __init__(self, env, stdout=None, read_line=None):
        self.env = env
        self.stdout = stdout if stdout is not None else sys.stdout
        self.read_line = read_line if read_line is not None else _prompt_line
        self.exit_status = 0

    def run(self, tokens, exit_status=0):
        """Run one typed line and return its status.

        ShellExit propagates; an ``exit`` without argument keeps ``exit_status``.
        """
        self.exit_status = exit_status
        try:
            if is_single_builtin(tokens):
                return self.run_builtin_line(tokens)
            return self.run_pipeline(tokens)
        except ShellExit as request:
            if request.status is None:
                raise ShellExit(exit_status) from None
            raise

    def run_builtin_line(self, tokens):
        """Run a lone builtin inside the shell, so its effects persist."""
        command = build_command(tokens)
        try:
            prepare_files(command)
        except NoSuchFileError as error:
            _report(error)
            return error.status
        if command.heredoc is not None:
            read_heredoc(command.heredoc, self.read_line)
        try:
            sink = _open_output(command, binary=False)
        except OSError:
            return 1
        try:
            return run_builtin(
                command.args,
                self.env,
                sink if sink is not None else self.stdout,
                interactive=True,
            )
        finally:
            if sink is not None:
                sink.close()

    def run_pipeline(self, tokens):
        """Run every command of the line, connected by pipes; return the last status."""
        commands = build_pipeline(tokens)
        heredocs = [
            read_heredoc(c.heredoc, self.read_line) if c.heredoc is not None else None
            for c in commands
        ]
        stages = []
        upstream = None
        last_index = len(commands) - 1
        for index, (command, heredoc) in enumerate(zip(commands, heredocs)):
            stage = self._run_stage(command, heredoc, upstream, index == last_index)
            stages.append(stage)
            upstream = stage.output
        last = stages[-1]
        if last.capture:
            data = last.output.read()
            last.output.close()
            self.stdout.write(data.decode(errors="replace"))
        codes = []
        for stage in stages:
            codes.append(_wait(stage.process) if stage.process is not None else None)
            if stage.feeder is not None:
                stage.feeder.join()
        if last.process is None:
            return last.status
        return self._status_of(codes[-1])

    def _status_of(self, code):
        if code >= 0:
            return code
        signal_number = -code
        if signal_number == _SIGINT:
            return 130
        if signal_number == _SIGQUIT:
            print("Quit: 3", file=self.stdout)
            return 131
        return 128 + signal_number

    def _run_stage(self, command, heredoc, upstream, last):
        try:
            prepare_files(command)
        except NoSuchFileError as error:
            _report(error)
            _close(upstream)
            return _Stage(status=error.status, output=b"")
        if not command.args:
            _close(upstream)
            try:
                sink = _open_output(command, binary=True)
            except OSError:
                return _Stage(status=1, output=b"")
            if sink is not None:
                sink.close()
            return _Stage(output=b"")
        if is_builtin(command.args[0]):
            _close(upstream)
            return self._builtin_stage(command, last)
        return self._process_stage(command, heredoc, upstream, last)

    def _builtin_stage(self, command, last):
        env = Environment(self.env.entries())
        try:
            sink = _open_output(command, binary=False)
        except OSError:
            return _Stage(status=1, output=b"")
        buffer = io.StringIO()
        if sink is not None:
            out = sink
        elif last:
            out = self.stdout
        else:
            out = buffer
        try:
            status = run_builtin(command.args, env, out)
        except ShellExit as request:
            status = self.exit_status if request.status is None else request.status
        finally:
            if sink is not None:
                sink.close()
        return _Stage(status=status, output=buffer.getvalue().encode())

    def _program(self, name):
        resolved = resolve_command(name, self.env)
        if resolved[:1] not in ("/", "."):
            raise CommandNotFoundError(resolved)
        return resolved

    def _process_env(self):
        return dict(entry.partition("=")[::2] for entry in self.env.entries())

    def _stdout_fd(self):
        try:
            fd = self.stdout.fileno()
        except (AttributeError, OSError, ValueError):
            return None
        self.stdout.flush()
        return fd

    def _process_stage(self, command, heredoc, upstream, last):
        try:
            program = self._program(command.args[0])
        except CommandNotFoundError as error:
            _report(error)
            _close(upstream)
            return _Stage(status=error.status, output=b"")
        opened = []
        feed = None
        capture = False
        try:
            if command.input_file is not None:
                _close(upstream)
                upstream = None
                try:
                    stdin = open(command.input_file, "rb")
                except OSError:
                    error = NoSuchFileError(command.input_file)
                    _report(error)
                    return _Stage(status=error.status, output=b"")
                opened.append(stdin)
            elif isinstance(upstream, bytes):
                stdin, feed = subprocess.PIPE, upstream
            elif upstream is not None:
                stdin = upstream
            elif heredoc is not None:
                stdin, feed = subprocess.PIPE, heredoc.encode()
            else:
                stdin = None
            try:
                sink = _open_output(command, binary=True)
            except OSError:
                return _Stage(status=1, output=b"")
            if sink is not None:
                opened.append(sink)
                stdout = sink
            elif not last:
                stdout = subprocess.PIPE
            else:
                stdout = self._stdout_fd()
                if stdout is None:
                    stdout, capture = subprocess.PIPE, True
            try:
                process = subprocess.Popen(
                    [program, *command.args[1:]],
                    stdin=stdin,
                    stdout=stdout,
                    env=self._process_env(),
                )
            except OSError:
                error = CommandNotFoundError(program)
                _report(error)
                return _Stage(status=error.status, output=b"")
        finally:
            for handle in opened:
                handle.close()
            _close(upstream)
        feeder = None
        if feed is not None:
            feeder = threading.Thread(
                target=_feed, args=(process.stdin, feed), daemon=True
            )
            feeder.start()
        output = process.stdout if stdout is subprocess.PIPE else b""
        return _Stage(process=process, output=output, capture=capture, feeder=feeder)