"""The interactive read-evaluate loop of the shell."""

import os
import sys
from contextlib import contextmanager

from minish.environment import Environment
from minish.errors import ShellExit, ShellSyntaxError
from minish.executor import Executor
from minish.lexer import only_spaces, parse

PROMPT = "minishell$ "


class Shell:
    """Shell state: environment, last exit status and output stream."""

    def __init__(self, environ=None, stdout=None):
        self.env = Environment.inherit(os.environ if environ is None else environ)
        self.stdout = stdout if stdout is not None else sys.stdout
        self.exit_status = 0
        self.executor = Executor(self.env, self.stdout)

    def process_line(self, line):
        """Parse and run one line; return its status. ShellExit propagates."""
        if not line or only_spaces(line):
            return self.exit_status
        try:
            tokens = parse(line, self.env, self.exit_status)
        except ShellSyntaxError as error:
            print(error.message, file=sys.stderr)
            self.exit_status = error.status
            return self.exit_status
        self.exit_status = self.executor.run(tokens, self.exit_status)
        return self.exit_status

    def run(self, read_line):
        """Read lines with ``read_line`` until end of input or ``exit``.

        ``read_line`` takes a prompt and returns a line, or None at end of
        input. Returns the final exit status.
        """
        self.executor.read_line = read_line
        while True:
            line = read_line(PROMPT)
            if line is None:
                print("exit", file=self.stdout)
                return self.exit_status
            try:
                self.process_line(line)
            except ShellExit as request:
                self.exit_status = request.status
                return self.exit_status


@contextmanager
def _quiet_control_characters():
    """Stop the terminal from echoing ``^C`` while a line is read."""
    try:
        import termios
    except ImportError:
        yield
        return
    try:
        fd = sys.stdin.fileno()
        original = termios.tcgetattr(fd) if os.isatty(fd) else None
    except (AttributeError, OSError, ValueError, termios.error):
        original = None
    if original is None:
        yield
        return
    quiet = list(original)
    quiet[3] &= ~getattr(termios, "ECHOCTL", 0)
    termios.tcsetattr(fd, termios.TCSANOW, quiet)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, original)


def _set_quit_handler(handler):
    import signal

    if not hasattr(signal, "SIGQUIT"):
        return None
    return signal.signal(signal.SIGQUIT, handler)


def _read_input(prompt):
    import signal

    previous = _set_quit_handler(signal.SIG_IGN)
    try:
        with _quiet_control_characters():
            return input(prompt)
    except EOFError:
        return None
    except KeyboardInterrupt:
        print()
        return ""
    finally:
        if previous is not None:
            _set_quit_handler(previous)


def main(argv=None):
    """Run the interactive shell; return its exit status."""
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    return Shell().run(_read_input)


if __name__ == "__main__":
    sys.exit(main())