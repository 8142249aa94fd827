"""Exceptions raised by the shell, each carrying its message and exit status."""


class ShellError(Exception):
    """A failure reported to the user with a message and an exit status."""

    def __init__(self, message, status):
        super().__init__(message)
        self.message = message
        self.status = status


class InvalidIdentifierError(ShellError):
    """An ``export`` or ``unset`` argument that is not a valid name."""

    def __init__(self, builtin, argument):
        super().__init__(
            f"-minishell: {builtin}: `{argument}': not a valid identifier", 1
        )
        self.builtin = builtin
        self.argument = argument


class CommandNotFoundError(ShellError):
    """A command that could not be found or started."""

    def __init__(self, name):
        if name[:1] in ("/", "."):
            message = f"-minishell: {name}: No such file or directory"
        else:
            message = f"-minishell: {name}: Command not found"
        super().__init__(message, 127)
        self.name = name


class NoSuchFileError(ShellError):
    """A redirection source that does not exist."""

    def __init__(self, path):
        super().__init__(f"-minishell: {path}: No such file or directory", 1)
        self.path = path


class TooManyArgumentsError(ShellError):
    """A builtin given more arguments than it accepts."""

    def __init__(self, command):
        super().__init__(f"-minishell: {command}: too many arguments", 1)
        self.command = command


class NumericArgumentError(ShellError):
    """``exit`` given an argument that is not a number."""

    def __init__(self, argument):
        super().__init__(
            f"-minishell: exit: {argument}: numeric argument required", 255
        )
        self.argument = argument


class ShellSyntaxError(ShellError):
    """A command line whose operators are misplaced."""

    def __init__(self, token):
        super().__init__(
            f"-minishell: syntax error near unexpected token `{token}'", 258
        )
        self.token = token


class ShellExit(Exception):
    """Request to leave the shell with the given status."""

    def __init__(self, status):
        super().__init__(f"exit {status}")
        self.status = status