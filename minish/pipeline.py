"""Turning typed tokens into the commands of a pipeline."""

from dataclasses import dataclass, field

from minish.errors import NoSuchFileError
from minish.lexer import TokenType

_HEREDOC_PROMPT = "> "
_HEREDOC_COMPARE_LIMIT = 10


@dataclass
class Command:
    """One command of a pipeline with its redirections."""

    args: list = field(default_factory=list)
    infiles: list = field(default_factory=list)
    heredoc: str | None = None
    outfiles: list = field(default_factory=list)
    append: bool = False

    @property
    def input_file(self):
        """File read as standard input; a here-document takes precedence."""
        if self.heredoc is not None or not self.infiles:
            return None
        return self.infiles[-1]

    @property
    def output_file(self):
        """File that receives standard output, or None."""
        return self.outfiles[-1] if self.outfiles else None


def split_segments(tokens):
    """Split ``tokens`` at pipe operators into one list per command."""
    segments = [[]]
    for token in tokens:
        if token.type is TokenType.PIPE:
            segments.append([])
        else:
            segments[-1].append(token)
    return segments


def build_command(tokens):
    """Build the Command described by the tokens of one segment."""
    command = Command()
    followers = list(tokens[1:]) + [None]
    for token, following in zip(tokens, followers):
        kind = token.type
        if kind is TokenType.LESS and following is not None:
            command.infiles.append(following.content)
        elif kind is TokenType.HEREDOC and following is not None:
            command.heredoc = following.content
        elif kind in (TokenType.COMMAND, TokenType.ARGUMENT):
            command.args.append(token.content)
        elif kind in (TokenType.GREAT, TokenType.APPEND):
            command.append = kind is TokenType.APPEND
        elif kind is TokenType.OUTFILE:
            command.outfiles.append(token.content)
    return command


def build_pipeline(tokens):
    """Build one Command for each segment of ``tokens``."""
    return [build_command(segment) for segment in split_segments(tokens)]


def prepare_files(command):
    """Check the input files and create every output file but the last.

    Raises NoSuchFileError for the first input file that cannot be opened;
    earlier output files are created empty, as the last one wins.
    """
    for path in command.infiles:
        try:
            with open(path, "rb"):
                pass
        except OSError:
            raise NoSuchFileError(path) from None
    for path in command.outfiles[:-1]:
        try:
            with open(path, "w"):
                pass
        except OSError:
            pass


def heredoc_matches(line, delimiter):
    """Tell whether ``line`` ends a here-document closed by ``delimiter``.

    Only the first ten characters are compared, so longer delimiters
    never match.
    """
    if line is None or delimiter is None:
        return False
    return line == delimiter and len(line) <= _HEREDOC_COMPARE_LIMIT


def read_heredoc(delimiter, read_line):
    """Read lines with ``read_line`` until ``delimiter``; return their text.

    ``read_line`` takes a prompt and returns a line, or None at end of input.
    """
    lines = []
    while True:
        line = read_line(_HEREDOC_PROMPT)
        if line is None or heredoc_matches(line, delimiter):
            break
        lines.append(f"{line}\n")
    return "".join(lines)