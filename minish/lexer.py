"""Splitting a command line into typed tokens."""

from dataclasses import dataclass
from enum import IntEnum
from itertools import pairwise

from minish.errors import ShellSyntaxError
from minish.expansion import expand

_BLANKS = " \t"
_OPERATORS = frozenset("<>|")
_QUOTES = ("'", '"')


class TokenType(IntEnum):
    """Role of a token on the command line."""

    UNTYPED = -1
    INFILE = 0
    LESS = 1
    HEREDOC = 2
    COMMAND = 3
    ARGUMENT = 4
    PIPE = 5
    GREAT = 6
    APPEND = 7
    OUTFILE = 8


@dataclass
class Token:
    """One word or operator of a command line."""

    content: str
    type: TokenType = TokenType.UNTYPED


def _closed(text, index, quote):
    return text.find(quote, index + 1) != -1


def content_length(text):
    """Length of the first token of ``text``, honouring closed quotes."""
    index = 0
    while index < len(text) and text[index] not in _BLANKS:
        for quote in _QUOTES:
            if text[index] == quote and _closed(text, index, quote):
                index = text.index(quote, index + 1)
        char = text[index]
        if char in _OPERATORS:
            if index > 0:
                return index
            return 2 if text[1:2] == char else 1
        index += 1
    return index


def split_line(line):
    """Split ``line`` into untyped tokens."""
    tokens = []
    index = 0
    while True:
        while index < len(line) and line[index] in _BLANKS:
            index += 1
        if index >= len(line):
            return tokens
        length = content_length(line[index:])
        tokens.append(Token(line[index:index + length]))
        index += length


def is_operator(token):
    """Tell whether ``token`` starts with ``<``, ``>`` or ``|``."""
    return token is not None and token.content[:1] in _OPERATORS


def _type_redirection(token, target):
    if token.content[0] == "<":
        target.type = TokenType.INFILE
        if token.content[1:2] == "<":
            token.type = TokenType.HEREDOC
        elif len(token.content) == 1:
            token.type = TokenType.LESS
    else:
        target.type = TokenType.OUTFILE
        if token.content[1:2] == ">":
            token.type = TokenType.APPEND
        elif len(token.content) == 1:
            token.type = TokenType.GREAT


def assign_types(tokens):
    """Give each token its role; raise ShellSyntaxError on misplaced operators."""
    for index, token in enumerate(tokens):
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        lead = token.content[:1]
        if lead in ("<", ">"):
            if following is None:
                raise ShellSyntaxError("newline")
            if is_operator(following):
                raise ShellSyntaxError(following.content)
            _type_redirection(token, following)
        if lead == "|":
            token.type = TokenType.PIPE
            previous = tokens[index - 1] if index > 0 else None
            if is_operator(previous) or len(token.content) > 1 or following is None:
                raise ShellSyntaxError("|")
        if token.type is TokenType.UNTYPED:
            token.type = TokenType.COMMAND
            for current, after in pairwise(tokens[index:]):
                if is_operator(current):
                    break
                after.type = TokenType.ARGUMENT
    return tokens


def strip_first_quotes(word):
    """Remove the leading quote of ``word`` and its closing partner."""
    quote = word[:1]
    if quote not in _QUOTES or not _closed(word, 0, quote):
        raise ValueError(f"word does not start with a closed quote: {word!r}")
    end = word.index(quote, 1)
    return word[1:end] + word[end + 1:]


def remove_quotes(tokens):
    """Strip the first pair of quotes from tokens that start with one."""
    for token in tokens:
        quote = token.content[:1]
        if quote in _QUOTES and _closed(token.content, 0, quote):
            token.content = strip_first_quotes(token.content)
    return tokens


def only_spaces(line):
    """Tell whether ``line`` holds nothing but blanks."""
    return all(char in _BLANKS for char in line)


def parse(line, env, exit_status):
    """Split, expand and type ``line``; raise ShellSyntaxError on bad syntax."""
    tokens = split_line(line)
    for token in tokens:
        token.content = expand(token.content, env, exit_status)
    assign_types(tokens)
    remove_quotes(tokens)
    return tokens