"""The shell's environment: an ordered list of ``NAME=value`` entries."""

from collections.abc import Mapping

from minish.errors import InvalidIdentifierError

_SPACES = " \n\t\v\f\r"
_DIGITS = "0123456789"
_QUOTES = ("'", '"')


def _is_alpha(char):
    return char.isascii() and char.isalpha()


def _is_word_char(char):
    return char.isascii() and (char.isalnum() or char == "_")


def _name_of(entry):
    return entry.partition("=")[0]


def atoi(text):
    """Read a leading, optionally signed decimal number; 0 when there is none."""
    rest = text.lstrip(_SPACES)
    sign = 1
    if rest[:1] in ("+", "-"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    digits = []
    for char in rest:
        if char not in _DIGITS:
            break
        digits.append(char)
    return sign * int("".join(digits)) if digits else 0


def is_valid_identifier(name):
    """Tell whether ``name`` is a valid variable name."""
    return (
        bool(name)
        and (_is_alpha(name[0]) or name[0] == "_")
        and all(_is_word_char(char) for char in name)
    )


def is_valid_assignment(argument):
    """Tell whether ``argument`` has the form ``NAME=value`` with a valid name."""
    name, separator, _ = argument.partition("=")
    return bool(separator) and is_valid_identifier(name)


def strip_value_quotes(argument, quote):
    """Drop ``quote`` around the value of ``argument`` when it encloses it."""
    if not argument:
        return argument
    start = argument.find("=") + 1
    if argument[start:start + 1] != quote or argument[-1] != quote:
        return argument
    end = argument.find(quote, start + 1)
    if end == -1:
        end = len(argument)
    return argument[:start] + argument[start + 1:end]


class Environment:
    """Variables kept in insertion order as ``NAME=value`` strings."""

    def __init__(self, entries=()):
        self._entries = list(entries)

    @classmethod
    def inherit(cls, entries):
        """Build the environment of a new shell, raising ``SHLVL`` by one."""
        if isinstance(entries, Mapping):
            entries = (f"{name}={value}" for name, value in entries.items())
        inherited = []
        for entry in entries:
            if entry.startswith("SHLVL="):
                entry = f"SHLVL={atoi(entry[len('SHLVL='):]) + 1}"
            inherited.append(entry)
        return cls(inherited)

    def __getitem__(self, name):
        prefix = f"{name}="
        for entry in self._entries:
            if entry.startswith(prefix):
                return entry[len(prefix):]
        raise KeyError(name)

    def __iter__(self):
        return (_name_of(entry) for entry in self._entries)

    def __len__(self):
        return len(self._entries)

    def entries(self):
        """Return a copy of the entries as ``NAME=value`` strings."""
        return list(self._entries)

    def _index(self, name):
        return next(
            (i for i, entry in enumerate(self._entries) if _name_of(entry) == name),
            None,
        )

    def replace_value(self, name, value):
        """Set ``name`` to ``value`` where it is already defined; tell if it was."""
        prefix = f"{name}="
        replaced = False
        for i, entry in enumerate(self._entries):
            if entry.startswith(prefix):
                self._entries[i] = f"{name}={value}"
                replaced = True
        return replaced

    def export(self, arguments, out):
        """Add ``NAME=value`` assignments; diagnostics go to ``out``.

        An invalid argument stops the command and gives status 1.
        """
        for argument in arguments:
            name, separator, _ = argument.partition("=")
            if separator:
                index = self._index(name)
                if index is not None:
                    del self._entries[index]
            if not is_valid_assignment(argument):
                print(InvalidIdentifierError("export", argument).message, file=out)
                return 1
            for quote in _QUOTES:
                argument = strip_value_quotes(argument, quote)
            self._entries.append(argument)
        return 0

    def unset(self, arguments, out):
        """Remove the named variables; diagnostics go to ``out``.

        An invalid name stops the command and gives status 1.
        """
        for name in arguments:
            if not is_valid_identifier(name):
                print(InvalidIdentifierError("unset", name).message, file=out)
                return 1
            index = self._index(name)
            if index is not None:
                del self._entries[index]
        return 0

    def print(self, out):
        """Write every entry on its own line; return status 0."""
        for entry in self._entries:
            print(entry, file=out)
        return 0