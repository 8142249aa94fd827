"""Locating the program a command name refers to."""

import os

_PATH_PREFIX = "PATH"
_PATH_ASSIGN_LENGTH = len("PATH=")


def split_fields(text, separator):
    """Split ``text`` on ``separator``, dropping empty fields."""
    return [field for field in text.split(separator) if field]


def path_entry(env):
    """Directories listed by the first ``PATH`` entry of ``env``, or None."""
    for entry in env.entries():
        if entry.startswith(_PATH_PREFIX):
            fields = split_fields(entry, ":")
            if not fields:
                return []
            fields[0] = fields[0][_PATH_ASSIGN_LENGTH:]
            return fields
    return None


def _exists(path):
    return os.access(path, os.F_OK)


def resolve_command(name, env):
    """Return the path of the program ``name`` runs, or ``name`` itself.

    An existing absolute path is kept as it is; any other name is looked up
    in the directories of ``PATH``, first match first.
    """
    directories = path_entry(env)
    if directories is None or not name:
        return name
    if name.startswith("/") and _exists(name):
        return name
    for directory in directories:
        candidate = f"{directory}/{name}"
        if _exists(candidate):
            return candidate
    return name