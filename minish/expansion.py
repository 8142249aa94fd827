"""Expansion of ``$NAME`` and ``$?`` inside words."""

_NAME_STOP = frozenset(" \"'/$")


def _closed(word, index, quote):
    return word.find(quote, index + 1) != -1


def lookup(name, env):
    """Return the value of ``name`` in ``env``, or None when it is not set."""
    if not name:
        return None
    try:
        return env[name]
    except KeyError:
        return None


def has_variable(word):
    """Tell whether ``word`` holds a ``$`` outside single quotes."""
    in_double = False
    index = 0
    length = len(word)
    while index < length:
        char = word[index]
        if char == '"':
            in_double = not in_double
        if char == "'" and not in_double and _closed(word, index, "'"):
            index = word.index("'", index + 1) + 1
            if index >= length:
                return False
        if word[index] == "$":
            return True
        index += 1
    return False


def expand_once(word, env, exit_status):
    """Expand the first variable of ``word`` that is not single-quoted."""
    in_double = False
    index = 0
    while index < len(word):
        char = word[index]
        if char == '"' and _closed(word, index, '"'):
            in_double = not in_double
        if char == "'" and not in_double and _closed(word, index, "'"):
            index = word.index("'", index + 1)
        if word[index] == "$":
            prefix = word[:index]
            if word[index + 1:index + 2] == "?":
                return f"{prefix}{exit_status}{word[index + 2:]}"
            end = index + 1
            while end < len(word) and word[end] not in _NAME_STOP:
                end += 1
            value = lookup(word[index + 1:end], env)
            return prefix + (value if value is not None else "") + word[end:]
        index += 1
    return word


def expand(word, env, exit_status):
    """Expand every variable in ``word``."""
    while has_variable(word):
        expanded = expand_once(word, env, exit_status)
        if expanded == word:
            break
        word = expanded
    return word