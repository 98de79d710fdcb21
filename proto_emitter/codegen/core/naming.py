"""
Naming utilities for safe code generation.

Converts schema names into identifiers that target languages accept.
"""

from typing import AbstractSet


def sanitize_identifier(name: str, reserved_words: AbstractSet[str] = frozenset()) -> str:
    """
    Make ``name`` a valid identifier.

    Every character that is not a letter or digit becomes ``_``. A leading
    ``_`` is prepended when the result does not start with a letter or
    collides with a reserved word.

    Examples:
        >>> sanitize_identifier("foo/bar.proto")
        'foo_bar_proto'
        >>> sanitize_identifier("2fa")
        '_2fa'
    """
    cleaned = "".join(c if c.isalpha() or c.isdigit() else "_" for c in name)
    if not cleaned or not cleaned[0].isalpha() or cleaned in reserved_words:
        return "_" + cleaned
    return cleaned


def camel_case(name: str) -> str:
    """
    Convert a schema name to CamelCase.

    Dots become underscores (except before a lowercase letter), a leading
    underscore becomes ``X``, and each word starts upper case.

    Examples:
        >>> camel_case("foo_bar")
        'FooBar'
        >>> camel_case("_my_field_name_2")
        'XMyFieldName_2'
    """
    out = []
    i = 0
    n = len(name)
    while i < n:
        c = name[i]
        if c == "." and i + 1 < n and _is_ascii_lower(name[i + 1]):
            pass
        elif c == ".":
            out.append("_")
        elif c == "_" and (i == 0 or name[i - 1] == "."):
            out.append("X")
        elif c == "_" and i + 1 < n and _is_ascii_lower(name[i + 1]):
            pass
        elif c.isascii() and c.isdigit():
            out.append(c)
        else:
            out.append(c.upper() if _is_ascii_lower(c) else c)
            while i + 1 < n and _is_ascii_lower(name[i + 1]):
                i += 1
                out.append(name[i])
        i += 1
    return "".join(out)


def _is_ascii_lower(c: str) -> bool:
    return "a" <= c <= "z"
