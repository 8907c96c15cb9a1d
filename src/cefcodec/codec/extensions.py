"""
Extension segment codec.

The extension segment is a space-delimited run of ``key=value`` pairs
with no fixed key set. Values may contain spaces, so a pair boundary is
only known once the next unescaped ``=`` is found: the last word before
it is the next key and everything else belongs to the current value.

Example:
    >>> pair_extensions("src=10.0.0.1 msg=worm stopped spt=1232")
    [('src', '10.0.0.1'), ('msg', 'worm stopped'), ('spt', '1232')]

An ``=`` preceded by a backslash is not a boundary. The backslash is
kept in the value as-is.
"""

import re
import warnings
from typing import Any, Iterable

from cefcodec.codec.coercion import coerce
from cefcodec.core.exceptions import MalformedExtensionError, ValidationError

__all__ = [
    "split_extensions",
    "pair_extensions",
    "parse_extensions",
    "render_value",
    "render_extensions",
]


ESCAPE = "\\"

_UNESCAPED_EQUALS = re.compile(r"(?<!\\)(?:\\\\)*=")


def split_extensions(segment: str) -> list[str]:
    """
    Split an extension segment into a flat key, value, key, value... list.

    Args:
        segment: Raw text following the seventh header pipe

    Returns:
        Alternating key and value tokens; an odd length means the
        segment was malformed
    """
    if not segment:
        return []

    tokens: list[str] = []
    start = 0
    cursor = 0
    while True:
        pos = segment.find("=", cursor)
        if pos == -1:
            tokens.append(segment[start:])
            break

        if pos > 0 and segment[pos - 1] == ESCAPE:
            cursor = pos + 1
            continue

        words = segment[start:pos].split(" ")
        if len(words) > 1:
            tokens.append(" ".join(words[:-1]))
            tokens.append(words[-1])
        else:
            tokens.append(segment[start:pos])
        start = cursor = pos + 1

    return tokens


def pair_extensions(
    segment: str,
    strict: bool = False,
    stacklevel: int = 2,
) -> list[tuple[str, str]]:
    """
    Tokenize an extension segment into ordered (key, raw value) pairs.

    A malformed segment (dangling key, or no ``=`` at all) yields no
    pairs and a ``UserWarning``; with ``strict`` it raises instead.

    The warning is attributed ``stacklevel`` frames up. Python's default
    filter reports a given message once per call site, so wrappers should
    pass a level that reaches their own caller.

    Raises:
        MalformedExtensionError: In strict mode, for a malformed segment
    """
    tokens = split_extensions(segment)
    if len(tokens) % 2:
        if strict:
            raise MalformedExtensionError(segment, len(tokens))
        warnings.warn(
            f"Malformed extension segment ({len(tokens)} tokens), "
            "all extensions were dropped.",
            UserWarning,
            stacklevel=stacklevel,
        )
        return []

    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]


def parse_extensions(segment: str, strict: bool = False) -> list[tuple[str, Any]]:
    """Tokenize an extension segment and infer the type of every value."""
    return [
        (key, coerce(raw))
        for key, raw in pair_extensions(segment, strict=strict, stacklevel=3)
    ]


def render_value(value: Any) -> str:
    """
    Render a scalar extension value.

    Strings are written verbatim, so they must not hold an unescaped
    ``=`` or a line break.

    Raises:
        ValidationError: If value is not a bool, int, float or str, or
            is a string the parser could not read back
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        if _UNESCAPED_EQUALS.search(value):
            raise ValidationError(
                "Extension value contains an unescaped '='",
                field="extensions",
                value=value,
            )
        if "\r" in value or "\n" in value:
            raise ValidationError(
                "Extension value contains a line break",
                field="extensions",
                value=value,
            )
        return value
    raise ValidationError(
        f"Invalid data: {value!r} cannot be rendered as an extension value",
        field="extensions",
    )


def render_extensions(pairs: Iterable[tuple[str, Any]]) -> str:
    """Render ordered pairs as ``key=value`` joined by single spaces."""
    return " ".join(f"{key}={render_value(value)}" for key, value in pairs)
