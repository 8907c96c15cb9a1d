"""
Type inference for raw extension values.

A value token is tried as boolean, unsigned 64-bit integer, signed
64-bit integer and 64-bit float, in that order; the first successful
interpretation wins and anything else stays a string.
"""

import re
from enum import Enum
from typing import Any

from cefcodec.core.exceptions import NumericParseError

__all__ = [
    "ScalarKind",
    "U64_MAX",
    "I64_MIN",
    "I64_MAX",
    "parse_unsigned",
    "parse_signed",
    "parse_float",
    "detect_kind",
    "coerce",
]


U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

# int()/float() accept surrounding whitespace and underscores, the wire format does not
_UNSIGNED_RE = re.compile(r"^\+?[0-9]+$")
_SIGNED_RE = re.compile(r"^[+-]?[0-9]+$")
_FLOAT_RE = re.compile(
    r"^[+-]?(?:"
    r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?"
    r"|\.[0-9]+(?:[eE][+-]?[0-9]+)?"
    r"|inf|infinity|nan"
    r")$",
    re.IGNORECASE,
)


class ScalarKind(Enum):
    """Scalar types an extension value can be inferred as."""
    BOOL = "bool"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    STRING = "string"


def parse_unsigned(raw: str, bits: int = 64) -> int:
    """
    Parse an unsigned integer of the given width.

    Raises:
        NumericParseError: If raw is not a decimal integer in range
    """
    if not _UNSIGNED_RE.match(raw):
        raise NumericParseError("invalid digit found in string", raw=raw)
    value = int(raw)
    if value > 2**bits - 1:
        raise NumericParseError(f"number too large to fit in u{bits}", raw=raw)
    return value


def parse_signed(raw: str) -> int:
    """
    Parse a signed 64-bit integer.

    Raises:
        NumericParseError: If raw is not a decimal integer in range
    """
    if not _SIGNED_RE.match(raw):
        raise NumericParseError("invalid digit found in string", raw=raw)
    value = int(raw)
    if not I64_MIN <= value <= I64_MAX:
        raise NumericParseError("number out of range for i64", raw=raw)
    return value


def parse_float(raw: str) -> float:
    """
    Parse a 64-bit float using a decimal point only.

    Raises:
        NumericParseError: If raw is not a float literal
    """
    if not _FLOAT_RE.match(raw):
        raise NumericParseError("invalid float literal", raw=raw)
    return float(raw)


def detect_kind(raw: str) -> tuple[ScalarKind, Any]:
    """
    Infer the scalar kind of a raw token.

    Args:
        raw: Raw extension value

    Returns:
        Tuple of (kind, converted value)
    """
    if raw == "true":
        return ScalarKind.BOOL, True
    if raw == "false":
        return ScalarKind.BOOL, False

    for kind, parser in (
        (ScalarKind.U64, parse_unsigned),
        (ScalarKind.I64, parse_signed),
        (ScalarKind.F64, parse_float),
    ):
        try:
            return kind, parser(raw)
        except NumericParseError:
            continue

    return ScalarKind.STRING, raw


def coerce(raw: str) -> Any:
    """Convert a raw token to bool, int, float or str."""
    return detect_kind(raw)[1]
