"""
Multi-format timestamp resolution.

CEF producers emit timestamps in several historical formats. A raw
token is tried, in order, as:

1. a numeric epoch string (``1561554774.901402``)
2. a native syslog timestamp, with or without a leading year
   (``Dec 19 01:07:56``); the current local year is assumed when absent
3. RFC 3339 (``2019-06-26T15:21:55.152Z``)
4. an english log timestamp with a numeric offset
   (``26/Jun/2019:15:21:55.152120022 +0200``)

Fractional seconds are preserved. Native timestamps carry no offset and
are read as UTC.
"""

import calendar
import math
import re
import time
from datetime import datetime
from typing import Callable

from dateutil import parser as dateutil_parser

from cefcodec.codec.coercion import parse_float
from cefcodec.core.exceptions import CefError, DateParseError, NumericParseError

__all__ = [
    "TimestampResolver",
    "parse_epoch",
    "parse_native",
    "parse_rfc3339",
    "parse_english",
    "parse_ts",
    "now",
]


NATIVE_FORMAT = "%Y %b %d %H:%M:%S"

RFC3339_PATTERN = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)

ENGLISH_PATTERN = re.compile(
    r"^\s*(?P<day>\d{1,2})/(?P<month>[A-Za-z]{3})/(?P<year>\d{4})[: ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"\s+(?P<offset>[+-]\d{4})$"
)


def _fraction(digits: str | None) -> float:
    if not digits:
        return 0.0
    return float(f"0.{digits}")


def parse_epoch(raw: str) -> float:
    """Parse a numeric epoch string such as ``1561554774.901402``."""
    value = parse_float(raw)
    if not math.isfinite(value):
        raise NumericParseError("epoch must be a finite number", raw=raw)
    return value


def parse_native(raw: str, year: int | None = None) -> float:
    """
    Parse a native syslog timestamp.

    Accepts ``%Y %b %d %H:%M:%S`` or the year-less ``%b %d %H:%M:%S``
    form, in which case ``year`` is prepended.

    Raises:
        DateParseError: If raw is not a native timestamp
    """
    value = raw.strip()
    if value[:4].isdigit() or year is None:
        candidate = value
    else:
        candidate = f"{year} {value}"
    try:
        parsed = datetime.strptime(candidate, NATIVE_FORMAT)
    except ValueError as e:
        raise DateParseError(raw, "native", str(e)) from e
    return float(calendar.timegm(parsed.timetuple()))


def parse_rfc3339(raw: str) -> float:
    """
    Parse an RFC 3339 timestamp.

    Raises:
        DateParseError: If raw is not RFC 3339
    """
    match = RFC3339_PATTERN.match(raw)
    if not match:
        raise DateParseError(raw, "rfc3339", "input is not RFC 3339")

    d = match.groupdict()
    offset = "+00:00" if d["offset"] in ("Z", "z") else d["offset"]
    try:
        parsed = dateutil_parser.isoparse(f"{d['date']}T{d['time']}{offset}")
    except ValueError as e:
        raise DateParseError(raw, "rfc3339", str(e)) from e
    return int(parsed.timestamp()) + _fraction(d["fraction"])


def parse_english(raw: str) -> float:
    """
    Parse an english log timestamp: ``day/Mon/year:H:M:S[.fraction] +hhmm``.

    Raises:
        DateParseError: If raw does not match the format
    """
    match = ENGLISH_PATTERN.match(raw)
    if not match:
        raise DateParseError(raw, "english", "input does not match day/Mon/year:H:M:S +hhmm")

    d = match.groupdict()
    try:
        parsed = datetime.strptime(
            f"{d['day']}/{d['month']}/{d['year']} {d['time']} {d['offset']}",
            "%d/%b/%Y %H:%M:%S %z",
        )
    except ValueError as e:
        raise DateParseError(raw, "english", str(e)) from e
    return int(parsed.timestamp()) + _fraction(d["fraction"])


class TimestampResolver:
    """
    Resolve a raw timestamp token to epoch seconds.

    Every format is attempted in order; on total failure the error from
    the last attempted format is raised.

    Example:
        resolver = TimestampResolver(clock=lambda: datetime(2019, 1, 1))
        resolver.resolve("Dec 19 01:07:56")  # 1576717676.0
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the resolver.

        Args:
            clock: Returns the current local time; supplies the year for
                year-less native timestamps
        """
        self.clock = clock

    def current_year(self) -> int:
        return self.clock().year

    def resolve(self, raw: str) -> float:
        """
        Resolve a timestamp token.

        Raises:
            DateParseError: With the reason of the last attempted format
        """
        attempts: list[tuple[str, Callable[[str], float]]] = [
            ("epoch", parse_epoch),
            ("native", lambda value: parse_native(value, self.current_year())),
            ("rfc3339", parse_rfc3339),
            ("english", parse_english),
        ]

        last_name = ""
        last_error: CefError | None = None
        for name, attempt in attempts:
            try:
                return attempt(raw)
            except CefError as e:
                last_name, last_error = name, e

        reason = getattr(last_error, "reason", None) or str(last_error)
        raise DateParseError(raw, last_name, reason) from last_error


_default_resolver = TimestampResolver()


def parse_ts(raw: str) -> float:
    """Resolve a timestamp token using the local clock."""
    return _default_resolver.resolve(raw)


def now(clock: Callable[[], float] = time.time) -> float:
    """Current wall-clock time as epoch seconds with sub-second precision."""
    return float(clock())
