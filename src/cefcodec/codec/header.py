"""
CEF header codec.

The header is seven pipe-delimited fields following the ``CEF:`` marker::

    [prefix]CEF:Version|Device Vendor|Device Product|Device Version|Signature ID|Name|Severity|Extension

The prefix is free text (usually a syslog preamble) and is only present
when the line does not start with the marker. Pipes escaped with a
backslash stay inside their field and are not unescaped.
"""

import re
from dataclasses import dataclass

from cefcodec.codec.coercion import parse_unsigned
from cefcodec.core.config import CEF_MARKER, MAX_VERSION
from cefcodec.core.exceptions import ParseError, ValidationError
from cefcodec.core.models import CefSeverity, CefSignatureId

__all__ = ["CefHeader", "parse_header", "render_header", "HEADER_FIELDS"]


HEADER_FIELDS = (
    "device_vendor",
    "device_product",
    "device_version",
    "signature_id",
    "signature",
    "severity",
)

# One or more characters up to the next unescaped pipe
_FIELD = r"(?:\\.|[^\\|])+"

_HEADER_BODY = (
    re.escape(CEF_MARKER) + r":(?P<version>\d+)\|"
    + "".join(rf"(?P<{name}>{_FIELD})\|" for name in HEADER_FIELDS)
    + r"(?P<extensions>.*)$"
)

BARE_PATTERN = re.compile(r"^" + _HEADER_BODY)
PREFIXED_PATTERN = re.compile(r"^(?P<headers>.*)" + _HEADER_BODY)

_UNESCAPED_PIPE = re.compile(r"(?<!\\)(?:\\\\)*\|")
_TRAILING_ESCAPE = re.compile(r"(?<!\\)(?:\\\\)*\\$")
_LINE_BREAK = re.compile(r"[\r\n]")


@dataclass(frozen=True)
class CefHeader:
    """Header fields split from a CEF line, plus the raw extension segment."""
    headers: str | None
    version: int
    device_vendor: str
    device_product: str
    device_version: str
    signature_id: CefSignatureId
    signature: str
    severity: CefSeverity
    extensions: str


def parse_header(line: str) -> CefHeader:
    """
    Split a CEF line into its header fields and extension segment.

    Args:
        line: A single CEF line, with or without a transport prefix

    Returns:
        CefHeader with typed version, signature id and severity

    Raises:
        ParseError: If the line does not match the header grammar
        NumericParseError: If the version does not fit an unsigned byte
        ValidationError: If the severity is out of range or unknown
    """
    pattern = BARE_PATTERN if line.startswith(CEF_MARKER) else PREFIXED_PATTERN
    match = pattern.match(line)
    if not match:
        raise ParseError("Line does not match CEF header format", line=line)

    d = match.groupdict()
    return CefHeader(
        headers=d.get("headers"),
        version=parse_unsigned(d["version"], bits=8),
        device_vendor=d["device_vendor"],
        device_product=d["device_product"],
        device_version=d["device_version"],
        signature_id=CefSignatureId.from_str(d["signature_id"]),
        signature=d["signature"],
        severity=CefSeverity.from_str(d["severity"]),
        extensions=d["extensions"],
    )


def render_header(
    headers: str | None,
    version: int,
    device_vendor: str,
    device_product: str,
    device_version: str,
    signature_id: CefSignatureId,
    signature: str,
    severity: CefSeverity,
) -> str:
    """
    Render the prefix, marker and header fields, each followed by a pipe.

    Raises:
        ValidationError: If the version is out of range or a field is
            empty, contains an unescaped pipe or a line break, or if the
            prefix contains a line break
    """
    if isinstance(version, bool) or not isinstance(version, int) or not 0 <= version <= MAX_VERSION:
        raise ValidationError(
            f"CEF version must be between 0 and {MAX_VERSION}",
            field="version",
            value=version,
        )

    if headers and _LINE_BREAK.search(headers):
        raise ValidationError("Header prefix contains a line break", field="headers", value=headers)

    values = (device_vendor, device_product, device_version, str(signature_id), signature, str(severity))
    for name, value in zip(HEADER_FIELDS, values):
        if not value:
            raise ValidationError("Header field must not be empty", field=name)
        if _UNESCAPED_PIPE.search(value):
            raise ValidationError("Header field contains an unescaped pipe", field=name, value=value)
        if _TRAILING_ESCAPE.search(value):
            raise ValidationError("Header field ends with a dangling escape", field=name, value=value)
        if _LINE_BREAK.search(value):
            raise ValidationError("Header field contains a line break", field=name, value=value)

    return f"{headers or ''}{CEF_MARKER}:{version}|" + "".join(f"{value}|" for value in values)
