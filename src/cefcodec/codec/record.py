"""
Top-level parse and serialize entry points.

Combines the header codec, the extension tokenizer and the payload
mapping into complete CefRecord values, and the reverse.
"""

import re
from typing import Any

from cefcodec.codec.extensions import pair_extensions, render_extensions
from cefcodec.codec.header import parse_header, render_header
from cefcodec.codec.payload import build_payload, flatten_payload
from cefcodec.codec.timestamps import TimestampResolver, parse_native
from cefcodec.core.config import CEF_MARKER, DEFAULT_CONFIG, CodecConfig, validate_line_length
from cefcodec.core.exceptions import EncodingError, ParseError
from cefcodec.core.models import CefRecord

__all__ = [
    "from_str",
    "from_bytes",
    "to_string",
    "to_bytes",
    "extract_hostname_from_headers",
    "extract_ts_from_headers",
]


# Syslog timestamps are "Mmm dd hh:mm:ss"
SYSLOG_TIMESTAMP_LENGTH = 15

PRIORITY_PATTERN = re.compile(r"^<\d{1,3}>")
HOSTNAME_PATTERN = re.compile(r"^.*\s+(?P<host>\S+)\s+$", re.DOTALL)


def from_str(
    line: str,
    payload_type: Any = None,
    config: CodecConfig | None = None,
    strict: bool | None = None,
) -> CefRecord:
    """
    Deserialize a CefRecord from a line of CEF text.

    Args:
        line: One CEF line, optionally preceded by a transport prefix
        payload_type: Type of the extensions payload; ``None`` means ``dict``
        config: Codec settings
        strict: Overrides ``config.strict_extensions`` when given

    Returns:
        CefRecord whose ``extensions`` is an instance of payload_type

    Raises:
        CefError: Any parse, validation or payload error

    Example:
        record = from_str("CEF:0|Security|threatmanager|1.0|100|worm stopped|10|src=10.0.0.1")
        record.extensions  # {"src": "10.0.0.1"}
    """
    config = config or DEFAULT_CONFIG
    line = validate_line_length(line.rstrip("\r\n"), config.max_line_length)

    header = parse_header(line)
    if strict is None:
        strict = config.strict_extensions
    pairs = pair_extensions(header.extensions, strict=strict, stacklevel=3)

    return CefRecord(
        headers=header.headers,
        version=header.version,
        device_vendor=header.device_vendor,
        device_product=header.device_product,
        device_version=header.device_version,
        signature_id=header.signature_id,
        signature=header.signature,
        severity=header.severity,
        extensions=build_payload(pairs, payload_type, config.separator),
    )


def from_bytes(
    data: bytes,
    payload_type: Any = None,
    config: CodecConfig | None = None,
    strict: bool | None = None,
) -> CefRecord:
    """
    Deserialize a CefRecord from UTF-8 encoded bytes.

    Raises:
        EncodingError: If data is not valid UTF-8
    """
    try:
        line = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid UTF-8 input: {e}", {"position": e.start}) from e
    return from_str(line, payload_type, config=config, strict=strict)


def to_string(record: CefRecord, config: CodecConfig | None = None) -> str:
    """
    Serialize a CefRecord into a line of CEF text.

    Raises:
        ValidationError: If a header field or extension value cannot be rendered
        PayloadError: If the extensions payload cannot be flattened
    """
    config = config or DEFAULT_CONFIG
    pairs = flatten_payload(record.extensions, config.separator, config.key_rewriter)
    header = render_header(
        record.headers,
        record.version,
        record.device_vendor,
        record.device_product,
        record.device_version,
        record.signature_id,
        record.signature,
        record.severity,
    )
    return header + render_extensions(pairs)


def to_bytes(record: CefRecord, config: CodecConfig | None = None) -> bytes:
    """Serialize a CefRecord into UTF-8 encoded bytes."""
    return to_string(record, config).encode("utf-8")


def extract_hostname_from_headers(headers: str) -> str:
    """
    Extract the hostname from a syslog transport prefix.

    The hostname is the last word before the CEF marker. Accepts the
    prefix alone or the full line.

    Raises:
        ParseError: If no hostname can be found
    """
    marker = headers.rfind(f"{CEF_MARKER}:")
    preamble = headers[:marker] if marker != -1 else headers

    match = HOSTNAME_PATTERN.match(preamble)
    if not match:
        raise ParseError("No hostname found in headers", line=headers, field="headers")
    return match.group("host")


def extract_ts_from_headers(headers: str, resolver: TimestampResolver | None = None) -> float:
    """
    Extract the timestamp from a syslog transport prefix.

    Syslog timestamps carry no year, the resolver's current year is used.

    Args:
        headers: Transport prefix, e.g. ``"Sep 19 08:26:10 host "``
        resolver: Supplies the current year; defaults to the local clock

    Raises:
        ParseError: If the prefix is too short to hold a timestamp
        DateParseError: If the timestamp is not a syslog timestamp
    """
    preamble = PRIORITY_PATTERN.sub("", headers, count=1)
    if len(preamble) < SYSLOG_TIMESTAMP_LENGTH:
        raise ParseError("Headers too short to hold a syslog timestamp", line=headers, field="headers")

    resolver = resolver or TimestampResolver()
    return parse_native(preamble[:SYSLOG_TIMESTAMP_LENGTH], resolver.current_year())
