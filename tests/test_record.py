"""
Tests for the top-level parse and serialize entry points.
"""

import dataclasses
from pathlib import Path

import pytest

from cefcodec import (
    CefRecord,
    CefSeverity,
    CefSignatureId,
    CodecConfig,
    from_bytes,
    from_str,
    ldp_key_rewriter,
    to_bytes,
    to_string,
)
from cefcodec.codec.record import extract_hostname_from_headers, extract_ts_from_headers
from cefcodec.core.config import LineTooLongError
from cefcodec.core.exceptions import (
    DateParseError,
    EncodingError,
    MalformedExtensionError,
    ParseError,
    PayloadError,
    ValidationError,
)

from conftest import Foo

FOO_LINE = "CEF:0|Fake|Product|0.1|0|Nothing|6|a=subtest b=695217"


class TestFromStr:
    """Tests for from_str."""

    def test_dict_payload(self, bare_line):
        """Extensions default to an ordered dict of typed values."""
        record = from_str(bare_line)

        assert record.headers is None
        assert record.version == 0
        assert record.device_vendor == "Security"
        assert record.signature_id == CefSignatureId(100)
        assert record.severity == CefSeverity(10)
        assert list(record.extensions.items()) == [
            ("src", "10.0.0.1"), ("dst", "2.1.2.2"), ("spt", 1232),
        ]

    def test_dataclass_payload(self):
        """Extensions are built into the requested type."""
        record = from_str(FOO_LINE, Foo)
        assert record.extensions == Foo(a="subtest", b=695217)

    def test_syslog_prefix(self, syslog_line):
        """The transport prefix is kept on the record."""
        record = from_str(syslog_line)
        assert record.headers == "Sep 19 08:26:10 host "
        assert record.hostname() == "host"

    def test_trailing_newline_ignored(self, bare_line):
        """Line terminators are not part of the last value."""
        record = from_str(bare_line + "\r\n")
        assert record.extensions["spt"] == 1232

    def test_sample_lines(self, sample_cef_lines):
        """All sample lines parse."""
        records = [from_str(line) for line in sample_cef_lines]
        assert records[2].extensions == {"act": "blocked", "msg": "exploit attempt detected", "cnt": 3}
        assert records[3].extensions == {}
        assert records[3].version == 1

    def test_escaped_equals_verbatim(self):
        """Escaped separators keep their backslash."""
        record = from_str(r"CEF:0|a|b|c|d|e|5|request=/q?x\=1 act=allowed")
        assert record.extensions["request"] == r"/q?x\=1"

    def test_malformed_extensions_dropped(self):
        """A dangling key empties the extension set."""
        with pytest.warns(UserWarning):
            record = from_str("CEF:0|a|b|c|d|e|5|a=b=c")
        assert record.extensions == {}

    def test_malformed_extensions_warning_names_caller(self):
        """The warning is attributed to the code that called from_str."""
        with pytest.warns(UserWarning) as caught:
            from_str("CEF:0|a|b|c|d|e|5|a=b=c")
        assert Path(caught[0].filename).name == Path(__file__).name

    def test_malformed_extensions_strict(self):
        """Strict mode raises instead of dropping."""
        with pytest.raises(MalformedExtensionError):
            from_str("CEF:0|a|b|c|d|e|5|a=b=c", strict=True)
        with pytest.raises(MalformedExtensionError):
            from_str("CEF:0|a|b|c|d|e|5|a=b=c", config=CodecConfig(strict_extensions=True))

    def test_unknown_key_for_dataclass(self):
        """Closed payloads reject unknown keys."""
        with pytest.raises(PayloadError):
            from_str(FOO_LINE + " c=1", Foo)

    def test_line_too_long(self, bare_line):
        """Lines are bounded by the configured limit."""
        with pytest.raises(LineTooLongError):
            from_str(bare_line, config=CodecConfig(max_line_length=10))

    def test_invalid_severity(self):
        """Severity validation is a recoverable error."""
        with pytest.raises(ValidationError):
            from_str("CEF:0|a|b|c|d|e|11|x=1")

    def test_structural_error(self):
        """Non-CEF lines are parse errors."""
        with pytest.raises(ParseError):
            from_str("Sep 19 08:26:10 host sshd[1]: Accepted publickey")


class TestFromBytes:
    """Tests for from_bytes."""

    def test_utf8(self):
        """Valid UTF-8 is decoded."""
        record = from_bytes("CEF:0|Acme|Café|1|2|e|5|msg=déjà vu".encode("utf-8"))
        assert record.device_product == "Café"
        assert record.extensions == {"msg": "déjà vu"}

    def test_invalid_utf8(self):
        """Invalid UTF-8 is an encoding error."""
        with pytest.raises(EncodingError):
            from_bytes(b"CEF:0|a|b|c|d|e|5|msg=\xff\xfe")


class TestToString:
    """Tests for to_string."""

    def test_documented_example(self, foo_record):
        """Test the documented serialization example."""
        assert to_string(foo_record) == FOO_LINE

    def test_ldp_naming(self, foo_record):
        """The LDP naming convention is applied at serialize time."""
        config = CodecConfig(key_rewriter=ldp_key_rewriter)
        assert to_string(foo_record, config) == "CEF:0|Fake|Product|0.1|0|Nothing|6|a=subtest b_double=695217"

    def test_to_bytes(self, foo_record):
        """Bytes are UTF-8 encoded."""
        assert to_bytes(foo_record) == FOO_LINE.encode("utf-8")

    def test_nested_payload(self):
        """Nested mappings are flattened."""
        record = CefRecord(
            version=0,
            device_vendor="a",
            device_product="b",
            device_version="c",
            signature_id=CefSignatureId("x"),
            signature="e",
            severity=CefSeverity("Low"),
            extensions={"src": {"ip": "10.0.0.1", "port": 22}},
        )
        assert to_string(record) == "CEF:0|a|b|c|x|e|Low|src_ip=10.0.0.1 src_port=22"

    def test_non_scalar_value_is_error(self, foo_record):
        """Unsupported values are a recoverable validation error."""
        record = CefRecord(
            version=0,
            device_vendor="a",
            device_product="b",
            device_version="c",
            signature_id=CefSignatureId(1),
            signature="e",
            severity=CefSeverity(1),
            extensions={"hosts": ["a", "b"]},
        )
        with pytest.raises(ValidationError):
            to_string(record)

    @pytest.mark.parametrize(
        "extensions",
        [{"request": "/q?x=1", "act": "allowed"}, {"msg": "a\nb"}, {"msg": "a\r\nb"}],
    )
    def test_unreadable_value_is_error(self, extensions):
        """Values that would not parse back are rejected instead of written."""
        record = CefRecord(
            version=0,
            device_vendor="a",
            device_product="b",
            device_version="c",
            signature_id=CefSignatureId(1),
            signature="e",
            severity=CefSeverity(1),
            extensions=extensions,
        )
        with pytest.raises(ValidationError):
            to_string(record)

    def test_escaped_equals_value_round_trips(self):
        """Escaped separators are written verbatim and read back unchanged."""
        line = r"CEF:0|a|b|c|d|e|5|request=/q?x\=1 act=allowed"
        assert to_string(from_str(line)) == line

    def test_prefix_with_line_break_is_error(self, foo_record):
        """A multi-line transport prefix is rejected."""
        record = dataclasses.replace(foo_record, headers="Sep 19 08:26:10 host\n")
        with pytest.raises(ValidationError):
            to_string(record)


class TestRoundTrip:
    """Tests for parse(serialize(record))."""

    def test_dataclass_round_trip(self, foo_record):
        """Dataclass records survive a round trip."""
        assert from_str(to_string(foo_record), Foo) == foo_record

    def test_dict_round_trip_with_prefix(self):
        """Dict records with a prefix survive a round trip, in order."""
        record = CefRecord(
            headers="Sep 19 08:26:10 host ",
            version=0,
            device_vendor="Security",
            device_product="threatmanager",
            device_version="1.0",
            signature_id=CefSignatureId("CVE-2021-9999"),
            signature="worm",
            severity=CefSeverity("Very-High"),
            extensions={"src": "10.0.0.1", "spt": 1232, "ok": True, "ratio": 0.5, "delta": -3},
        )
        parsed = from_str(to_string(record))

        assert parsed == record
        assert list(parsed.extensions) == ["src", "spt", "ok", "ratio", "delta"]

    def test_sample_lines_round_trip(self, sample_cef_lines):
        """Serializing parsed sample lines reproduces them."""
        for line in sample_cef_lines[:2]:
            assert to_string(from_str(line)) == line


class TestHeaderHelpers:
    """Tests for the transport prefix helpers."""

    def test_hostname_from_prefix(self):
        """The hostname is the last word of the prefix."""
        assert extract_hostname_from_headers("Sep 19 08:26:10 host ") == "host"

    def test_hostname_from_full_line(self, syslog_line):
        """The full line is accepted too."""
        assert extract_hostname_from_headers(syslog_line) == "host"

    def test_hostname_missing(self):
        """A prefix without whitespace carries no hostname."""
        with pytest.raises(ParseError):
            extract_hostname_from_headers("host")

    def test_timestamp_from_prefix(self, fixed_resolver):
        """The syslog timestamp uses the resolver's year."""
        assert extract_ts_from_headers("Sep 19 08:26:10 host ", fixed_resolver) == 1568881570.0

    def test_timestamp_skips_priority(self, fixed_resolver):
        """A leading syslog priority is skipped."""
        assert extract_ts_from_headers("<34>Sep 19 08:26:10 host ", fixed_resolver) == 1568881570.0

    def test_timestamp_prefix_too_short(self):
        """Short prefixes cannot hold a timestamp."""
        with pytest.raises(ParseError):
            extract_ts_from_headers("host ")

    def test_timestamp_not_syslog(self, fixed_resolver):
        """Prefixes that do not start with a timestamp fail to parse."""
        with pytest.raises(DateParseError):
            extract_ts_from_headers("myhost.example.com ", fixed_resolver)

    def test_record_timestamp_uses_resolver(self, syslog_line, fixed_resolver):
        """The record accessor passes the resolver through."""
        record = from_str(syslog_line)
        assert record.timestamp(fixed_resolver) == 1568881570.0
