"""
cefcodec - Parse and serialize Common Event Format (CEF) log lines.

CEF records are a pipe-delimited header followed by an open-ended set of
``key=value`` extensions::

    Sep 19 08:26:10 host CEF:0|Security|threatmanager|1.0|100|worm successfully stopped|10|src=10.0.0.1 dst=2.1.2.2 spt=1232

Usage:
    from cefcodec import from_str, to_string

    # Parse into a dict payload, value types are inferred
    record = from_str(line)
    record.extensions  # {"src": "10.0.0.1", "dst": "2.1.2.2", "spt": 1232}

    # Parse into a dataclass payload
    record = from_str(line, Connection)

    # Serialize back
    to_string(record)

    # Resolve a timestamp in any supported format
    from cefcodec import parse_ts
    parse_ts("26/Jun/2019:15:21:55.152120022 +0200")
"""

__version__ = "0.1.0"

from cefcodec.core.models import (
    CefRecord,
    CefSeverity,
    CefSignatureId,
)
from cefcodec.core.exceptions import (
    CefError,
    ParseError,
    MalformedExtensionError,
    NumericParseError,
    DateParseError,
    EncodingError,
    PayloadError,
    ValidationError,
    ConfigurationError,
)
from cefcodec.core.config import CodecConfig, LineTooLongError
from cefcodec.codec.coercion import ScalarKind, coerce, detect_kind
from cefcodec.codec.timestamps import TimestampResolver, parse_ts, now
from cefcodec.codec.extensions import parse_extensions
from cefcodec.codec.payload import ldp_key_rewriter
from cefcodec.codec.record import (
    from_str,
    from_bytes,
    to_string,
    to_bytes,
    extract_hostname_from_headers,
    extract_ts_from_headers,
)

__all__ = [
    # Version
    "__version__",
    # Core models
    "CefRecord",
    "CefSeverity",
    "CefSignatureId",
    "ScalarKind",
    # Exceptions
    "CefError",
    "ParseError",
    "MalformedExtensionError",
    "NumericParseError",
    "DateParseError",
    "EncodingError",
    "PayloadError",
    "ValidationError",
    "ConfigurationError",
    "LineTooLongError",
    # Configuration
    "CodecConfig",
    "ldp_key_rewriter",
    # Codec
    "from_str",
    "from_bytes",
    "to_string",
    "to_bytes",
    "parse_extensions",
    "coerce",
    "detect_kind",
    # Timestamps
    "TimestampResolver",
    "parse_ts",
    "now",
    "extract_hostname_from_headers",
    "extract_ts_from_headers",
]
