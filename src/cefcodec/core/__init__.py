"""
Core data models, configuration and exceptions for cefcodec.
"""

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
from cefcodec.core.config import (
    CEF_MARKER,
    MAX_LINE_LENGTH,
    MAX_VERSION,
    KEY_SEPARATOR,
    LineTooLongError,
    CodecConfig,
    DEFAULT_CONFIG,
    validate_line_length,
)
from cefcodec.core.models import (
    CefSeverity,
    CefSignatureId,
    CefRecord,
)

__all__ = [
    "CefSeverity",
    "CefSignatureId",
    "CefRecord",
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
    # Configuration
    "CEF_MARKER",
    "MAX_LINE_LENGTH",
    "MAX_VERSION",
    "KEY_SEPARATOR",
    "LineTooLongError",
    "CodecConfig",
    "DEFAULT_CONFIG",
    "validate_line_length",
]
