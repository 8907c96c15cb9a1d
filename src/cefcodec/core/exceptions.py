"""
Custom exceptions for cefcodec.
"""

__all__ = [
    "CefError",
    "ParseError",
    "MalformedExtensionError",
    "NumericParseError",
    "DateParseError",
    "EncodingError",
    "PayloadError",
    "ValidationError",
    "ConfigurationError",
]


class CefError(Exception):
    """Base exception for all cefcodec errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ParseError(CefError):
    """Raised when a line does not match the CEF grammar."""

    def __init__(
        self,
        message: str,
        line: str | None = None,
        field: str | None = None,
    ):
        details = {}
        if line is not None:
            details["line"] = line[:100] + "..." if len(line) > 100 else line
        if field is not None:
            details["field"] = field
        super().__init__(message, details)
        self.line = line
        self.field = field


class MalformedExtensionError(ParseError):
    """Raised in strict mode when the extension segment has a dangling key or value."""

    def __init__(self, segment: str, token_count: int):
        super().__init__(
            f"Extension segment yields an odd number of tokens ({token_count})",
            line=segment,
            field="extensions",
        )
        self.token_count = token_count


class NumericParseError(CefError):
    """Raised when an integer or float conversion fails."""

    def __init__(self, message: str, raw: str | None = None):
        details = {}
        if raw is not None:
            details["raw"] = raw
        super().__init__(message, details)
        self.raw = raw


class DateParseError(CefError):
    """
    Raised when no timestamp format matched.

    Only the failure of the last attempted format is reported; it is
    also chained as ``__cause__``.
    """

    def __init__(self, raw: str, format_name: str, reason: str):
        super().__init__(
            f"Unable to parse timestamp {raw!r}",
            {"format": format_name, "reason": reason},
        )
        self.raw = raw
        self.format_name = format_name
        self.reason = reason


class EncodingError(CefError):
    """Raised when input bytes are not valid UTF-8."""


class PayloadError(CefError):
    """Raised when the extension payload cannot be built or flattened."""

    def __init__(self, message: str, key: str | None = None, details: dict | None = None):
        details = dict(details or {})
        if key is not None:
            details["key"] = key
        super().__init__(message, details)
        self.key = key


class ValidationError(CefError):
    """Raised when a value is well-formed but outside the allowed domain."""

    def __init__(self, message: str, field: str | None = None, value: object = None):
        details = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigurationError(CefError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {}
        if config_key is not None:
            details["config_key"] = config_key
        super().__init__(message, details)
        self.config_key = config_key
