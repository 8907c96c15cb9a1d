"""
Configuration constants and settings for cefcodec.

Centralizes the format constants, input limits and the per-call
codec settings so every entry point enforces them the same way.
"""

from dataclasses import dataclass
from typing import Any, Callable

from cefcodec.core.exceptions import ConfigurationError, ValidationError

__all__ = [
    # Format constants
    "CEF_MARKER",
    "MAX_VERSION",
    "KEY_SEPARATOR",
    "SEVERITY_LABELS",
    "SEVERITY_LEVELS",
    # Limits
    "MAX_LINE_LENGTH",
    # Exceptions
    "LineTooLongError",
    # Settings
    "KeyRewriter",
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Validators
    "validate_line_length",
]


# =============================================================================
# Format Constants
# =============================================================================

CEF_MARKER = "CEF"

# Version is carried as an unsigned byte
MAX_VERSION = 255

# Joins nested payload keys when flattening
KEY_SEPARATOR = "_"

# Textual severities and the level each one maps to
SEVERITY_LEVELS: dict[str, int] = {
    "Unknown": 0,
    "Low": 1,
    "Medium": 4,
    "High": 7,
    "Very-High": 9,
}

# Numeric severity bands, inclusive upper bounds
SEVERITY_LABELS: tuple[tuple[int, str], ...] = (
    (3, "Low"),
    (6, "Medium"),
    (8, "High"),
    (10, "Very-High"),
)


# =============================================================================
# Limits
# =============================================================================

MAX_LINE_LENGTH = 1024 * 1024  # 1MB


class LineTooLongError(ValidationError):
    """Raised when a CEF line exceeds the configured maximum length."""

    def __init__(self, line_length: int, max_length: int = MAX_LINE_LENGTH):
        super().__init__(
            f"Line length ({line_length:,} bytes) exceeds maximum allowed "
            f"({max_length:,} bytes)",
            field="line",
        )
        self.details["line_length"] = line_length
        self.details["max_length"] = max_length
        self.line_length = line_length
        self.max_length = max_length


def validate_line_length(line: str, max_length: int = MAX_LINE_LENGTH) -> str:
    """
    Validate that a line does not exceed the maximum allowed length.

    Args:
        line: The line to validate
        max_length: Maximum allowed length in bytes

    Returns:
        The original line if valid

    Raises:
        LineTooLongError: If line exceeds max_length
    """
    line_length = len(line.encode("utf-8", errors="replace"))
    if line_length > max_length:
        raise LineTooLongError(line_length, max_length)
    return line


# =============================================================================
# Settings
# =============================================================================

KeyRewriter = Callable[[str, Any], str]


@dataclass(frozen=True)
class CodecConfig:
    """
    Settings shared by the parse and serialize entry points.

    Attributes:
        separator: Joins nested payload keys when flattening
        key_rewriter: Optional naming convention applied to each flattened key
        strict_extensions: Raise instead of dropping a malformed extension segment
        max_line_length: Reject longer input lines
    """
    separator: str = KEY_SEPARATOR
    key_rewriter: KeyRewriter | None = None
    strict_extensions: bool = False
    max_line_length: int = MAX_LINE_LENGTH

    def __post_init__(self):
        if not self.separator or "=" in self.separator or " " in self.separator:
            raise ConfigurationError(
                f"Invalid key separator: {self.separator!r}",
                config_key="separator",
            )
        if self.key_rewriter is not None and not callable(self.key_rewriter):
            raise ConfigurationError(
                "key_rewriter must be callable",
                config_key="key_rewriter",
            )
        if self.max_line_length <= 0:
            raise ConfigurationError(
                f"max_line_length must be positive, got {self.max_line_length}",
                config_key="max_line_length",
            )


DEFAULT_CONFIG = CodecConfig()
