"""
Core data models for cefcodec.

A CEF record is a fixed header of seven pipe-delimited fields followed
by an open-ended extension payload whose shape is chosen by the caller.
"""

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Generic, Mapping, TypeVar

from cefcodec.codec.coercion import U64_MAX, parse_unsigned
from cefcodec.codec.timestamps import TimestampResolver
from cefcodec.core.config import SEVERITY_LABELS, SEVERITY_LEVELS
from cefcodec.core.exceptions import NumericParseError, PayloadError, ValidationError

__all__ = [
    "CefSeverity",
    "CefSignatureId",
    "CefRecord",
]

T = TypeVar("T")


@dataclass(frozen=True)
class CefSeverity:
    """
    Importance of the event.

    Either an integer between 0 and 10 or one of the textual values
    ``Unknown``, ``Low``, ``Medium``, ``High`` and ``Very-High``.
    Integer bands are 0-3 Low, 4-6 Medium, 7-8 High and 9-10 Very-High.
    """
    value: int | str

    def __post_init__(self):
        if isinstance(self.value, bool):
            raise ValidationError("Invalid CEF severity type", field="severity", value=self.value)
        if isinstance(self.value, int):
            if not 0 <= self.value <= 10:
                raise ValidationError(
                    "Invalid CEF severity, MUST be between 0 and 10",
                    field="severity",
                    value=self.value,
                )
        elif isinstance(self.value, str):
            if self.value not in SEVERITY_LEVELS:
                raise ValidationError(
                    "Invalid CEF severity, MUST be one of Unknown, Low, Medium, High or Very-High",
                    field="severity",
                    value=self.value,
                )
        else:
            raise ValidationError("Invalid CEF severity type", field="severity", value=self.value)

    @classmethod
    def from_str(cls, raw: str) -> "CefSeverity":
        """
        Parse a severity token.

        Text that reads as an unsigned byte is numeric, anything else must
        belong to the textual vocabulary.

        Raises:
            ValidationError: If the value is out of range or unknown
        """
        try:
            return cls(parse_unsigned(raw, bits=8))
        except NumericParseError:
            return cls(raw)

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, int)

    @property
    def level(self) -> int:
        """Numeric level; textual severities map to the bottom of their band."""
        if isinstance(self.value, int):
            return self.value
        return SEVERITY_LEVELS[self.value]

    @property
    def label(self) -> str:
        """Textual band for this severity."""
        if isinstance(self.value, str):
            return self.value
        for upper, name in SEVERITY_LABELS:
            if self.value <= upper:
                return name
        return "Unknown"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CefSignatureId:
    """
    Device Event Class ID, a unique identifier per event type.

    Numeric when the raw token fits an unsigned 64-bit integer, text otherwise.
    """
    value: int | str

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, str)):
            raise ValidationError("Invalid signature id type", field="signature_id", value=self.value)
        if isinstance(self.value, int) and not 0 <= self.value <= U64_MAX:
            raise ValidationError(
                "Numeric signature id must fit an unsigned 64-bit integer",
                field="signature_id",
                value=self.value,
            )

    @classmethod
    def from_str(cls, raw: str) -> "CefSignatureId":
        try:
            return cls(parse_unsigned(raw))
        except NumericParseError:
            return cls(raw)

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, int)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CefRecord(Generic[T]):
    """
    A single CEF event: header fields plus the extension payload.

    Attributes:
        headers: Optional transport prefix (e.g. a syslog preamble)
        version: CEF format version, currently 0
        device_vendor: Device vendor
        device_product: Device name
        device_version: Device version
        signature_id: Identifies the type of event reported
        signature: Human-readable description of the event
        severity: Importance of the event
        extensions: Caller-defined payload of key-value pairs
    """
    version: int
    device_vendor: str
    device_product: str
    device_version: str
    signature_id: CefSignatureId
    signature: str
    severity: CefSeverity
    extensions: T
    headers: str | None = None

    def hostname(self) -> str:
        """Hostname carried by the transport prefix."""
        from cefcodec.codec.record import extract_hostname_from_headers

        return extract_hostname_from_headers(self._require_headers())

    def timestamp(self, resolver: TimestampResolver | None = None) -> float:
        """
        Epoch seconds of the transport prefix timestamp.

        Year-less syslog timestamps take their year from ``resolver``'s
        clock, the local clock by default.
        """
        from cefcodec.codec.record import extract_ts_from_headers

        return extract_ts_from_headers(self._require_headers(), resolver)

    def _require_headers(self) -> str:
        from cefcodec.core.exceptions import ParseError

        if self.headers is None:
            raise ParseError("Record has no transport headers", field="headers")
        return self.headers

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON export."""
        result: dict[str, Any] = {}
        if self.headers is not None:
            result["headers"] = self.headers
        result.update({
            "version": self.version,
            "device_vendor": self.device_vendor,
            "device_product": self.device_product,
            "device_version": self.device_version,
            "signature_id": self.signature_id.value,
            "signature": self.signature,
            "severity": self.severity.value,
            "extensions": _payload_to_dict(self.extensions),
        })
        return result


def _payload_to_dict(payload: Any) -> dict[str, Any]:
    if isinstance(payload, Mapping):
        return dict(payload)
    if is_dataclass(payload) and not isinstance(payload, type):
        return asdict(payload)
    if hasattr(payload, "to_dict"):
        return payload.to_dict()
    raise PayloadError(f"Unsupported payload type: {type(payload).__name__}")
