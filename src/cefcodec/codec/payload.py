"""
Mapping between ordered extension pairs and the caller's payload type.

Parse direction: raw (key, value) pairs become a ``dict`` (open, every
key kept), a dataclass (closed, unknown keys rejected), a ``Mapping``
subclass, or any type exposing a ``from_dict`` classmethod.

Serialize direction: a mapping, dataclass or object with ``to_dict()``
is flattened depth-first into (key, scalar) pairs, nested keys joined
with the configured separator.
"""

import types
from dataclasses import MISSING, asdict, fields, is_dataclass
from typing import Any, Mapping, Union, get_args, get_origin, get_type_hints

from cefcodec.codec.coercion import coerce
from cefcodec.core.config import KEY_SEPARATOR, KeyRewriter
from cefcodec.core.exceptions import PayloadError, ValidationError

__all__ = [
    "build_payload",
    "flatten_payload",
    "ldp_key_rewriter",
]


SCALAR_TYPES = (bool, int, float, str)


def build_payload(
    pairs: list[tuple[str, str]],
    payload_type: Any = None,
    separator: str = KEY_SEPARATOR,
) -> Any:
    """
    Reconstruct a payload from raw extension pairs.

    Args:
        pairs: Ordered (key, raw value) pairs
        payload_type: Target type; ``None`` means ``dict``
        separator: Prefix separator for nested dataclass fields

    Returns:
        Payload instance

    Raises:
        PayloadError: If the pairs do not fit the payload type
    """
    if payload_type is None or payload_type is dict:
        return {key: coerce(raw) for key, raw in pairs}

    if is_dataclass(payload_type) and isinstance(payload_type, type):
        remaining = dict(pairs)
        payload = _build_dataclass(payload_type, remaining, "", separator)
        if remaining:
            raise PayloadError(
                f"Unknown extension keys for {payload_type.__name__}",
                details={"unknown": sorted(remaining)},
            )
        return payload

    typed = {key: coerce(raw) for key, raw in pairs}
    if isinstance(payload_type, type) and issubclass(payload_type, Mapping):
        return payload_type(typed)

    from_dict = getattr(payload_type, "from_dict", None)
    if callable(from_dict):
        try:
            return from_dict(typed)
        except (TypeError, ValueError, KeyError) as e:
            raise PayloadError(f"Unable to build {payload_type!r}: {e}") from e

    raise PayloadError(f"Unsupported payload type: {payload_type!r}")


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``X | None`` into (X, True)."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        optional = len(args) < len(get_args(annotation))
        if len(args) == 1:
            return args[0], optional
        return Union[tuple(args)], optional
    return annotation, False


def _build_dataclass(cls: type, remaining: dict[str, str], prefix: str, separator: str) -> Any:
    hints = get_type_hints(cls)
    kwargs: dict[str, Any] = {}

    for f in fields(cls):
        if not f.init:
            continue

        key = f"{prefix}{f.name}"
        annotation, optional = _unwrap_optional(hints.get(f.name, Any))
        has_default = f.default is not MISSING or f.default_factory is not MISSING

        if is_dataclass(annotation) and isinstance(annotation, type):
            nested = f"{key}{separator}"
            if any(name.startswith(nested) for name in remaining):
                kwargs[f.name] = _build_dataclass(annotation, remaining, nested, separator)
            elif optional and not has_default:
                kwargs[f.name] = None
            elif not has_default:
                raise PayloadError(f"Missing extension field {key!r}", key=key)
            continue

        if key in remaining:
            kwargs[f.name] = _convert(remaining.pop(key), annotation, key)
        elif optional and not has_default:
            kwargs[f.name] = None
        elif not has_default:
            raise PayloadError(f"Missing extension field {key!r}", key=key)

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"Unable to build {cls.__name__}: {e}") from e


def _convert(raw: str, annotation: Any, key: str) -> Any:
    """Convert a raw value for a field annotated ``annotation``."""
    if annotation is str:
        return raw

    value = coerce(raw)
    if annotation is Any or annotation is object:
        return value

    if annotation is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif annotation is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif annotation is bool:
        if isinstance(value, bool):
            return value
    elif get_origin(annotation) is Union:
        members = get_args(annotation)
        if str in members and not isinstance(value, members):
            return raw
        if isinstance(value, members):
            return value
    elif isinstance(annotation, type) and isinstance(value, annotation):
        return value

    raise PayloadError(
        f"Invalid type for extension field {key!r}",
        key=key,
        details={"expected": getattr(annotation, "__name__", repr(annotation)), "raw": raw},
    )


def _as_mapping(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        return payload
    if is_dataclass(payload) and not isinstance(payload, type):
        return asdict(payload)
    to_dict = getattr(payload, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise PayloadError(f"Unsupported payload type: {type(payload).__name__}")


def flatten_payload(
    payload: Any,
    separator: str = KEY_SEPARATOR,
    key_rewriter: KeyRewriter | None = None,
) -> list[tuple[str, Any]]:
    """
    Flatten a payload into ordered (key, scalar) pairs.

    ``None`` leaves are skipped.

    Raises:
        PayloadError: If payload is not a mapping, dataclass or ``to_dict`` object
        ValidationError: If a leaf is not a scalar or a key is not a valid token
    """
    out: list[tuple[str, Any]] = []
    _flatten(_as_mapping(payload), "", separator, out)

    if key_rewriter is not None:
        out = [(key_rewriter(key, value), value) for key, value in out]

    for key, _ in out:
        if not key or "=" in key or any(ch.isspace() for ch in key):
            raise ValidationError(f"Invalid extension key: {key!r}", field="extensions", value=key)
    return out


def _flatten(data: Mapping[str, Any], prefix: str, separator: str, out: list) -> None:
    for name, value in data.items():
        key = f"{prefix}{separator}{name}" if prefix else str(name)
        if value is None:
            continue
        if isinstance(value, Mapping):
            _flatten(value, key, separator, out)
        elif is_dataclass(value) and not isinstance(value, type):
            _flatten(asdict(value), key, separator, out)
        elif isinstance(value, SCALAR_TYPES):
            out.append((key, value))
        else:
            raise ValidationError(
                f"Invalid data: {type(value).__name__} is not a scalar",
                field=key,
                value=repr(value),
            )


def ldp_key_rewriter(key: str, value: Any) -> str:
    """
    Logs Data Platform field naming convention.

    Numbers are suffixed ``_double`` and booleans ``_bool``; strings keep
    their key.
    """
    if isinstance(value, bool):
        suffix = "_bool"
    elif isinstance(value, (int, float)):
        suffix = "_double"
    else:
        return key
    if key.endswith(suffix):
        return key
    return f"{key}{suffix}"
