"""
CLI command implementations.

Each command returns an exit code so the click layer stays thin.
"""

import json
from typing import Iterable, TextIO

from rich.console import Console

from cefcodec.cli.output import render_records
from cefcodec.codec.payload import ldp_key_rewriter
from cefcodec.codec.record import from_str, to_string
from cefcodec.codec.timestamps import parse_ts
from cefcodec.core.config import CodecConfig
from cefcodec.core.exceptions import CefError
from cefcodec.core.models import CefRecord, CefSeverity, CefSignatureId

__all__ = ["parse_command", "timestamp_command", "serialize_command", "record_from_dict"]


def parse_command(
    lines: Iterable[str],
    output_format: str,
    strict: bool,
    quiet: bool,
    console: Console,
    error_console: Console,
) -> int:
    """
    Parse CEF lines and render the records.

    Returns:
        Exit code (0 = success, 1 = at least one line failed)
    """
    records = []
    failures = 0
    for number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            records.append(from_str(line, strict=strict))
        except CefError as e:
            failures += 1
            error_console.print(f"[red]Line {number}:[/red] {e}")

    if records:
        render_records(records, output_format, console)
    elif not quiet:
        error_console.print("[yellow]No records parsed[/yellow]")

    return 1 if failures else 0


def timestamp_command(raw: str, console: Console, error_console: Console) -> int:
    """Resolve a timestamp token and print epoch seconds."""
    try:
        console.print(repr(parse_ts(raw)), highlight=False)
    except CefError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        return 1
    return 0


def record_from_dict(data: dict) -> CefRecord:
    """
    Build a record from its JSON form.

    Raises:
        CefError: If a field is invalid
        KeyError: If a required field is missing
    """
    return CefRecord(
        headers=data.get("headers"),
        version=data.get("version", 0),
        device_vendor=data["device_vendor"],
        device_product=data["device_product"],
        device_version=data["device_version"],
        signature_id=CefSignatureId(data["signature_id"]),
        signature=data["signature"],
        severity=CefSeverity(data["severity"]),
        extensions=data.get("extensions", {}),
    )


def serialize_command(
    source: TextIO,
    ldp: bool,
    console: Console,
    error_console: Console,
) -> int:
    """
    Read a JSON record and print its CEF line.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        data = json.load(source)
    except json.JSONDecodeError as e:
        error_console.print(f"[red]Invalid JSON:[/red] {e}")
        return 1

    if not isinstance(data, dict):
        error_console.print("[red]Error:[/red] expected a JSON object")
        return 1

    config = CodecConfig(key_rewriter=ldp_key_rewriter if ldp else None)
    try:
        line = to_string(record_from_dict(data), config)
    except KeyError as e:
        error_console.print(f"[red]Missing field:[/red] {e.args[0]}")
        return 1
    except CefError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        return 1

    console.print(line, highlight=False, markup=False, emoji=False, soft_wrap=True)
    return 0
