"""
Output formatters for CLI.
"""

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cefcodec.core.models import CefRecord

__all__ = ["render_records", "render_table", "render_json"]


# Severity band color mapping for Rich
SEVERITY_STYLES = {
    "Unknown": "white",
    "Low": "green",
    "Medium": "yellow",
    "High": "red",
    "Very-High": "red bold reverse",
}


def render_records(
    records: list[CefRecord],
    output_format: str,
    console: Console,
) -> None:
    """
    Render records in the specified format.

    Args:
        records: Parsed records to render
        output_format: One of "table", "json"
        console: Rich Console for output
    """
    match output_format:
        case "json":
            render_json(records, console)
        case _:
            render_table(records, console)


def render_table(records: list[CefRecord], console: Console) -> None:
    """Render each record as a Rich table of fields and extensions."""
    for record in records:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Field", style="cyan", width=20)
        table.add_column("Value", overflow="fold")

        if record.headers is not None:
            table.add_row("headers", escape(record.headers.rstrip()))
        table.add_row("version", str(record.version))
        table.add_row("device_vendor", escape(record.device_vendor))
        table.add_row("device_product", escape(record.device_product))
        table.add_row("device_version", escape(record.device_version))
        table.add_row("signature_id", escape(str(record.signature_id)))
        table.add_row("signature", escape(record.signature))

        style = SEVERITY_STYLES.get(record.severity.label, "white")
        table.add_row("severity", f"[{style}]{record.severity}[/{style}]")

        for key, value in record.to_dict()["extensions"].items():
            rendered = value if isinstance(value, str) else repr(value)
            table.add_row(f"[dim]{escape(key)}[/dim]", escape(rendered))

        console.print(table)

    console.print(f"\n[dim]Total: {len(records)} records[/dim]")


def render_json(records: list[CefRecord], console: Console) -> None:
    """Render records as JSON."""
    output = [record.to_dict() for record in records]
    json_str = json.dumps(output, indent=2, default=str)
    console.print(json_str, highlight=False, markup=False, emoji=False, soft_wrap=True)
