"""
Main CLI entry point for cefcodec.
"""

import click
from rich.console import Console

from cefcodec import __version__

console = Console()
error_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="cefcodec")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx: click.Context, quiet: bool) -> None:
    """
    cefcodec - Common Event Format codec

    Parse CEF lines into typed records and serialize them back.

    Examples:

    \b
        cefcodec parse 'CEF:0|Security|threatmanager|1.0|100|worm stopped|10|src=10.0.0.1'
        tail -n 20 cef.log | cefcodec parse --output json -
        cefcodec timestamp '26/Jun/2019:15:21:55.152120022 +0200'
        cefcodec serialize --ldp record.json
    """
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = console
    ctx.obj["error_console"] = error_console


@cli.command()
@click.argument("lines", nargs=-1)
@click.option(
    "--output", "-o", "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)"
)
@click.option(
    "--strict", is_flag=True,
    help="Fail on malformed extension segments instead of dropping them"
)
@click.pass_context
def parse(
    ctx: click.Context,
    lines: tuple[str, ...],
    output_format: str,
    strict: bool,
) -> None:
    """
    Parse CEF lines and display the records.

    Pass lines as arguments, or "-" (or nothing) to read stdin.
    """
    from cefcodec.cli.commands import parse_command

    if not lines or lines == ("-",):
        lines = tuple(click.get_text_stream("stdin"))

    exit_code = parse_command(
        lines=lines,
        output_format=output_format,
        strict=strict,
        quiet=ctx.obj.get("quiet", False),
        console=ctx.obj["console"],
        error_console=ctx.obj["error_console"],
    )
    ctx.exit(exit_code)


@cli.command()
@click.argument("raw")
@click.pass_context
def timestamp(ctx: click.Context, raw: str) -> None:
    """
    Resolve a timestamp to epoch seconds.

    Accepts epoch numbers, syslog, RFC 3339 and english log timestamps.
    """
    from cefcodec.cli.commands import timestamp_command

    ctx.exit(timestamp_command(raw, ctx.obj["console"], ctx.obj["error_console"]))


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option("--ldp", is_flag=True, help="Apply the LDP field naming convention")
@click.pass_context
def serialize(ctx: click.Context, source, ldp: bool) -> None:
    """
    Serialize a JSON record to a CEF line.

    The JSON object holds the header fields and an "extensions" object.
    """
    from cefcodec.cli.commands import serialize_command

    ctx.exit(serialize_command(source, ldp, ctx.obj["console"], ctx.obj["error_console"]))


if __name__ == "__main__":
    cli()
