"""
AirScope CLI
=============

Click-based command-line interface for AirScope.

Commands:
    airscope snapshot CAPTURE_FILE    Build a wireless snapshot from a capture
    airscope decode HEX               Decode one raw IE buffer

Common options:
    --config PATH       Configuration file (TOML)
    --quiet             Suppress console output

References:
    - Click Documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Optional

import click
from rich.markup import escape

from shared.config import AirScopeConfig
from shared.console import ScopeConsole
from shared.logger import configure_logging

from airscope import __version__

EXIT_NO_INTERFACE = 2


# ---------------------------------------------------------------------------
# Async helper
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run a coroutine to completion from a synchronous Click command."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------


@click.group(
    name="airscope",
    help=(
        "AIRSCOPE - Wireless Environment Inspector\n\n"
        "Decode 802.11 Information Elements and build vendor-enriched "
        "snapshots of the connected network and its neighbours."
    ),
)
@click.version_option(__version__, prog_name="airscope")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to AirScope configuration file (TOML).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress console output.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], quiet: bool) -> None:
    """AirScope - main CLI entry point."""
    ctx.ensure_object(dict)

    try:
        config = AirScopeConfig.load(config_path)
    except FileNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    settings = config.global_settings
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
        console_output=not quiet,
    )

    ctx.obj["config"] = config
    ctx.obj["console"] = ScopeConsole(quiet=quiet)
    ctx.obj["quiet"] = quiet


# ---------------------------------------------------------------------------
# Snapshot Command
# ---------------------------------------------------------------------------


@cli.command(
    name="snapshot",
    help=(
        "Build a wireless snapshot.\n\n"
        "Reads interface state and scan results from CAPTURE_FILE (JSON), "
        "decodes the connected network's Information Elements and "
        "resolves the vendor of every visible access point."
    ),
)
@click.argument("capture_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--interface", "-i",
    "interface_name",
    type=str,
    default=None,
    help="Interface name to report on (default: the capture's interface).",
)
@click.option(
    "--offline",
    is_flag=True,
    default=False,
    help="Resolve vendors from the built-in OUI table only.",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print the snapshot as JSON.",
)
@click.pass_context
def snapshot(
    ctx: click.Context,
    capture_file: str,
    interface_name: Optional[str],
    offline: bool,
    as_json: bool,
) -> None:
    """Build and display one wireless snapshot."""
    config = ctx.obj["config"]
    console = ctx.obj["console"]

    from airscope.collectors.interface import CaptureFileInterface, CaptureFormatError
    from airscope.core.engine import AirScopeEngine
    from airscope.output.console import AirScopeConsoleOutput

    async def _build():
        async with AirScopeEngine(config, offline=offline) as engine:
            return await engine.snapshot(
                CaptureFileInterface(capture_file), interface_name
            )

    try:
        if as_json:
            result = _run_async(_build())
        else:
            with console.status("Resolving vendors..."):
                result = _run_async(_build())
    except CaptureFormatError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    if result is None:
        console.error("No active wireless interface")
        sys.exit(EXIT_NO_INTERFACE)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    AirScopeConsoleOutput(console).display_snapshot(result)
    if not result.vendor:
        console.warning(f"Vendor lookup failed for {escape(result.bssid)}")
    console.success(
        f"Snapshot complete: {len(result.nearby_networks)} nearby network(s)"
    )


# ---------------------------------------------------------------------------
# Decode Command
# ---------------------------------------------------------------------------


@cli.command(
    name="decode",
    help=(
        "Decode a raw Information Element buffer.\n\n"
        "HEX is the IE chain of a beacon or probe response; spaces and "
        "colons are ignored."
    ),
)
@click.argument("hex_buffer", metavar="HEX")
@click.option(
    "--channel", "-c",
    type=int,
    default=0,
    show_default=True,
    help="Primary channel, for secondary-channel geometry.",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print the decode as JSON.",
)
@click.pass_context
def decode(ctx: click.Context, hex_buffer: str, channel: int, as_json: bool) -> None:
    """Decode one IE buffer."""
    console = ctx.obj["console"]

    from airscope.output.console import AirScopeConsoleOutput
    from airscope.parsers.ie_parser import decode_report, parse_elements

    cleaned = "".join(hex_buffer.split()).replace(":", "")
    try:
        buffer = bytes.fromhex(cleaned)
    except ValueError as exc:
        raise click.BadParameter(
            "must be an even-length hexadecimal string", param_hint="HEX"
        ) from exc

    elements = parse_elements(buffer)
    report = decode_report(buffer, channel)

    if as_json:
        payload = {
            "elements": [
                {"id": e.id, "name": e.name, "length": len(e.payload),
                 "payload": e.payload.hex()}
                for e in elements
            ],
            "report": report.model_dump(mode="json"),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    AirScopeConsoleOutput(console).display_decode(elements, report)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the AirScope CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
