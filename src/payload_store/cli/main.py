"""
payload-store CLI — `payload-store` command.

Commands:
  payload-store encode <file>        Print a file as a data URL
  payload-store decode <data-url>    Show or write the bytes of a data URL
  payload-store inspect <record>     Show the stored payload of a request record
  payload-store restore <record>     Restore a stored payload and summarise it
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install payload-store[cli]")

from payload_store import __version__
from payload_store.codec import data_url
from payload_store.errors import PayloadStoreError
from payload_store.models.blob import PathBlob

console = Console()


def _load_record(path: str) -> dict:
    try:
        record = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        console.print(f"[red]{path} is not valid JSON: {e}[/red]")
        raise SystemExit(1)
    if not isinstance(record, dict):
        console.print(f"[red]{path} does not hold a request object.[/red]")
        raise SystemExit(1)
    return record


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose):
    """payload-store CLI — inspect and convert stored request payloads."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--type", "media_type", default=None, help="Media type (guessed from the file name by default).")
def encode(file, media_type):
    """Print FILE as a data URL."""
    blob = PathBlob(file, type=media_type or "")
    try:
        click.echo(_run(data_url.encode(blob)))
    except PayloadStoreError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


@main.command()
@click.argument("value")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None)
def decode(value, output):
    """Decode a data URL, optionally writing its bytes to OUTPUT."""
    try:
        media_type, data = data_url.parse(value)
    except PayloadStoreError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    console.print(f"[bold]Media type:[/bold] {media_type}")
    console.print(f"[bold]Size:[/bold] {len(data)} bytes")
    if output:
        Path(output).write_bytes(data)
        console.print(f"[green]Written to {output}[/green]")


# Register subcommands from separate modules
from payload_store.cli.records import inspect, restore

main.add_command(inspect)
main.add_command(restore)


if __name__ == "__main__":
    main()
