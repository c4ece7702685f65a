"""CLI: payload-store inspect|restore"""

import json

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from payload_store.codec import data_url
from payload_store.config import ProcessorConfig, RestorePolicy, load_config
from payload_store.errors import PayloadStoreError
from payload_store.models.blob import Blob
from payload_store.models.form import FormData
from payload_store.models.part import PartRecord
from payload_store.processor import BLOB, MULTIPART, PAYLOAD, from_storable

console = Console()


def _load_record(path: str) -> dict:
    from payload_store.cli.main import _load_record
    return _load_record(path)


def _run(coro):
    from payload_store.cli.main import _run
    return _run(coro)


def _data_url_summary(value: str) -> dict:
    try:
        media_type, data = data_url.parse(value)
    except PayloadStoreError as e:
        return {"error": str(e)}
    return {"type": media_type, "size": len(data)}


def _summary_cells(summary: dict) -> tuple[str, str]:
    if "error" in summary:
        return "", f"[red]invalid: {summary['error']}[/red]"
    return summary["type"], str(summary["size"])


@click.command()
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "--json", is_flag=True)
def inspect(record_file, json_output):
    """Show the stored payload of a request record."""
    record = _load_record(record_file)

    if record.get(MULTIPART) is not None:
        try:
            parts = [PartRecord.model_validate(p) for p in record[MULTIPART]]
        except ValidationError as e:
            console.print(f"[red]Malformed multipart records: {e}[/red]")
            raise SystemExit(1)
        if json_output:
            click.echo(json.dumps([p.to_storable() for p in parts], indent=2))
            return
        table = Table(title=f"Multipart payload ({len(parts)} parts)")
        table.add_column("Name", style="bold")
        table.add_column("Kind")
        table.add_column("File name")
        table.add_column("Media type")
        table.add_column("Size")
        for p in parts:
            if p.is_file:
                kind = "file"
            elif p.is_text_blob_field:
                kind = "text blob"
            else:
                table.add_row(p.name, "text", "", "", str(len(p.value.encode("utf-8"))))
                continue
            media_type, size = _summary_cells(_data_url_summary(p.value))
            table.add_row(p.name, kind, p.file_name or "", media_type, size)
        console.print(table)
    elif record.get(BLOB) is not None:
        summary = _data_url_summary(record[BLOB])
        if json_output:
            click.echo(json.dumps(summary))
            return
        media_type, size = _summary_cells(summary)
        console.print(f"[bold]Blob payload[/bold] {media_type} ({size} bytes)")
    elif isinstance(record.get(PAYLOAD), str):
        console.print(f"[bold]Text payload[/bold] ({len(record[PAYLOAD])} chars)")
    else:
        console.print("[dim]No payload.[/dim]")


@click.command()
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--policy", type=click.Choice([p.value for p in RestorePolicy]), default=None,
    help="Restore policy for values that fail to decode (default: from config).",
)
def restore(record_file, policy):
    """Restore a stored payload and summarise the result."""
    record = _load_record(record_file)
    config = ProcessorConfig(restore_policy=policy) if policy else load_config()
    try:
        restored = from_storable(record, config)
    except PayloadStoreError as e:
        console.print(f"[red]Restore failed: {e}[/red]")
        raise SystemExit(1)

    payload = restored.get(PAYLOAD)
    if isinstance(payload, FormData):
        table = Table(title=f"Restored form ({len(payload)} fields)")
        table.add_column("Name", style="bold")
        table.add_column("Value")
        table.add_column("File name")
        for name, value, filename in payload.entries():
            if isinstance(value, Blob):
                shown = f"<{value.type} {value.size} bytes>"
                if name in payload.text_parts:
                    shown = _run(value.read()).decode("utf-8", errors="replace")
            else:
                shown = value
            table.add_row(name, shown, filename or "")
        console.print(table)
    elif isinstance(payload, Blob):
        console.print(f"[green]Restored blob[/green] {payload.type} ({payload.size} bytes)")
    elif BLOB in restored or MULTIPART in restored:
        console.print("[yellow]Stored payload kept as is; it could not be decoded.[/yellow]")
    else:
        console.print("[dim]Nothing to restore.[/dim]")
