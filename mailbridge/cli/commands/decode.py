"""Decode command: turn a saved provider message into the canonical model."""

import json
from pathlib import Path

import typer
from typing_extensions import Annotated

from mailbridge.codec.addresses import format_address, format_address_list
from mailbridge.codec.rfc822 import decode_raw_message
from mailbridge.config import load_config, settings_from_config
from mailbridge.core.errors import MailbridgeError
from mailbridge.core.models import Email
from mailbridge.gmail.convert import convert_message as convert_gmail
from mailbridge.outlook.convert import convert_message as convert_outlook

app = typer.Typer(help="Decode a saved Gmail, Graph or raw message")

PROVIDERS = ("gmail", "outlook", "raw")
OUTPUTS = ("json", "text")


def _decode(path: Path, provider: str, max_depth: int) -> Email:
    if provider == "raw":
        return decode_raw_message(path.read_bytes())

    msg = json.loads(path.read_text(encoding="utf-8"))
    if provider == "gmail":
        return convert_gmail(msg, max_depth=max_depth)
    return convert_outlook(msg)


def _print_text(email: Email) -> None:
    typer.echo(f"From: {format_address(email.from_)}")
    for name, addrs in (("To", email.to), ("Cc", email.cc), ("Bcc", email.bcc)):
        if addrs:
            typer.echo(f"{name}: {format_address_list(addrs)}")
    typer.echo(f"Date: {email.date.isoformat() if email.date else '(unknown)'}")
    typer.echo(f"Subject: {email.subject}")
    if email.labels:
        typer.echo(f"Labels: {', '.join(sorted(email.labels))}")
    typer.echo()
    typer.echo(email.body.text or email.body.html or "")

    if email.attachments:
        typer.echo()
        typer.echo("Attachments:")
        for att in email.attachments:
            typer.echo(f"  {att.filename} ({att.mime_type}, {att.size} bytes)")


@app.callback(invoke_without_command=True)
def decode(
    path: Annotated[Path, typer.Argument(help="Message file (JSON resource or .eml)")],
    provider: Annotated[
        str, typer.Option("--provider", "-p", help="Input format: gmail, outlook, raw")
    ] = "gmail",
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format: json, text")
    ] = "text",
):
    """Decode a saved message and print it."""
    if provider not in PROVIDERS:
        typer.echo(f"Invalid provider: {provider}", err=True)
        raise typer.Exit(1)
    if output not in OUTPUTS:
        typer.echo(f"Invalid output format: {output}", err=True)
        raise typer.Exit(1)
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1)

    try:
        settings = settings_from_config(load_config())
        email = _decode(path, provider, settings.max_tree_depth)
    except (MailbridgeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        typer.echo(f"Failed to decode {path}: {e}", err=True)
        raise typer.Exit(1)

    if output == "json":
        typer.echo(json.dumps(email.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_text(email)
