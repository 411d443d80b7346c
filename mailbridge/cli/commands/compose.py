"""Compose command: build a raw message from a JSON draft file.

Draft file format:

    {
        "to": ["bob@example.com", {"email": "c@example.com", "name": "Carol"}],
        "subject": "Hello",
        "text": "Plain body",
        "html": "<p>HTML body</p>",
        "headers": {"X-Tracking": "1"},
        "attachments": ["report.pdf"]
    }

Attachment paths are resolved relative to the draft file.
"""

import json
import mimetypes
from pathlib import Path

import typer
from typing_extensions import Annotated

from mailbridge.codec.addresses import parse_address
from mailbridge.codec.compose import compose_message, encode_for_transport
from mailbridge.codec.validate import validate_draft
from mailbridge.config import load_config, settings_from_config
from mailbridge.core.errors import MailbridgeError
from mailbridge.core.models import Attachment, Draft, EmailAddress, EmailBody

app = typer.Typer(help="Validate and compose a draft into an RFC 2822 message")


def _address(value) -> EmailAddress:
    if isinstance(value, dict):
        return EmailAddress(email=value.get("email", ""), name=value.get("name"))
    return parse_address(str(value))


def _attachment(path: Path) -> Attachment:
    mime_type, _ = mimetypes.guess_type(path.name)
    return Attachment(
        filename=path.name,
        mime_type=mime_type or "application/octet-stream",
        data=path.read_bytes(),
    )


def load_draft(path: Path) -> Draft:
    """Build a Draft from a JSON draft file.

    Raises:
        ValueError: If the file is not valid JSON or not an object.
        OSError: If an attachment cannot be read.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("draft file must contain a JSON object")

    return Draft(
        to=[_address(a) for a in data.get("to", [])],
        cc=[_address(a) for a in data.get("cc", [])],
        bcc=[_address(a) for a in data.get("bcc", [])],
        reply_to=[_address(a) for a in data.get("reply_to", [])],
        subject=data.get("subject", ""),
        body=EmailBody(text=data.get("text"), html=data.get("html")),
        attachments=[_attachment(path.parent / p) for p in data.get("attachments", [])],
        headers=dict(data.get("headers", {})),
    )


@app.callback(invoke_without_command=True)
def compose(
    path: Annotated[Path, typer.Argument(help="JSON draft file")],
    encoded: Annotated[
        bool, typer.Option("--encoded", help="Print Gmail's base64url envelope")
    ] = False,
    validate_only: Annotated[
        bool, typer.Option("--validate-only", help="Only check the draft")
    ] = False,
):
    """Validate a draft and print the composed message."""
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1)

    try:
        draft = load_draft(path)
        if validate_only:
            validate_draft(draft)
            typer.echo("Draft is valid")
            return

        settings = settings_from_config(load_config())
        raw = compose_message(
            draft,
            sender=settings.sender,
            message_id_host=settings.message_id_host,
        )
    except (MailbridgeError, ValueError, OSError) as e:
        typer.echo(f"Invalid draft: {e}", err=True)
        raise typer.Exit(1)

    if encoded:
        typer.echo(encode_for_transport(raw))
    else:
        typer.echo(raw.decode("utf-8"), nl=False)
