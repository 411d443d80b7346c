"""Compose validated drafts into raw RFC 2822 messages.

Structure chosen per draft:

- no attachments and a single body form: one text/plain or text/html part
- otherwise: multipart/mixed containing the body (itself a
  multipart/alternative with text first, then HTML, when both forms are
  present) followed by one base64 part per attachment

All lines end in CRLF. Each multipart container gets its own random
boundary.
"""

import logging
import re
import secrets
import time
from datetime import datetime
from email.utils import format_datetime

from mailbridge.core.errors import ComposeError
from mailbridge.core.models import Attachment, Draft, SendOptions

from .addresses import format_address_list
from .encoding import (
    CRLF,
    encode_base64url,
    encode_header_value,
    encode_quoted_printable,
    encode_word,
    wrap_base64,
)
from .validate import validate_draft

logger = logging.getLogger(__name__)

# Gmail substitutes the authenticated user for this sender
DEFAULT_SENDER = "me"
DEFAULT_MESSAGE_ID_HOST = "mailbridge.local"

# Printable ASCII except ":" (RFC 2822 field-name)
_FIELD_NAME_RE = re.compile(r"^[!-9;-~]+$")

# CR or LF that is not part of a CRLF fold followed by whitespace
_BARE_BREAK_RE = re.compile(r"\r(?!\n)|(?<!\r)\n|\r\n(?![ \t])")


def generate_boundary() -> str:
    return f"==boundary_{secrets.token_hex(16)}=="


def generate_message_id(host: str = DEFAULT_MESSAGE_ID_HOST) -> str:
    """Generate a unique ``<hex>.<unix-nanos>@host`` Message-ID."""
    return f"<{secrets.token_hex(16)}.{time.time_ns()}@{host}>"


def _header(name: str, value: str) -> str:
    if not _FIELD_NAME_RE.match(name):
        raise ComposeError("write headers", f"invalid header name {name!r}")
    if _BARE_BREAK_RE.search(value):
        raise ComposeError("write headers", f"header {name} contains a line break")
    return f"{name}: {value}{CRLF}"


def _write_headers(
    draft: Draft,
    options: SendOptions | None,
    sender: str,
    message_id_host: str,
    now: datetime | None,
) -> str:
    lines = [_header("From", sender)]

    for name, addrs in (
        ("To", draft.to),
        ("Cc", draft.cc),
        ("Bcc", draft.bcc),
        ("Reply-To", draft.reply_to),
    ):
        if addrs:
            lines.append(_header(name, format_address_list(addrs)))

    lines.append(_header("Subject", encode_header_value(draft.subject, "Subject")))
    lines.append(_header("Date", format_datetime(now or datetime.now().astimezone())))
    lines.append(_header("Message-ID", generate_message_id(message_id_host)))
    lines.append(_header("MIME-Version", "1.0"))

    for name, value in draft.headers.items():
        lines.append(_header(name, value))
    if options is not None:
        for name, value in options.custom_headers.items():
            lines.append(_header(name, value))

    return "".join(lines)


def _text_part(subtype: str, content: str) -> str:
    return (
        f'Content-Type: text/{subtype}; charset="UTF-8"{CRLF}'
        f"Content-Transfer-Encoding: quoted-printable{CRLF}"
        f"{CRLF}"
        f"{encode_quoted_printable(content)}"
    )


def _attachment_part(att: Attachment) -> str:
    try:
        filename = encode_word(att.filename)
        encoded = wrap_base64(att.data)
    except (TypeError, ValueError) as e:
        raise ComposeError(f"write attachment {att.filename}", e) from e

    return (
        _header("Content-Type", f'{att.mime_type}; name="{filename}"')
        + _header("Content-Disposition", f'attachment; filename="{filename}"')
        + f"Content-Transfer-Encoding: base64{CRLF}"
        f"{CRLF}"
        f"{encoded}"
    )


def _multipart(boundary: str, parts: list[str]) -> str:
    """Join parts with delimiter lines, closing with the final delimiter."""
    if not parts:
        raise ComposeError("close multipart writer", "no parts to write")
    delimiter = f"--{boundary}{CRLF}"
    body = delimiter + f"{CRLF}{delimiter}".join(parts)
    return f"{body}{CRLF}--{boundary}--{CRLF}"


def _alternative_part(text: str, html: str) -> str:
    boundary = generate_boundary()
    return (
        f'Content-Type: multipart/alternative; boundary="{boundary}"{CRLF}'
        f"{CRLF}"
        f"{_multipart(boundary, [_text_part('plain', text), _text_part('html', html)])}"
    )


def is_multipart(draft: Draft) -> bool:
    """True when the draft needs a multipart/mixed envelope."""
    return bool(draft.attachments) or bool(draft.body.text and draft.body.html)


def render_message(
    draft: Draft,
    options: SendOptions | None = None,
    *,
    sender: str = DEFAULT_SENDER,
    message_id_host: str = DEFAULT_MESSAGE_ID_HOST,
    now: datetime | None = None,
) -> bytes:
    """Serialize a draft that has already been validated.

    Raises:
        ComposeError: If a header or part cannot be written.
    """
    headers = _write_headers(draft, options, sender, message_id_host, now)
    text, html = draft.body.text, draft.body.html

    if not is_multipart(draft):
        if html:
            single = _text_part("html", html)
        else:
            single = _text_part("plain", text or "")
        message = headers + single
    else:
        boundary = generate_boundary()
        if text and html:
            parts = [_alternative_part(text, html)]
        elif html:
            parts = [_text_part("html", html)]
        else:
            parts = [_text_part("plain", text or "")]
        parts.extend(_attachment_part(att) for att in draft.attachments)

        message = (
            headers
            + f'Content-Type: multipart/mixed; boundary="{boundary}"{CRLF}'
            + CRLF
            + _multipart(boundary, parts)
        )

    try:
        return message.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ComposeError("encode message", e) from e


def compose_message(
    draft: Draft,
    options: SendOptions | None = None,
    *,
    sender: str = DEFAULT_SENDER,
    message_id_host: str = DEFAULT_MESSAGE_ID_HOST,
    now: datetime | None = None,
) -> bytes:
    """Validate a draft and compose it into a raw RFC 2822 message.

    Args:
        draft: Outbound draft; consumed, not retained.
        options: Per-call options (custom headers).
        sender: Value of the ``From`` header.
        message_id_host: Host part of the generated Message-ID.
        now: Composition time for the ``Date`` header (defaults to now).

    Returns:
        The raw message bytes with CRLF line endings.

    Raises:
        ValidationError: If the draft violates a precondition.
        ComposeError: If serialization fails.
    """
    validate_draft(draft)
    raw = render_message(
        draft, options, sender=sender, message_id_host=message_id_host, now=now
    )
    logger.debug(
        "Composed %s message (%d bytes, %d attachments)",
        "multipart" if is_multipart(draft) else "single-part",
        len(raw),
        len(draft.attachments),
    )
    return raw


def encode_for_transport(raw: bytes) -> str:
    """Wrap a raw message in Gmail's base64url (unpadded) envelope."""
    return encode_base64url(raw)
