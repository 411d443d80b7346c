"""Convert Microsoft Graph message resources into the canonical model.

Graph already returns decoded, structured fields, so conversion is a
direct field copy. There is no MIME tree to walk.
"""

from mailbridge.codec.addresses import parse_date_or_none
from mailbridge.codec.encoding import decode_mail_bytes
from mailbridge.core.models import Attachment, Email, EmailAddress, EmailBody


def _address(entry: dict | None) -> EmailAddress:
    # Graph wraps every address as {"emailAddress": {"name", "address"}}
    inner = (entry or {}).get("emailAddress") or {}
    return EmailAddress(
        email=inner.get("address") or "",
        name=inner.get("name") or None,
    )


def _addresses(entries: list[dict] | None) -> tuple[EmailAddress, ...]:
    addresses = (_address(entry) for entry in entries or [])
    return tuple(addr for addr in addresses if not addr.is_empty)


def _body(body: dict | None) -> EmailBody:
    body = body or {}
    content = body.get("content") or None
    if (body.get("contentType") or "").lower() == "text":
        return EmailBody(text=content)
    return EmailBody(html=content)


def convert_message(msg: dict) -> Email:
    """Convert a Graph message resource into an Email.

    The sent date takes precedence over the received date. The parent
    folder id is the only label. Attachments are never inlined by Graph's
    message endpoint, so ``attachments`` is always empty here; fetch them
    with ``OutlookMailbox.get_attachment``.
    """
    date = parse_date_or_none(msg.get("sentDateTime")) or parse_date_or_none(
        msg.get("receivedDateTime")
    )

    folder = msg.get("parentFolderId")
    flag = msg.get("flag") or {}

    return Email(
        id=msg.get("id", ""),
        thread_id=msg.get("conversationId") or "",
        subject=msg.get("subject") or "",
        from_=_address(msg.get("from")),
        to=_addresses(msg.get("toRecipients")),
        cc=_addresses(msg.get("ccRecipients")),
        bcc=_addresses(msg.get("bccRecipients")),
        reply_to=_addresses(msg.get("replyTo")),
        date=date,
        body=_body(msg.get("body")),
        snippet=msg.get("bodyPreview") or "",
        labels=frozenset([folder]) if folder else frozenset(),
        attachments=(),
        is_read=bool(msg.get("isRead")),
        is_starred=flag.get("flagStatus") == "flagged",
        is_draft=bool(msg.get("isDraft")),
    )


def convert_attachment(att: dict) -> Attachment:
    """Convert a Graph file attachment resource.

    ``contentBytes`` is base64 text in JSON responses; SDKs that already
    decoded it hand over bytes, which are used as-is.

    Raises:
        EncodingError: If ``contentBytes`` is text but not valid base64.
    """
    content = att.get("contentBytes")
    if isinstance(content, (bytes, bytearray)):
        data = bytes(content)
    elif content:
        data = decode_mail_bytes(content)
    else:
        data = None

    return Attachment(
        id=att.get("id"),
        filename=att.get("name") or "",
        mime_type=att.get("contentType") or "",
        size=int(att.get("size") or 0),
        data=data,
    )
