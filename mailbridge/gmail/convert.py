"""Convert Gmail API message resources into the canonical model."""

from mailbridge.codec.addresses import (
    decode_header_value,
    parse_address,
    parse_address_list,
    parse_date_or_none,
)
from mailbridge.codec.encoding import decode_mail_bytes
from mailbridge.codec.mime_tree import DEFAULT_MAX_DEPTH, extract_content, header_map
from mailbridge.core.models import DRAFT, STARRED, UNREAD, Email


def convert_message(msg: dict, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Email:
    """Convert a ``format=full`` Gmail message into an Email.

    Only the root part's headers are read. Missing headers, dates that
    match no known format and undecodable bodies leave the corresponding
    field empty instead of failing the message.

    Args:
        msg: Message resource as returned by ``users.messages.get``.
        max_depth: Deepest MIME nesting level to visit.

    Returns:
        The decoded Email. Attachments carry metadata only.

    Raises:
        MimeDepthError: If the part tree is nested deeper than ``max_depth``.
    """
    payload = msg.get("payload") or {}
    headers = {
        name: decode_header_value(value)
        for name, value in header_map(payload).items()
    }
    body, attachments = extract_content(payload, max_depth=max_depth)
    labels = frozenset(msg.get("labelIds") or [])

    return Email(
        id=msg.get("id", ""),
        thread_id=msg.get("threadId", ""),
        subject=headers.get("subject", ""),
        from_=parse_address(headers.get("from", "")),
        to=tuple(parse_address_list(headers.get("to", ""))),
        cc=tuple(parse_address_list(headers.get("cc", ""))),
        bcc=tuple(parse_address_list(headers.get("bcc", ""))),
        reply_to=tuple(parse_address_list(headers.get("reply-to", ""))),
        date=parse_date_or_none(headers.get("date")),
        body=body,
        snippet=msg.get("snippet", ""),
        labels=labels,
        attachments=tuple(attachments),
        is_read=UNREAD not in labels,
        is_starred=STARRED in labels,
        is_draft=DRAFT in labels,
    )


def decode_attachment_data(result: dict) -> bytes:
    """Decode the ``data`` field of a ``users.messages.attachments.get`` result.

    Raises:
        EncodingError: If no base64 variant accepts the data.
    """
    return decode_mail_bytes(result.get("data"))
