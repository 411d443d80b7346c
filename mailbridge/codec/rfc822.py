"""Decode raw RFC 2822 messages into the canonical model.

Gmail's ``format=raw`` responses and composed drafts are plain RFC 2822
bytes. They are parsed with Python's email package and then run through
the same address, date and first-wins body rules as the part-tree path.
"""

from email import policy
from email.message import Message
from email.parser import BytesParser

from mailbridge.core.models import DRAFT, STARRED, UNREAD, Attachment, Email, EmailBody

from .addresses import (
    decode_header_value,
    parse_address,
    parse_address_list,
    parse_date_or_none,
)


def _header(msg: Message, name: str) -> str:
    # compat32 may hand back Header objects for raw 8-bit values
    return decode_header_value(str(msg.get(name, "")))


def _part_text(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if not payload:
        return ""
    charset = part.get_content_charset() or "utf-8"
    try:
        text = payload.decode(charset, errors="replace")
    except LookupError:
        text = payload.decode("utf-8", errors="replace")
    # Wire line endings are CRLF; hand back text with plain newlines
    return text.replace("\r\n", "\n")


def decode_raw_message(
    raw: bytes,
    *,
    message_id: str = "",
    thread_id: str = "",
    labels: list[str] | tuple[str, ...] = (),
    snippet: str = "",
) -> Email:
    """Parse raw message bytes into an Email.

    Args:
        raw: RFC 2822 message bytes.
        message_id: Provider message id (the Message-ID header is not used).
        thread_id: Provider thread id.
        labels: Provider labels; flags are derived from them.
        snippet: Provider-supplied preview.

    Returns:
        The decoded Email. Attachments carry their bytes, since they are
        already inline in the raw message.
    """
    # compat32 copes with real-world malformed messages better than the
    # modern "email" policy
    msg = BytesParser(policy=policy.compat32).parsebytes(raw)

    text = ""
    html = ""
    attachments: list[Attachment] = []

    for part in msg.walk():
        if part.get_content_maintype() == "multipart":
            continue

        content_type = part.get_content_type()
        if content_type == "text/plain" and not text:
            text = _part_text(part)
        elif content_type == "text/html" and not html:
            html = _part_text(part)

        filename = part.get_filename()
        if filename:
            data = part.get_payload(decode=True) or b""
            attachments.append(
                Attachment(
                    filename=decode_header_value(filename),
                    mime_type=content_type,
                    size=len(data),
                    data=data,
                )
            )

    label_set = frozenset(labels)
    return Email(
        id=message_id,
        thread_id=thread_id,
        subject=_header(msg, "Subject"),
        from_=parse_address(_header(msg, "From")),
        to=tuple(parse_address_list(_header(msg, "To"))),
        cc=tuple(parse_address_list(_header(msg, "Cc"))),
        bcc=tuple(parse_address_list(_header(msg, "Bcc"))),
        reply_to=tuple(parse_address_list(_header(msg, "Reply-To"))),
        date=parse_date_or_none(_header(msg, "Date")),
        body=EmailBody(text=text or None, html=html or None),
        snippet=snippet,
        labels=label_set,
        attachments=tuple(attachments),
        is_read=UNREAD not in label_set,
        is_starred=STARRED in label_set,
        is_draft=DRAFT in label_set,
    )
