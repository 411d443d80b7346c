"""Walk a Gmail MIME part tree to extract bodies and attachment metadata.

Gmail's ``format=full`` messages expose the MIME structure as nested dicts:

    {
        "mimeType": "multipart/alternative",
        "headers": [{"name": "Content-Type", "value": "..."}],
        "filename": "",
        "body": {"data": "<base64url>", "attachmentId": "...", "size": 123},
        "parts": [...]
    }

A part with children is a container and carries no body data of its own.
The walk is iterative with an explicit depth limit so a hostile or broken
tree cannot exhaust the interpreter stack.
"""

import logging
import re

from mailbridge.core.errors import EncodingError, MimeDepthError
from mailbridge.core.models import Attachment, EmailBody

from .encoding import decode_mail_bytes

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

_CHARSET_RE = re.compile(r'charset="?([A-Za-z0-9_\-.:]+)"?', re.IGNORECASE)


def header_map(part: dict | None) -> dict[str, str]:
    """Return a part's headers keyed by lower-cased name.

    Later duplicates overwrite earlier ones. Missing headers simply are not
    present; callers use ``.get(name, "")``.
    """
    if not part:
        return {}
    return {
        (h.get("name") or "").lower(): h.get("value") or ""
        for h in part.get("headers") or []
    }


def _charset_of(part: dict) -> str:
    content_type = header_map(part).get("content-type", "")
    match = _CHARSET_RE.search(content_type)
    return match.group(1) if match else "utf-8"


def decode_part_text(part: dict) -> str:
    """Decode a text part's body to a string, or "" if it cannot be decoded."""
    body = part.get("body") or {}
    try:
        raw = decode_mail_bytes(body.get("data"))
    except EncodingError as e:
        logger.debug("Skipping undecodable %s body: %s", part.get("mimeType"), e)
        return ""

    charset = _charset_of(part)
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        # Unknown charset name in the Content-Type header
        return raw.decode("utf-8", errors="replace")


def iter_parts(payload: dict | None, *, max_depth: int = DEFAULT_MAX_DEPTH):
    """Yield every part of the tree depth-first, pre-order, in sibling order.

    ``None`` entries (empty children) are skipped.

    Raises:
        MimeDepthError: If a part is nested deeper than ``max_depth``.
    """
    stack = [(payload, 0)]
    while stack:
        part, depth = stack.pop()
        if part is None:
            continue
        if depth > max_depth:
            raise MimeDepthError(
                f"MIME tree exceeds maximum depth of {max_depth}"
            )
        yield part
        children = part.get("parts") or []
        # Reversed so the first child is visited first
        for child in reversed(children):
            stack.append((child, depth + 1))


def extract_content(
    payload: dict | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[EmailBody, list[Attachment]]:
    """Extract text/HTML bodies and attachment metadata from a part tree.

    The first ``text/plain`` and first ``text/html`` parts win; providers
    order the preferred alternative first. Any part with a filename and a
    body handle is an attachment, even when the body only holds an
    ``attachmentId``. Attachment bytes are never populated here.

    Args:
        payload: Root part (the message's ``payload``).
        max_depth: Deepest nesting level visited.

    Returns:
        ``(body, attachments)`` with attachments in tree order.

    Raises:
        MimeDepthError: If the tree is nested deeper than ``max_depth``.
    """
    text = ""
    html = ""
    attachments: list[Attachment] = []

    for part in iter_parts(payload, max_depth=max_depth):
        mime_type = part.get("mimeType") or ""

        if mime_type == "text/plain" and not text:
            text = decode_part_text(part)
        elif mime_type == "text/html" and not html:
            html = decode_part_text(part)

        filename = part.get("filename") or ""
        body = part.get("body")
        if filename and body is not None:
            attachments.append(
                Attachment(
                    id=body.get("attachmentId"),
                    filename=filename,
                    mime_type=mime_type,
                    size=int(body.get("size") or 0),
                )
            )

    return EmailBody(text=text or None, html=html or None), attachments
