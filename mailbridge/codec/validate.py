"""Precondition checks for outbound drafts.

Checks run in a fixed order and stop at the first violation, so the error
always names one specific field or attachment.
"""

import re

from mailbridge.core.errors import ValidationError
from mailbridge.core.models import Draft

# Gmail rejects attachments above this size; fail locally instead of after upload
MAX_ATTACHMENT_BYTES = 25 * 1024 * 1024

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def is_valid_email(address: str) -> bool:
    """Check ``local-part@domain.tld`` syntax (ASCII only)."""
    if not address:
        return False
    return _EMAIL_RE.fullmatch(address) is not None


def validate_draft(draft: Draft | None) -> None:
    """Validate a draft before composition.

    Args:
        draft: The draft to check.

    Raises:
        ValidationError: On the first violated precondition.
    """
    if draft is None:
        raise ValidationError("draft", "draft is required")

    if not draft.to and not draft.cc and not draft.bcc:
        raise ValidationError(
            "to", "at least one recipient required (To, Cc, or Bcc)"
        )

    for field_name in ("to", "cc", "bcc", "reply_to"):
        for addr in getattr(draft, field_name):
            if not is_valid_email(addr.email):
                raise ValidationError(
                    field_name, f"invalid email address: {addr.email}"
                )

    if not draft.subject.strip():
        raise ValidationError("subject", "subject is required")

    if draft.body.is_empty:
        raise ValidationError("body", "email body required (text or html)")

    for index, att in enumerate(draft.attachments):
        field_name = f"attachments[{index}]"
        if not att.filename:
            raise ValidationError(field_name, "attachment filename required")
        if not att.mime_type:
            raise ValidationError(
                field_name, f"attachment MIME type required for {att.filename}"
            )
        if not att.data:
            raise ValidationError(
                field_name, f"attachment {att.filename} has no data"
            )
        if len(att.data) > MAX_ATTACHMENT_BYTES:
            raise ValidationError(
                field_name,
                f"attachment {att.filename} exceeds 25MB limit "
                f"(size: {len(att.data)} bytes)",
            )
