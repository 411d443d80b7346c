"""Canonical data models for email messages.

``Email`` and its parts are read models: created once per decode call and
never mutated afterwards. ``Draft`` is the mutable outbound counterpart,
built by the caller, validated once and consumed by composition.
"""

from dataclasses import dataclass, field
from datetime import datetime

# Gmail system labels that carry message flags
UNREAD = "UNREAD"
STARRED = "STARRED"
DRAFT = "DRAFT"
INBOX = "INBOX"
TRASH = "TRASH"


@dataclass(frozen=True)
class EmailAddress:
    """An email address with an optional display name.

    The zero value (empty ``email``) means "no address" and is never
    placed in a parsed address list.
    """

    email: str = ""
    name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.email

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"email": self.email, "name": self.name}


@dataclass(frozen=True)
class EmailBody:
    """Message content. Text and HTML are independent and both optional."""

    text: str | None = None
    html: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.html


@dataclass(frozen=True)
class Attachment:
    """Attachment metadata and, when explicitly fetched or attached, bytes.

    ``id`` is the provider attachment handle; it is None for outbound
    attachments that have not been uploaded. ``size`` is always populated,
    even when ``data`` is withheld.
    """

    filename: str
    mime_type: str
    size: int = 0
    id: str | None = None
    data: bytes | None = None

    def __post_init__(self):
        # Outbound attachments are usually built from bytes alone
        if not self.size and self.data:
            object.__setattr__(self, "size", len(self.data))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (bytes omitted)."""
        return {
            "id": self.id,
            "filename": self.filename,
            "mime_type": self.mime_type,
            "size": self.size,
            "has_data": self.data is not None,
        }


@dataclass(frozen=True)
class Email:
    """A message normalized across providers.

    Address lists keep header order. ``labels`` holds Gmail label ids, or
    the single parent folder id for Outlook messages. The boolean flags are
    derived from labels (Gmail) or direct fields (Outlook).
    """

    id: str
    thread_id: str = ""
    subject: str = ""
    from_: EmailAddress = field(default_factory=EmailAddress)
    to: tuple[EmailAddress, ...] = ()
    cc: tuple[EmailAddress, ...] = ()
    bcc: tuple[EmailAddress, ...] = ()
    reply_to: tuple[EmailAddress, ...] = ()
    date: datetime | None = None  # None when the header was missing or unparseable
    body: EmailBody = field(default_factory=EmailBody)
    snippet: str = ""  # provider-supplied preview, never derived
    labels: frozenset[str] = frozenset()
    attachments: tuple[Attachment, ...] = ()
    is_read: bool = False
    is_starred: bool = False
    is_draft: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "thread_id": self.thread_id,
            "subject": self.subject,
            "from": self.from_.to_dict(),
            "to": [a.to_dict() for a in self.to],
            "cc": [a.to_dict() for a in self.cc],
            "bcc": [a.to_dict() for a in self.bcc],
            "reply_to": [a.to_dict() for a in self.reply_to],
            "date": self.date.isoformat() if self.date else None,
            "body": {"text": self.body.text, "html": self.body.html},
            "snippet": self.snippet,
            "labels": sorted(self.labels),
            "attachments": [a.to_dict() for a in self.attachments],
            "is_read": self.is_read,
            "is_starred": self.is_starred,
            "is_draft": self.is_draft,
        }


@dataclass
class Draft:
    """An outbound message as built by the caller.

    Every attachment must carry ``data``. ``headers`` are appended verbatim
    after the generated headers; their relative order is not a contract.
    """

    to: list[EmailAddress] = field(default_factory=list)
    cc: list[EmailAddress] = field(default_factory=list)
    bcc: list[EmailAddress] = field(default_factory=list)
    reply_to: list[EmailAddress] = field(default_factory=list)
    subject: str = ""
    body: EmailBody = field(default_factory=EmailBody)
    attachments: list[Attachment] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class SendOptions:
    """Per-call options for sending a draft."""

    custom_headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SendResponse:
    id: str
    thread_id: str = ""


@dataclass
class ListOptions:
    """Listing options, passed through to the transport untouched."""

    max_results: int = 0
    page_token: str = ""
    query: str = ""
    labels: list[str] = field(default_factory=list)


@dataclass
class ListResponse:
    emails: list[Email] = field(default_factory=list)
    next_page_token: str = ""
    total_count: int = 0
