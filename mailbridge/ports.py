"""Capability interfaces for the transport layer.

Mailboxes talk to providers only through these protocols, so tests can
pass plain fakes and the codec never imports a vendor SDK. A provider
client implements whichever capabilities it supports; ``GmailClient``
implements all of the Gmail ones.
"""

from dataclasses import dataclass, field
from typing import Protocol

from mailbridge.core.models import ListOptions


@dataclass
class MessagePage:
    """One page of message ids from a list call."""

    ids: list[str] = field(default_factory=list)
    next_page_token: str = ""
    total_count: int = 0


class MessageFetcher(Protocol):
    def list_messages(self, options: ListOptions) -> MessagePage: ...

    def get_message(self, message_id: str) -> dict:
        """Return the provider message resource (Gmail ``format=full``)."""
        ...


class AttachmentFetcher(Protocol):
    def get_attachment(self, message_id: str, attachment_id: str) -> dict:
        """Return the attachment resource, at least ``{"data": ...}``."""
        ...


class MessageSender(Protocol):
    def send(self, payload: str) -> dict:
        """Submit an encoded message; returns ``{"id", "threadId"}``."""
        ...


class MessageModifier(Protocol):
    def trash(self, message_id: str) -> None: ...

    def untrash(self, message_id: str) -> None: ...

    def delete(self, message_id: str) -> None: ...

    def modify_labels(
        self, message_id: str, add: list[str], remove: list[str]
    ) -> None: ...


class OutlookFetcher(Protocol):
    def list_messages(self, options: ListOptions) -> list[dict]:
        """Return Graph message resources for one page.

        ``options.page_token`` carries the skip offset as a decimal string.
        """
        ...

    def get_message(self, message_id: str) -> dict: ...

    def get_attachment(self, message_id: str, attachment_id: str) -> dict: ...


class OutlookActions(Protocol):
    def set_read(self, message_id: str, is_read: bool) -> None: ...

    def move(self, message_id: str, folder_id: str) -> None: ...

    def delete(self, message_id: str) -> None: ...
