"""Outlook (Microsoft Graph) provider: message conversion and mailbox."""

from .convert import convert_attachment, convert_message
from .mailbox import OutlookMailbox, next_page_token

__all__ = [
    "OutlookMailbox",
    "convert_attachment",
    "convert_message",
    "next_page_token",
]
