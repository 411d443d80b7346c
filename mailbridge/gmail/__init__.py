"""Gmail provider: message conversion, API transport and mailbox."""

from .client import GmailClient, HttpError
from .convert import convert_message, decode_attachment_data
from .mailbox import GmailMailbox

__all__ = [
    "GmailClient",
    "GmailMailbox",
    "HttpError",
    "convert_message",
    "decode_attachment_data",
]
