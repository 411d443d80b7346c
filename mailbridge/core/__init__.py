"""Canonical data model and error types shared by every provider."""

from .errors import (
    BatchPartialFailure,
    ComposeError,
    ConfigError,
    DateFormatError,
    EncodingError,
    MailbridgeError,
    MimeDepthError,
    ValidationError,
)
from .models import (
    Attachment,
    Draft,
    Email,
    EmailAddress,
    EmailBody,
    ListOptions,
    ListResponse,
    SendOptions,
    SendResponse,
)

__all__ = [
    "Attachment",
    "BatchPartialFailure",
    "ComposeError",
    "ConfigError",
    "DateFormatError",
    "Draft",
    "Email",
    "EmailAddress",
    "EmailBody",
    "EncodingError",
    "ListOptions",
    "ListResponse",
    "MailbridgeError",
    "MimeDepthError",
    "SendOptions",
    "SendResponse",
    "ValidationError",
]
