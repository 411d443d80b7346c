"""Provider-independent codec: parsing, decoding, validation and composition.

Usage:
    from mailbridge.codec import compose_message, decode_mail_bytes

    raw = compose_message(draft)
    data = decode_mail_bytes(part["body"]["data"])
"""

from .addresses import (
    decode_header_value,
    format_address,
    format_address_list,
    parse_address,
    parse_address_list,
    parse_date,
    parse_date_or_none,
)
from .compose import compose_message, encode_for_transport, render_message
from .encoding import (
    decode_mail_bytes,
    encode_base64url,
    encode_header_value,
    encode_quoted_printable,
)
from .mime_tree import DEFAULT_MAX_DEPTH, extract_content, header_map
from .rfc822 import decode_raw_message
from .validate import MAX_ATTACHMENT_BYTES, is_valid_email, validate_draft

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "MAX_ATTACHMENT_BYTES",
    "compose_message",
    "decode_header_value",
    "decode_mail_bytes",
    "decode_raw_message",
    "encode_base64url",
    "encode_for_transport",
    "encode_header_value",
    "encode_quoted_printable",
    "extract_content",
    "format_address",
    "format_address_list",
    "header_map",
    "is_valid_email",
    "parse_address",
    "parse_address_list",
    "parse_date",
    "parse_date_or_none",
    "render_message",
    "validate_draft",
]
