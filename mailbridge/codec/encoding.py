"""Byte-level encoders and decoders for mail payloads.

Gmail returns message bodies and attachments as URL-safe base64, almost
always without padding. Other sources hand over padded or standard
base64, so decoding tries each variant in turn, cheapest-likely first.
"""

import base64
import binascii
import logging
import re
from email.charset import QP, Charset
from email.header import Header

from mailbridge.core.errors import EncodingError

logger = logging.getLogger(__name__)

# RFC 2045 line length limit for encoded bodies
LINE_LENGTH = 76

# RFC 2047 cap on a single encoded-word
ENCODED_WORD_LENGTH = 75

CRLF = "\r\n"

_URLSAFE_RAW = re.compile(r"^[A-Za-z0-9_-]*$")
_URLSAFE_PADDED = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")

# Q-encoding ("=?utf-8?q?...?=") for header values outside printable ASCII
_Q_CHARSET = Charset("utf-8")
_Q_CHARSET.header_encoding = QP


def _decode_urlsafe_raw(data: bytes) -> bytes:
    """URL-safe alphabet, no padding allowed."""
    if not _URLSAFE_RAW.match(data.decode("ascii")) or len(data) % 4 == 1:
        raise binascii.Error("not unpadded base64url")
    padded = data + b"=" * (-len(data) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


def _decode_urlsafe_padded(data: bytes) -> bytes:
    """URL-safe alphabet with mandatory padding."""
    if not _URLSAFE_PADDED.match(data.decode("ascii")) or len(data) % 4:
        raise binascii.Error("not padded base64url")
    return base64.b64decode(data, altchars=b"-_", validate=True)


def _decode_standard(data: bytes) -> bytes:
    return base64.b64decode(data, validate=True)


_STRATEGIES = (
    ("base64url (unpadded)", _decode_urlsafe_raw),
    ("base64url (padded)", _decode_urlsafe_padded),
    ("base64 (standard)", _decode_standard),
)


def decode_mail_bytes(data: str | bytes | None) -> bytes:
    """Decode a base64 payload, trying each supported variant in order.

    Order: unpadded URL-safe, padded URL-safe, standard. The first strategy
    that accepts the input wins.

    Args:
        data: Encoded payload as returned by the provider.

    Returns:
        Decoded bytes. Empty input decodes to ``b""``.

    Raises:
        EncodingError: If none of the strategies accept the input.
    """
    if not data:
        return b""

    if isinstance(data, str):
        try:
            raw = data.strip().encode("ascii")
        except UnicodeEncodeError as e:
            raise EncodingError(f"failed to decode base64 data: {e}") from e
    else:
        raw = data.strip()

    last_error: Exception | None = None
    for name, strategy in _STRATEGIES:
        try:
            return strategy(raw)
        except (binascii.Error, ValueError) as e:
            logger.debug("%s rejected payload: %s", name, e)
            last_error = e

    raise EncodingError(f"failed to decode base64 data: {last_error}")


def encode_base64url(raw: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding (Gmail submission format)."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def wrap_base64(data: bytes, width: int = LINE_LENGTH) -> str:
    """Standard base64, split into CRLF-terminated lines of ``width`` chars."""
    encoded = base64.b64encode(data).decode("ascii")
    return "".join(
        encoded[i : i + width] + CRLF for i in range(0, len(encoded), width)
    )


def encode_quoted_printable(text: str) -> str:
    """Quoted-printable encode UTF-8 text with CRLF line endings.

    Hard line breaks in the input become CRLF; long lines get ``=`` soft
    breaks so no encoded line exceeds 76 characters.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    encoded = []
    for line in lines:
        qp = binascii.b2a_qp(line.encode("utf-8"), istext=True).decode("ascii")
        encoded.append(qp.replace("\n", CRLF))
    return CRLF.join(encoded)


def needs_header_encoding(value: str) -> bool:
    """True when the value holds anything outside printable ASCII."""
    return any(not (" " <= ch <= "~") for ch in value)


def encode_word(value: str) -> str:
    """Q-encode a value as a single encoded-word, for quoted MIME parameters."""
    if not needs_header_encoding(value):
        return value
    return _Q_CHARSET.header_encode(value)


def encode_header_value(value: str, header_name: str | None = None) -> str:
    """Q-encode a header value when needed, folding long results.

    Encoded-words are kept within RFC 2047 limits and joined with CRLF plus
    a space. Passing ``header_name`` reserves room for it on the first line.
    """
    if not needs_header_encoding(value):
        return value
    header = Header(value, _Q_CHARSET, header_name=header_name)
    return header.encode(maxlinelen=ENCODED_WORD_LENGTH, linesep=CRLF)
