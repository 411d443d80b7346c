"""Parsing and formatting of address and date header values.

Parsing is deliberately forgiving: providers hand over free-text header
values, and a malformed header must never block decoding of the rest of
the message. Empty input yields zero values rather than errors.
"""

import logging
from datetime import datetime
from email.errors import HeaderParseError
from email.header import decode_header
from email.utils import parsedate_to_datetime

from mailbridge.core.errors import DateFormatError
from mailbridge.core.models import EmailAddress

from .encoding import encode_header_value

logger = logging.getLogger(__name__)

# Characters that force a display name to be quoted
_SPECIALS = ',;"<>'


def parse_address(raw: str | None) -> EmailAddress:
    """Parse a single ``Name <local@domain>`` or bare ``local@domain`` value.

    The display name is stripped of surrounding whitespace and one layer of
    double quotes. An empty name becomes None.

    Args:
        raw: Header value for a single address.

    Returns:
        The parsed address, or the zero value ``EmailAddress()`` for empty input.
    """
    if not raw or not raw.strip():
        return EmailAddress()

    raw = raw.strip()
    if "<" in raw and ">" in raw:
        name, _, rest = raw.partition("<")
        name = name.strip()
        if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
            name = name[1:-1]
        address = rest.split(">", 1)[0].strip()
        return EmailAddress(email=address, name=name or None)

    return EmailAddress(email=raw)


def parse_address_list(raw: str | None) -> list[EmailAddress]:
    """Parse a comma-separated address header into an ordered list.

    Segments that parse to an empty address are dropped.

    Args:
        raw: Header value such as ``"a@x.com, B <b@x.com>"``.

    Returns:
        List of addresses in header order; empty for empty input.
    """
    if not raw:
        return []

    addresses = []
    for segment in raw.split(","):
        parsed = parse_address(segment)
        if not parsed.is_empty:
            addresses.append(parsed)
    return addresses


def _rfc2822_numeric_zone(value: str) -> datetime:
    return datetime.strptime(value, "%a, %d %b %Y %H:%M:%S %z")


def _rfc2822_named_zone(value: str) -> datetime:
    # Handles "GMT"/"EST" style zones and trailing "(UTC)" comments
    parsed = parsedate_to_datetime(value)
    if parsed is None:
        raise ValueError(f"unparseable date: {value}")
    return parsed


def _no_weekday(value: str) -> datetime:
    return datetime.strptime(value, "%d %b %Y %H:%M:%S %z")


def _rfc3339(value: str) -> datetime:
    return datetime.fromisoformat(value)


_DATE_PARSERS = (
    _rfc2822_numeric_zone,
    _rfc2822_named_zone,
    _no_weekday,
    _rfc3339,
)


def parse_date(raw: str) -> datetime:
    """Parse an email date header, trying historical formats in order.

    Formats: RFC 2822 with numeric zone, RFC 2822 with a named zone, the
    weekday-less variant, then RFC 3339. Single-digit days are accepted.

    Raises:
        DateFormatError: If no format matches.
    """
    value = (raw or "").strip()
    for parser in _DATE_PARSERS:
        try:
            return parser(value)
        except (TypeError, ValueError, IndexError):
            continue
    raise DateFormatError(f"unable to parse date: {raw}")


def parse_date_or_none(raw: str | None) -> datetime | None:
    """Best-effort date parse for the decode path: None instead of an error."""
    if not raw:
        return None
    try:
        return parse_date(raw)
    except DateFormatError as e:
        logger.debug("Leaving date unset: %s", e)
        return None


def decode_header_value(value: str | bytes | None) -> str:
    """Decode RFC 2047 encoded words into a single Unicode string.

    Plain values pass through unchanged. Never raises.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    if "=?" not in value:
        return value

    try:
        parts = decode_header(value)
    except (HeaderParseError, ValueError):
        return value

    out = []
    for text, charset in parts:
        if isinstance(text, bytes):
            try:
                out.append(text.decode(charset or "utf-8", "replace"))
            except LookupError:
                out.append(text.decode("utf-8", "replace"))
        else:
            out.append(text)
    return "".join(out)


def format_address(addr: EmailAddress) -> str:
    """Format an address as ``Name <email>`` for an outbound header.

    Names containing RFC 2822 specials are quoted with inner quotes
    escaped; names with non-ASCII characters are Q-encoded.
    """
    if not addr.name:
        return addr.email

    name = addr.name
    if not name.isascii():
        return f"{encode_header_value(name)} <{addr.email}>"
    if any(ch in name for ch in _SPECIALS):
        escaped = name.replace('"', '\\"')
        return f'"{escaped}" <{addr.email}>'
    return f"{name} <{addr.email}>"


def format_address_list(addrs: list[EmailAddress] | tuple[EmailAddress, ...]) -> str:
    return ", ".join(format_address(addr) for addr in addrs)
