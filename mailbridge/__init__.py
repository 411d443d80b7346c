"""mailbridge: normalize Gmail and Microsoft Graph messages into one model.

Inbound, provider-native messages are decoded into a canonical ``Email``.
Outbound, a canonical ``Draft`` is validated and composed into a raw
RFC 2822 message ready for transport.
"""

__version__ = "0.1.0"
