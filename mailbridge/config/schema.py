"""Configuration schema definitions.

TypedDicts matching the structure of config.toml. Values are checked
when turned into settings objects (see ``settings.py``), not on load.
"""

from typing import TypedDict


class DefaultsConfig(TypedDict, total=False):
    """Codec defaults applied to every account.

    Attributes:
        max_tree_depth: Deepest MIME nesting level decoded.
        batch_workers: Concurrent calls per batch operation (1 = sequential).
        sender: ``From`` header value for composed messages.
        message_id_host: Host part of generated Message-IDs.
    """

    max_tree_depth: int
    batch_workers: int
    sender: str
    message_id_host: str


class AccountConfig(TypedDict, total=False):
    """Single provider account.

    Attributes:
        provider: "gmail" or "outlook".
        client_id: OAuth client/application ID.
        client_secret: Optional client secret (prefer env var).
        tenant_id: Microsoft Entra tenant ID (Outlook only).
        redirect_url: OAuth redirect URL registered with the provider.
        scopes: OAuth scopes; provider defaults when omitted.
    """

    provider: str
    client_id: str
    client_secret: str
    tenant_id: str
    redirect_url: str
    scopes: list[str]


class MailbridgeConfig(TypedDict, total=False):
    """Root configuration structure.

    Attributes:
        defaults: Codec defaults.
        accounts: Dict mapping account names to their configurations.
    """

    defaults: DefaultsConfig
    accounts: dict[str, AccountConfig]
