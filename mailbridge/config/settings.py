"""Typed settings built from the loaded configuration.

``CodecSettings`` carries the knobs the codec and mailboxes read.
``GmailConfig`` and ``OutlookConfig`` describe an OAuth application
registration; acquiring tokens with them is left to the caller.
"""

import os
from dataclasses import dataclass, field

from mailbridge.codec.compose import DEFAULT_MESSAGE_ID_HOST, DEFAULT_SENDER
from mailbridge.codec.mime_tree import DEFAULT_MAX_DEPTH
from mailbridge.core.errors import ConfigError

from .schema import AccountConfig, MailbridgeConfig

GMAIL_SECRET_ENV = "MAILBRIDGE_GMAIL_CLIENT_SECRET"
MS365_SECRET_ENV = "MAILBRIDGE_MS365_CLIENT_SECRET"

GMAIL_DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/gmail.labels",
]

OUTLOOK_DEFAULT_SCOPES = [
    "Mail.Read",
    "Mail.ReadWrite",
    "offline_access",
]


@dataclass
class CodecSettings:
    max_tree_depth: int = DEFAULT_MAX_DEPTH
    batch_workers: int = 1
    sender: str = DEFAULT_SENDER
    message_id_host: str = DEFAULT_MESSAGE_ID_HOST

    def validate(self) -> None:
        if self.max_tree_depth < 1:
            raise ConfigError("max_tree_depth", "must be at least 1")
        if self.batch_workers < 1:
            raise ConfigError("batch_workers", "must be at least 1")
        if not self.sender:
            raise ConfigError("sender", "is required")
        if not self.message_id_host:
            raise ConfigError("message_id_host", "is required")


def settings_from_config(config: MailbridgeConfig) -> CodecSettings:
    """Build codec settings from the ``[defaults]`` table.

    Raises:
        ConfigError: If a value is out of range or of the wrong type.
    """
    defaults = config.get("defaults", {})
    try:
        settings = CodecSettings(
            max_tree_depth=int(defaults.get("max_tree_depth", DEFAULT_MAX_DEPTH)),
            batch_workers=int(defaults.get("batch_workers", 1)),
            sender=str(defaults.get("sender", DEFAULT_SENDER)),
            message_id_host=str(
                defaults.get("message_id_host", DEFAULT_MESSAGE_ID_HOST)
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError("defaults", str(e)) from e

    settings.validate()
    return settings


def _mask(value: str) -> str:
    if len(value) <= 4:
        return "****"
    return value[:4] + "****"


@dataclass
class GmailConfig:
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    redirect_url: str = ""
    scopes: list[str] = field(default_factory=lambda: list(GMAIL_DEFAULT_SCOPES))

    def validate(self) -> None:
        """Check required fields, restoring default scopes when emptied.

        Raises:
            ConfigError: Naming the first missing field.
        """
        if not self.client_id:
            raise ConfigError("client_id", "is required")
        if not self.client_secret:
            raise ConfigError("client_secret", "is required")
        if not self.redirect_url:
            raise ConfigError("redirect_url", "is required")
        if not self.scopes:
            self.scopes = list(GMAIL_DEFAULT_SCOPES)

    def __repr__(self) -> str:
        return (
            f"GmailConfig(client_id={_mask(self.client_id)}, "
            f"redirect_url={self.redirect_url}, scopes={self.scopes})"
        )


@dataclass
class OutlookConfig:
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    tenant_id: str = ""
    redirect_url: str = ""
    scopes: list[str] = field(default_factory=lambda: list(OUTLOOK_DEFAULT_SCOPES))

    def validate(self) -> None:
        """Check required fields.

        ``tenant_id`` may be a directory id or one of "common",
        "organizations" or "consumers".

        Raises:
            ConfigError: Naming the first missing field.
        """
        if not self.client_id:
            raise ConfigError("client_id", "is required")
        if not self.client_secret:
            raise ConfigError("client_secret", "is required")
        if not self.tenant_id:
            raise ConfigError("tenant_id", "is required")
        if not self.redirect_url:
            raise ConfigError("redirect_url", "is required")
        if not self.scopes:
            self.scopes = list(OUTLOOK_DEFAULT_SCOPES)

    def __repr__(self) -> str:
        return (
            f"OutlookConfig(client_id={_mask(self.client_id)}, "
            f"tenant_id={self.tenant_id}, redirect_url={self.redirect_url}, "
            f"scopes={self.scopes})"
        )


def provider_config(account: AccountConfig) -> GmailConfig | OutlookConfig:
    """Build and validate the provider config for an account table.

    Client secrets from the environment take precedence over the file.

    Raises:
        ConfigError: If the provider is unknown or a field is missing.
    """
    provider = account.get("provider", "")

    if provider == "gmail":
        config = GmailConfig(
            client_id=account.get("client_id", ""),
            client_secret=os.environ.get(GMAIL_SECRET_ENV)
            or account.get("client_secret", ""),
            redirect_url=account.get("redirect_url", ""),
            scopes=list(account.get("scopes") or GMAIL_DEFAULT_SCOPES),
        )
    elif provider == "outlook":
        config = OutlookConfig(
            client_id=account.get("client_id", ""),
            client_secret=os.environ.get(MS365_SECRET_ENV)
            or account.get("client_secret", ""),
            tenant_id=account.get("tenant_id", ""),
            redirect_url=account.get("redirect_url", ""),
            scopes=list(account.get("scopes") or OUTLOOK_DEFAULT_SCOPES),
        )
    else:
        raise ConfigError("provider", f"unknown provider: {provider!r}")

    config.validate()
    return config
