"""Configuration management.

Config is stored at ~/.config/mailbridge/config.toml

Usage:
    from mailbridge.config import load_config, get_account, settings_from_config

    config = load_config()
    settings = settings_from_config(config)
    account = get_account(config, "work")
"""

import tomllib

import tomli_w

from .paths import CONFIG_FILE, ensure_config_dir
from .schema import AccountConfig, MailbridgeConfig
from .settings import (
    CodecSettings,
    GmailConfig,
    OutlookConfig,
    provider_config,
    settings_from_config,
)
from .template import CONFIG_TEMPLATE

__all__ = [
    "CONFIG_FILE",
    "CodecSettings",
    "GmailConfig",
    "OutlookConfig",
    "get_account",
    "get_account_names",
    "init_config",
    "load_config",
    "provider_config",
    "save_config",
    "set_config_value",
    "settings_from_config",
]

# Loaded once per process; save_config keeps it in sync
_cached_config: MailbridgeConfig | None = None

# Keys under [defaults] stored as integers
_INT_FIELDS = {"max_tree_depth", "batch_workers"}


def load_config(*, force_reload: bool = False) -> MailbridgeConfig:
    """Load configuration from disk.

    Args:
        force_reload: Bypass the cache and read from disk.

    Returns:
        The configuration dictionary; empty if no config file exists.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    if not CONFIG_FILE.exists():
        _cached_config = {}
        return _cached_config

    with open(CONFIG_FILE, "rb") as f:
        _cached_config = tomllib.load(f)

    return _cached_config


def save_config(config: MailbridgeConfig) -> None:
    global _cached_config

    ensure_config_dir()

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(config, f)

    _cached_config = config


def init_config(*, overwrite: bool = False) -> bool:
    """Write the commented template config file.

    Args:
        overwrite: Replace an existing config file.

    Returns:
        True if the file was written, False if it already existed.
    """
    ensure_config_dir()

    if CONFIG_FILE.exists() and not overwrite:
        return False

    CONFIG_FILE.write_text(CONFIG_TEMPLATE)
    return True


def get_account(
    config: MailbridgeConfig, name: str | None = None
) -> AccountConfig | None:
    """Get an account table by name, or the first one when name is None."""
    accounts = config.get("accounts", {})

    if not accounts:
        return None

    if name is None:
        return next(iter(accounts.values()))

    return accounts.get(name)


def get_account_names(config: MailbridgeConfig) -> list[str]:
    return list(config.get("accounts", {}).keys())


def set_config_value(key: str, value: str) -> None:
    """Set a configuration value using dot notation.

    Examples:
        set_config_value("defaults.batch_workers", "4")
        set_config_value("accounts.work.tenant_id", "xxx-xxx")

    Raises:
        ValueError: If a numeric field gets a non-numeric value, or the
            path runs through a non-table value.
    """
    config = load_config(force_reload=True)

    parts = key.split(".")

    current: dict = config
    for part in parts[:-1]:
        current = current.setdefault(part, {})
        if not isinstance(current, dict):
            raise ValueError(f"{part} is not a table")

    final_key = parts[-1]
    current[final_key] = int(value) if final_key in _INT_FIELDS else value

    save_config(config)
