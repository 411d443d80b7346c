"""Tests for configuration loading, saving and typed settings."""

from pathlib import Path
from unittest.mock import patch

import pytest

import mailbridge.config as config_module
from mailbridge.config import (
    get_account,
    get_account_names,
    init_config,
    load_config,
    save_config,
    set_config_value,
)
from mailbridge.config.settings import (
    GMAIL_DEFAULT_SCOPES,
    OUTLOOK_DEFAULT_SCOPES,
    CodecSettings,
    GmailConfig,
    OutlookConfig,
    provider_config,
    settings_from_config,
)
from mailbridge.core.errors import ConfigError


@pytest.fixture
def config_file(tmp_path: Path):
    """Point the config layer at a temporary file and clear its cache."""
    path = tmp_path / "mailbridge" / "config.toml"
    with (
        patch("mailbridge.config.CONFIG_FILE", path),
        patch("mailbridge.config.paths.CONFIG_DIR", path.parent),
    ):
        config_module._cached_config = None
        yield path
    config_module._cached_config = None


class TestConfigFile:
    """Tests for load/save/init/set."""

    def test_missing_file_is_empty(self, config_file):
        assert load_config() == {}

    def test_init_writes_template(self, config_file):
        assert init_config() is True
        assert config_file.exists()

        config = load_config(force_reload=True)

        assert config["defaults"]["max_tree_depth"] == 64
        assert config["defaults"]["sender"] == "me"

    def test_init_does_not_overwrite(self, config_file):
        init_config()
        config_file.write_text("[defaults]\nbatch_workers = 3\n")

        assert init_config() is False
        assert load_config(force_reload=True)["defaults"]["batch_workers"] == 3

    def test_init_overwrite(self, config_file):
        init_config()
        config_file.write_text("")

        assert init_config(overwrite=True) is True
        assert "max_tree_depth" in config_file.read_text()

    def test_save_and_reload(self, config_file):
        save_config({"accounts": {"home": {"provider": "gmail"}}})

        assert load_config(force_reload=True) == {"accounts": {"home": {"provider": "gmail"}}}

    def test_cache(self, config_file):
        save_config({"defaults": {"batch_workers": 2}})
        config_file.write_text("[defaults]\nbatch_workers = 9\n")

        assert load_config()["defaults"]["batch_workers"] == 2
        assert load_config(force_reload=True)["defaults"]["batch_workers"] == 9

    def test_set_int_field(self, config_file):
        set_config_value("defaults.batch_workers", "4")

        assert load_config(force_reload=True)["defaults"]["batch_workers"] == 4

    def test_set_string_field(self, config_file):
        set_config_value("accounts.work.tenant_id", "tenant-1")

        assert load_config(force_reload=True)["accounts"]["work"]["tenant_id"] == "tenant-1"

    def test_set_invalid_int(self, config_file):
        with pytest.raises(ValueError):
            set_config_value("defaults.max_tree_depth", "deep")

    def test_set_through_scalar(self, config_file):
        save_config({"defaults": {"sender": "me"}})

        with pytest.raises(ValueError, match="not a table"):
            set_config_value("defaults.sender.name", "x")


class TestAccounts:
    def test_get_account_by_name(self):
        config = {"accounts": {"a": {"provider": "gmail"}, "b": {"provider": "outlook"}}}

        assert get_account(config, "b") == {"provider": "outlook"}
        assert get_account(config) == {"provider": "gmail"}
        assert get_account(config, "missing") is None
        assert get_account_names(config) == ["a", "b"]

    def test_no_accounts(self):
        assert get_account({}) is None
        assert get_account_names({}) == []


class TestCodecSettings:
    """Tests for settings_from_config."""

    def test_defaults(self):
        settings = settings_from_config({})

        assert settings == CodecSettings()
        assert settings.max_tree_depth == 64
        assert settings.batch_workers == 1
        assert settings.sender == "me"
        assert settings.message_id_host == "mailbridge.local"

    def test_overrides(self):
        settings = settings_from_config(
            {"defaults": {"max_tree_depth": 10, "batch_workers": 4, "sender": "a@x.com"}}
        )

        assert settings.max_tree_depth == 10
        assert settings.batch_workers == 4
        assert settings.sender == "a@x.com"

    def test_out_of_range(self):
        with pytest.raises(ConfigError, match=r"config error \[batch_workers\]"):
            settings_from_config({"defaults": {"batch_workers": 0}})

    def test_wrong_type(self):
        with pytest.raises(ConfigError, match=r"\[defaults\]"):
            settings_from_config({"defaults": {"max_tree_depth": "deep"}})


class TestProviderConfig:
    """Tests for GmailConfig, OutlookConfig and provider_config."""

    def test_gmail(self, monkeypatch):
        monkeypatch.delenv("MAILBRIDGE_GMAIL_CLIENT_SECRET", raising=False)
        config = provider_config(
            {
                "provider": "gmail",
                "client_id": "id.apps.googleusercontent.com",
                "client_secret": "file-secret",
                "redirect_url": "http://localhost:8080/callback",
            }
        )

        assert isinstance(config, GmailConfig)
        assert config.client_secret == "file-secret"
        assert config.scopes == GMAIL_DEFAULT_SCOPES

    def test_env_secret_wins(self, monkeypatch):
        monkeypatch.setenv("MAILBRIDGE_MS365_CLIENT_SECRET", "env-secret")
        config = provider_config(
            {
                "provider": "outlook",
                "client_id": "client",
                "client_secret": "file-secret",
                "tenant_id": "common",
                "redirect_url": "http://localhost/cb",
            }
        )

        assert isinstance(config, OutlookConfig)
        assert config.client_secret == "env-secret"
        assert config.scopes == OUTLOOK_DEFAULT_SCOPES

    def test_missing_field(self, monkeypatch):
        monkeypatch.delenv("MAILBRIDGE_MS365_CLIENT_SECRET", raising=False)

        with pytest.raises(ConfigError) as exc_info:
            provider_config({"provider": "outlook", "client_id": "c", "client_secret": "s"})

        assert exc_info.value.field == "tenant_id"
        assert str(exc_info.value) == "config error [tenant_id]: is required"

    def test_unknown_provider(self):
        with pytest.raises(ConfigError, match="unknown provider"):
            provider_config({"provider": "imap"})

    def test_validate_restores_scopes(self):
        config = GmailConfig(client_id="c", client_secret="s", redirect_url="r", scopes=[])

        config.validate()

        assert config.scopes == GMAIL_DEFAULT_SCOPES

    def test_default_scopes_not_shared(self):
        first = OutlookConfig()
        first.scopes.append("Mail.Send")

        assert OutlookConfig().scopes == OUTLOOK_DEFAULT_SCOPES

    def test_repr_masks_secrets(self):
        config = OutlookConfig(
            client_id="abcdef123456", client_secret="s3cret", tenant_id="common"
        )

        text = repr(config)

        assert "s3cret" not in text
        assert "abcdef123456" not in text
        assert "abcd****" in text
