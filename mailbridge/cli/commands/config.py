"""Config command implementation."""

import typer
from typing_extensions import Annotated

from mailbridge.config import (
    CONFIG_FILE,
    get_account,
    get_account_names,
    init_config,
    load_config,
    provider_config,
    set_config_value,
)
from mailbridge.config.paths import CONFIG_DIR
from mailbridge.config.schema import AccountConfig
from mailbridge.core.errors import ConfigError

app = typer.Typer(help="Manage configuration")


@app.command()
def init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config")
    ] = False,
):
    """Create the config directory and a template config file."""
    created = init_config(overwrite=force)

    if created:
        typer.echo(f"Created config directory: {CONFIG_DIR}")
        typer.echo(f"Created config file: {CONFIG_FILE}")
    else:
        typer.echo(f"Config already exists at {CONFIG_FILE}")
        typer.echo("Use --force to overwrite.")


@app.command()
def show(
    account: Annotated[
        str | None, typer.Option("--account", "-a", help="Show specific account")
    ] = None,
):
    """Display current configuration with secrets redacted."""
    config = load_config()

    if not config:
        typer.echo("No configuration found.")
        typer.echo(f"Run 'mailbridge config init' to create {CONFIG_FILE}")
        return

    if "defaults" in config:
        typer.echo("[defaults]")
        for key, value in config["defaults"].items():
            typer.echo(f"  {key} = {value}")
        typer.echo()

    names = get_account_names(config)

    if not names:
        typer.echo("No accounts configured.")
        return

    if account:
        selected = get_account(config, account)
        if selected is None:
            typer.echo(f"Account '{account}' not found.", err=True)
            raise typer.Exit(1)
        _display_account(account, selected)
    else:
        for name in names:
            _display_account(name, get_account(config, name))


def _display_account(name: str, account: AccountConfig) -> None:
    typer.echo(f"[accounts.{name}]")
    for key, value in account.items():
        if key == "client_secret":
            display_value = "***REDACTED***" if value else "(not set)"
        else:
            display_value = value
        typer.echo(f"  {key} = {display_value}")

    try:
        provider_config(account)
        typer.echo("  status: ok")
    except ConfigError as e:
        typer.echo(f"  status: {e}")
    typer.echo()


@app.command("set")
def set_value(
    key: Annotated[
        str,
        typer.Argument(
            help="Configuration key (dot notation, e.g., 'defaults.batch_workers')"
        ),
    ],
    value: Annotated[str, typer.Argument(help="Configuration value")],
):
    """Set a configuration value using dot notation.

    Examples:
        mailbridge config set defaults.batch_workers 4
        mailbridge config set accounts.work.tenant_id xxxx-xxxx
    """
    try:
        set_config_value(key, value)
        typer.echo(f"Set {key} = {value}")
    except ValueError as e:
        typer.echo(f"Invalid value: {e}", err=True)
        raise typer.Exit(1)
