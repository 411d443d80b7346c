"""Path constants for mailbridge config.

Follows the XDG Base Directory layout: ``~/.config/mailbridge/``.
"""

from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "mailbridge"
CONFIG_FILE = CONFIG_DIR / "config.toml"


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist.

    Returns the config directory path.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR
