"""Configuration file management for justsplit."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from justsplit.exchange import DEFAULT_API_URL
from justsplit.store.ledger import get_ledger_path

DEFAULTS: dict[str, Any] = {
    "settlement_currency": "USD",
    "exchange_api_url": DEFAULT_API_URL,
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "justsplit" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(dict(DEFAULTS), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If config file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_setting(key: str, config_path: Path | None = None) -> Any:
    """Get a single setting, falling back to defaults.

    A missing config file is not an error; defaults apply.

    Args:
        key: Setting name.
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configured value, the default, or None if the key has no default.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    return config.get(key, DEFAULTS.get(key))


def resolve_ledger_path(config_path: Path | None = None) -> Path:
    """Get the ledger path from config, or the default XDG location."""
    configured = get_setting("ledger_path", config_path)
    if configured:
        return Path(configured).expanduser()
    return get_ledger_path()
