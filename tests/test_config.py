"""Tests for justsplit.config."""

import stat
from pathlib import Path

import pytest

from justsplit.config import (
    DEFAULTS,
    create_default_config,
    get_config_path,
    get_setting,
    load_config,
    resolve_ledger_path,
    save_config,
)


class TestConfigFile:
    """Tests for reading and writing the config file."""

    def test_default_path_uses_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should place the config under XDG_CONFIG_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "justsplit" / "config.toml"

    def test_create_default(self, tmp_path: Path) -> None:
        """Should write the defaults with owner-only permissions."""
        path = tmp_path / "justsplit" / "config.toml"

        create_default_config(path)

        assert load_config(path) == DEFAULTS
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Should round-trip settings through TOML."""
        path = tmp_path / "config.toml"

        save_config({"settlement_currency": "EUR"}, path)

        assert load_config(path) == {"settlement_currency": "EUR"}


class TestGetSetting:
    """Tests for get_setting."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """Should fall back to defaults without a config file."""
        assert get_setting("settlement_currency", tmp_path / "none.toml") == "USD"

    def test_configured_value(self, tmp_path: Path) -> None:
        """Should prefer the configured value."""
        path = tmp_path / "config.toml"
        save_config({"settlement_currency": "GBP"}, path)

        assert get_setting("settlement_currency", path) == "GBP"

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Should return None for keys without a default."""
        assert get_setting("nope", tmp_path / "none.toml") is None


class TestResolveLedgerPath:
    """Tests for resolve_ledger_path."""

    def test_default_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should use the XDG data directory by default."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert resolve_ledger_path(tmp_path / "none.toml") == tmp_path / "justsplit" / "ledger.json"

    def test_configured_location(self, tmp_path: Path) -> None:
        """Should honour ledger_path from the config."""
        path = tmp_path / "config.toml"
        save_config({"ledger_path": str(tmp_path / "shared.json")}, path)

        assert resolve_ledger_path(path) == tmp_path / "shared.json"
