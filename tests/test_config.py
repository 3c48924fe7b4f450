"""Tests for settings."""

import pytest

from og_audit import __version__
from og_audit.config import Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.timeout == 30.0
    assert settings.workers == 1
    assert settings.pass_threshold == 70
    assert settings.inventory_path == ".og-inventory.json"
    assert settings.headers["User-Agent"] == f"og-audit/{__version__}"


def test_environment_overrides():
    settings = Settings.from_env({
        "OG_AUDIT_TIMEOUT": "2.5",
        "OG_AUDIT_USER_AGENT": "bot/2",
        "OG_AUDIT_INVENTORY": "out/inv.json",
        "OG_AUDIT_WORKERS": "3",
    })
    assert settings == Settings(timeout=2.5, user_agent="bot/2", inventory_path="out/inv.json", workers=3)


@pytest.mark.parametrize("env", [
    {"OG_AUDIT_TIMEOUT": "soon"},
    {"OG_AUDIT_WORKERS": "1.5"},
    {"OG_AUDIT_WORKERS": "0"},
    {"OG_AUDIT_TIMEOUT": "-1"},
])
def test_invalid_values(env):
    name = next(iter(env))
    with pytest.raises(ValueError, match=name):
        Settings.from_env(env)


def test_override_ignores_none():
    settings = Settings(timeout=5.0).override(timeout=None, workers=2)
    assert settings.timeout == 5.0
    assert settings.workers == 2
