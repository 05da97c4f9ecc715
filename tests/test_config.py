"""
Tests for settings validation
"""

import pytest
from pydantic import ValidationError

from orgaccess.core.config import Settings


def test_defaults():
    config = Settings(_env_file=None)

    assert config.ENFORCE_ACYCLIC_HIERARCHY is True
    assert config.DEFAULT_PAGE_LIMIT <= config.MAX_PAGE_LIMIT


def test_environment_prefix(monkeypatch):
    monkeypatch.setenv("ORGACCESS_MAX_PAGE_LIMIT", "250")
    monkeypatch.setenv("ORGACCESS_LOG_LEVEL", "debug")

    config = Settings(_env_file=None)

    assert config.MAX_PAGE_LIMIT == 250
    assert config.LOG_LEVEL == "DEBUG"


def test_unknown_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ENVIRONMENT="qa")


def test_only_consumed_settings_are_declared():
    assert set(Settings.model_fields) == {
        "ENVIRONMENT",
        "LOG_LEVEL",
        "DEFAULT_PAGE_LIMIT",
        "MAX_PAGE_LIMIT",
        "ENFORCE_ACYCLIC_HIERARCHY",
        "MAX_HIERARCHY_DEPTH",
    }
