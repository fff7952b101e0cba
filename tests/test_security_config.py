import importlib
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

STRONG_SECRET = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def reload_config_module():
    config_module = sys.modules.get("app.config")
    if config_module:
        config_module.get_settings.cache_clear()
        sys.modules.pop("app.config", None)
    return importlib.import_module("app.config")


def test_missing_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_weak_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "changeme-in-production")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_strong_secret_key_passes(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()
    settings = config_module.get_settings()

    assert settings.secret_key
    assert settings.task_completed_points == 5
    assert settings.memory_added_points == 5
    assert settings.todays_task_limit == 3


def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    assert config_module.get_settings().log_level == "DEBUG"


def test_unknown_log_level_fails(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="log_level|LOG_LEVEL"):
        config_module.get_settings()


def test_points_must_be_positive(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("TASK_COMPLETED_POINTS", "0")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="task_completed_points"):
        config_module.get_settings()
