import sys

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_cache_dir, get_user_config_dir


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    settings = AppSettings(_env_file=None)
    assert settings.catalog_base_url == "https://plugins.traefik.io/public/"
    assert settings.http_max_retries == 4
    assert settings.log_level == "INFO"
    assert settings.cache_dir.name == "archives"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PLUGIN_FETCHER_CATALOG_BASE_URL", "http://localhost:8080/")
    monkeypatch.setenv("PLUGIN_FETCHER_CACHE_DIR", str(tmp_path / "archives"))
    monkeypatch.setenv("PLUGIN_FETCHER_HTTP_MAX_RETRIES", "7")
    monkeypatch.setenv("plugin_fetcher_log_level", "debug")
    settings = AppSettings(_env_file=None)
    assert settings.catalog_base_url == "http://localhost:8080/"
    assert settings.cache_dir == tmp_path / "archives"
    assert settings.http_max_retries == 7
    assert settings.log_level == "DEBUG"


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PLUGIN_FETCHER_HTTP_TIMEOUT_SECONDS=3.5\n", encoding="utf-8")
    assert AppSettings(_env_file=env_file).http_timeout_seconds == 3.5


@pytest.mark.parametrize(
    "field,value",
    [
        ("log_level", "chatty"),
        ("http_max_retries", -1),
        ("http_timeout_seconds", 0),
        ("http_retry_wait_min_seconds", 60.0),
    ],
)
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, **{field: value})


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG layout")
def test_user_dirs_follow_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    assert get_user_config_dir() == tmp_path / "config" / "plugin-fetcher"
    assert get_user_cache_dir() == tmp_path / "cache" / "plugin-fetcher"


def test_retry_window_bounds():
    settings = AppSettings(
        _env_file=None, http_retry_wait_min_seconds=5.0, http_retry_wait_max_seconds=5.0
    )
    assert settings.http_retry_wait_min_seconds == settings.http_retry_wait_max_seconds
    with pytest.raises(ValidationError, match="must not exceed"):
        AppSettings(_env_file=None, http_retry_wait_min_seconds=10.0, http_retry_wait_max_seconds=2.0)
