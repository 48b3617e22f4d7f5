import os

import pytest

from nomoredm.config import AppSettings, ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("NOMOREDM_") or key == "DISCORD_TOKEN":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # .env loading writes straight into os.environ
    for key in list(os.environ):
        if key.startswith("NOMOREDM_") or key == "DISCORD_TOKEN":
            os.environ.pop(key)


def test_missing_token_raises_configuration_error():
    with pytest.raises(ConfigurationError, match="NOMOREDM_TOKEN"):
        AppSettings.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("NOMOREDM_TOKEN", "T1")

    settings = AppSettings.from_env()

    assert settings.token == "T1"
    assert settings.base_url == "https://discord.com/api/v9"
    assert settings.action_method == "PUT"
    assert settings.auth_scheme == "Bearer"
    assert settings.interval_seconds == 43200
    assert settings.dispatch_delay_seconds == 2
    assert settings.protection_hours == 24
    assert settings.run_on_start is False
    assert settings.seed_tenant_ids == ()


def test_discord_token_fallback(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "legacy")

    assert AppSettings.from_env().token == "legacy"


def test_overrides_are_normalised(monkeypatch):
    monkeypatch.setenv("NOMOREDM_TOKEN", "T1")
    monkeypatch.setenv("NOMOREDM_ACTION_METHOD", "post")
    monkeypatch.setenv("NOMOREDM_AUTH_SCHEME", "bot")
    monkeypatch.setenv("NOMOREDM_API_BASE_URL", "https://example.test/api/")
    monkeypatch.setenv("NOMOREDM_TENANT_IDS", " 1, 2 ,,abc ")
    monkeypatch.setenv("NOMOREDM_RUN_ON_START", "yes")

    settings = AppSettings.from_env()

    assert settings.action_method == "POST"
    assert settings.auth_scheme == "Bot"
    assert settings.base_url == "https://example.test/api"
    assert settings.seed_tenant_ids == ("1", "2", "abc")
    assert settings.run_on_start is True


@pytest.mark.parametrize(
    "key, value",
    [
        ("NOMOREDM_ACTION_METHOD", "PATCH"),
        ("NOMOREDM_AUTH_SCHEME", "Basic"),
        ("NOMOREDM_INTERVAL_SECONDS", "0"),
        ("NOMOREDM_DISPATCH_DELAY_SECONDS", "-1"),
        ("NOMOREDM_TIMEOUT_SECONDS", "abc"),
        ("NOMOREDM_ACTION_PATH_TEMPLATE", "/guilds/incident-actions"),
        ("NOMOREDM_ACTION_PATH_TEMPLATE", "/guilds/{tenant_id}/{x}"),
        ("NOMOREDM_ACTION_PATH_TEMPLATE", "/guilds/{tenant_id}/{0}"),
    ],
)
def test_invalid_settings(monkeypatch, key, value):
    monkeypatch.setenv("NOMOREDM_TOKEN", "T1")
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigurationError):
        AppSettings.from_env()


def test_dotenv_file_is_loaded_without_overriding(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "# comment\nNOMOREDM_TOKEN='from-file'\nexport NOMOREDM_INTERVAL_SECONDS=60\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("NOMOREDM_INTERVAL_SECONDS", "120")

    settings = AppSettings.from_env()

    assert settings.token == "from-file"
    assert settings.interval_seconds == 120
