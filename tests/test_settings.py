from subway_deal.settings import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("SUBWAY_PORT", "SUBWAY_MAX_SESSIONS", "SUBWAY_LOG_LEVEL", "SUBWAY_DEFAULT_SEED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 8000
    assert settings.max_sessions == 100
    assert settings.log_level == "INFO"
    assert settings.default_seed is None


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("SUBWAY_MAX_SESSIONS", "3")
    monkeypatch.setenv("SUBWAY_LOG_LEVEL", "debug")
    monkeypatch.setenv("SUBWAY_DEFAULT_SEED", "42")

    settings = Settings(_env_file=None)

    assert settings.max_sessions == 3
    assert settings.log_level == "DEBUG"
    assert settings.default_seed == 42


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
