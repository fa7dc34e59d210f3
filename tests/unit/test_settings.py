from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.RAPID_FIRE_ENABLED is True
    assert settings.RAPID_FIRE_COOLDOWN_SECONDS == 30
    assert settings.ACCOUNTABILITY_PROBABILITY == 0.7
    assert settings.MEMORY_REFERENCE_PROBABILITY == 0.6
    assert settings.RANDOM_SEED is None


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("RAPID_FIRE_ENABLED", "false")
    monkeypatch.setenv("RANDOM_SEED", "42")
    settings = Settings(_env_file=None)
    assert settings.RAPID_FIRE_ENABLED is False
    assert settings.RANDOM_SEED == 42
