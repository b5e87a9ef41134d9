import pytest

from clip_notes.config import Settings

ENV_VARS = [
    "CLIPNOTE_EPSILON",
    "CLIPNOTE_SEEK_GUARD",
    "CLIPNOTE_SEEK_DEDUP",
    "CLIPNOTE_SEEK_SETTLE_SAMPLES",
    "CLIPNOTE_PREV_RESTART_SECONDS",
    "CLIPNOTE_SKIP_SECONDS",
    "CLIPNOTE_TICK_SECONDS",
    "CLIPNOTE_GEMINI_MODEL",
    "CLIPNOTE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env(dotenv=False)
    assert settings == Settings()
    assert settings.epsilon == 0.1
    assert settings.prev_restart_threshold == 2.0


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CLIPNOTE_EPSILON", "0.25")
    monkeypatch.setenv("CLIPNOTE_SEEK_SETTLE_SAMPLES", "4")
    monkeypatch.setenv("CLIPNOTE_GEMINI_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("CLIPNOTE_LOG_LEVEL", "debug")

    settings = Settings.from_env(dotenv=False)

    assert settings.epsilon == 0.25
    assert settings.seek_settle_samples == 4
    assert settings.gemini_model == "gemini-2.5-flash"
    assert settings.log_level == "DEBUG"


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("CLIPNOTE_SKIP_SECONDS", "  ")
    assert Settings.from_env(dotenv=False).skip_seconds == 5.0


@pytest.mark.parametrize("name, value", [
    ("CLIPNOTE_EPSILON", "soon"),
    ("CLIPNOTE_SEEK_GUARD", "-1"),
    ("CLIPNOTE_SEEK_SETTLE_SAMPLES", "2.5"),
])
def test_invalid_values_name_the_variable(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        Settings.from_env(dotenv=False)


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        Settings().epsilon = 1.0
