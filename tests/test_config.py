from pathlib import Path

import _bootstrap  # noqa: F401
import pytest

from rhyme_lab.config import DEFAULT_MODEL, ConfigurationError, Settings


def test_settings_from_env():
    settings = Settings.from_env(
        {"GEMINI_API_KEY": "secret", "RHYME_LAB_MODEL": "other", "RHYME_LAB_LEXICON": "/tmp/words.txt"}
    )
    assert settings.api_key == "secret"
    assert settings.model == "other"
    assert settings.lexicon_path == Path("/tmp/words.txt")


def test_settings_fall_back_to_api_key_variable():
    settings = Settings.from_env({"API_KEY": "fallback"})
    assert settings.api_key == "fallback"
    assert settings.model == DEFAULT_MODEL
    assert settings.lexicon_path is None


def test_override_skips_missing_values():
    settings = Settings(api_key="a").override(api_key=None, model="m", lexicon_path="words.txt")
    assert settings.api_key == "a"
    assert settings.model == "m"
    assert settings.lexicon_path == Path("words.txt")


def test_missing_api_key_is_reported():
    with pytest.raises(ConfigurationError):
        Settings().require_api_key()
