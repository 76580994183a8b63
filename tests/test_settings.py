"""
Settings loading from the environment and logging setup.
"""
import logging
import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from quote_tool.config.settings import Settings, get_settings, reset_settings
from quote_tool.logging_setup import LOG_NAME, configure_logging

ENV_KEYS = (
    'QUOTE_TOOL_AGENCY_NAME', 'QUOTE_TOOL_RATE_CARD', 'GOOGLE_GENAI_API_KEY', 'API_KEY',
    'QUOTE_TOOL_GENAI_MODEL', 'QUOTE_TOOL_GENAI_TIMEOUT', 'QUOTE_TOOL_FONT_PATH', 'QUOTE_TOOL_LOG_LEVEL',
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield monkeypatch
    reset_settings()


def test_defaults(clean_env, tmp_path):
    settings = Settings.load(tmp_path)
    assert settings.agency_name == "OneWay media"
    assert settings.rate_card_csv == tmp_path / 'rate_card.csv'
    assert settings.genai_api_key == ""
    assert settings.genai_model == "gemini-3-flash-preview"
    assert settings.genai_timeout == 15.0
    assert settings.font_path is None
    assert settings.log_level == "INFO"


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv('QUOTE_TOOL_AGENCY_NAME', 'Studio Kita')
    clean_env.setenv('QUOTE_TOOL_RATE_CARD', str(tmp_path / 'custom.csv'))
    clean_env.setenv('API_KEY', 'secret')
    clean_env.setenv('QUOTE_TOOL_GENAI_TIMEOUT', '4.5')
    clean_env.setenv('QUOTE_TOOL_LOG_LEVEL', 'debug')

    settings = Settings.load(tmp_path)
    assert settings.agency_name == 'Studio Kita'
    assert settings.rate_card_csv == Path(tmp_path / 'custom.csv')
    assert settings.genai_api_key == 'secret'
    assert settings.genai_timeout == 4.5
    assert settings.log_level == 'DEBUG'


def test_bad_timeout_falls_back_to_default(clean_env, tmp_path):
    clean_env.setenv('QUOTE_TOOL_GENAI_TIMEOUT', 'soon')
    assert Settings.load(tmp_path).genai_timeout == 15.0


def test_get_settings_is_cached_until_reset(clean_env):
    first = get_settings()
    assert get_settings() is first
    reset_settings()
    assert get_settings() is not first


def test_configure_logging_adds_one_handler():
    logger = configure_logging("DEBUG")
    configure_logging("WARNING")
    own = [h for h in logger.handlers if getattr(h, "_quote_tool", False)]

    assert logger.name == LOG_NAME
    assert len(own) == 1
    assert logger.level == logging.WARNING
