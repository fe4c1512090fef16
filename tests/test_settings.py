"""
Unit tests for the settings file.
"""

import json

from dfmotor.utils import settings


def test_defaults_when_file_missing(settings_file):
    """Test missing file yields the defaults."""
    assert not settings_file.exists()
    loaded = settings.load_settings()
    assert loaded == settings.DEFAULT_SETTINGS
    assert loaded is not settings.DEFAULT_SETTINGS


def test_partial_file_merged_over_defaults(settings_file):
    """Test a partial file only overrides its own keys."""
    settings_file.write_text(json.dumps({'board': {'address': 0x11}}))

    loaded = settings.load_settings()
    assert loaded['board']['address'] == 0x11
    assert loaded['board']['i2c_bus'] == 1
    assert loaded['motors']['pwm_frequency_hz'] == 1000


def test_invalid_file_falls_back_to_defaults(settings_file):
    settings_file.write_text("[1, 2, 3]")
    assert settings.load_settings() == settings.DEFAULT_SETTINGS

    settings_file.write_text("{not json")
    assert settings.load_settings() == settings.DEFAULT_SETTINGS


def test_set_and_get_setting(settings_file):
    """Test dotted keys round trip through the file."""
    assert settings.set_setting('motors.reduction_ratio', 49)
    assert settings.get_setting('motors.reduction_ratio') == 49
    assert json.loads(settings_file.read_text())['motors']['reduction_ratio'] == 49
    assert settings.get_setting('motors.missing', 'fallback') == 'fallback'


def test_mutating_loaded_settings_keeps_defaults(settings_file):
    loaded = settings.load_settings()
    loaded['board']['address'] = 0x42
    assert settings.DEFAULT_SETTINGS['board']['address'] == 0x10


def test_reset_settings(settings_file):
    settings.set_setting('board.address', 0x22)
    assert settings.reset_settings()
    assert settings.get_setting('board.address') == 0x10


def test_save_leaves_no_temp_file(settings_file):
    assert settings.save_settings({'board': {'i2c_bus': 0}})
    assert [p.name for p in settings_file.parent.iterdir()] == ['settings.json']
