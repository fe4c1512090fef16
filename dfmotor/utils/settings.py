"""
Settings for the motor board driver and its tools.

Stored as JSON in ~/.dfmotor/settings.json (or the path in the
DFMOTOR_SETTINGS environment variable) and merged over DEFAULT_SETTINGS,
so a partial file only overrides the keys it contains.
"""

import copy
import json
import os
import logging
import contextlib
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

SETTINGS_DIR = Path.home() / '.dfmotor'
SETTINGS_FILE = SETTINGS_DIR / 'settings.json'
SETTINGS_ENV = 'DFMOTOR_SETTINGS'
TMP_SUFFIX = '.tmp'

DEFAULT_SETTINGS: Dict[str, Any] = {
    'board': {
        'i2c_bus': 1,
        'address': 0x10,
        'pigpio_host': None,
        'pigpio_port': None,
    },
    'motors': {
        'pwm_frequency_hz': 1000,
        'reduction_ratio': 43,
    },
    'logging': {
        'log_dir': '',
        'console_level': 'INFO',
    },
}


def settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override)
    return SETTINGS_FILE


def merge_settings(defaults: Dict[str, Any], current: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in current.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings() -> Dict[str, Any]:
    path = settings_path()
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file is not a JSON object")
            return merge_settings(DEFAULT_SETTINGS, data)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading settings from {path}: {e}")
    return copy.deepcopy(DEFAULT_SETTINGS)


def save_settings(settings: Dict[str, Any]) -> bool:
    path = settings_path()
    settings = merge_settings(DEFAULT_SETTINGS, settings)
    tmp_path = path.with_suffix(path.suffix + TMP_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2, ensure_ascii=False)
        os.replace(str(tmp_path), str(path))
        return True
    except OSError as e:
        logger.error(f"Error saving settings to {path}: {e}")
        with contextlib.suppress(OSError):
            if tmp_path.exists():
                tmp_path.unlink()
        return False


def get_setting(path: str, default: Any = None) -> Any:
    """Read a dotted key, e.g. get_setting('board.address')."""
    value: Any = load_settings()
    try:
        for key in path.split('.'):
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default


def set_setting(path: str, value: Any) -> bool:
    settings = load_settings()
    keys = path.split('.')
    cur = settings
    for k in keys[:-1]:
        if k not in cur or not isinstance(cur[k], dict):
            cur[k] = {}
        cur = cur[k]
    cur[keys[-1]] = value
    return save_settings(settings)


def reset_settings() -> bool:
    return save_settings(copy.deepcopy(DEFAULT_SETTINGS))


__all__ = [
    'load_settings',
    'save_settings',
    'get_setting',
    'set_setting',
    'reset_settings',
    'settings_path',
    'DEFAULT_SETTINGS',
]
