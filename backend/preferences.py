#!/usr/bin/env python3
"""
User preferences stored as JSON.
Holds the viewer window geometry and overrides for layout parameters.
"""
import copy
import json
import logging
import os

from backend.force_directed_layout import LayoutConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "FORCEGRAPH_CONFIG_DIR"
DEFAULT_CONFIG_DIR = os.path.expanduser("~/.config/forcegraph-lite")
PREFERENCES_FILE = "preferences.json"

DEFAULT_PREFERENCES = {
    'window': {'width': 1200, 'height': 800},
    'layout': {},
}


def preferences_path():
    config_dir = os.environ.get(CONFIG_DIR_ENV) or DEFAULT_CONFIG_DIR
    return os.path.join(config_dir, PREFERENCES_FILE)


def load_preferences(path=None):
    """
    Load preferences, falling back to defaults.

    A missing or unreadable file is not an error: the problem is logged and
    the defaults for the affected sections are kept.
    """
    path = path or preferences_path()
    prefs = copy.deepcopy(DEFAULT_PREFERENCES)
    if not os.path.exists(path):
        return prefs

    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers both bad JSON and bytes that are not UTF-8
        logger.error(f"Error loading preferences from {path}: {e}")
        return prefs

    if not isinstance(stored, dict):
        logger.error(f"Ignoring preferences in {path}: top level is not an object")
        return prefs

    for section in prefs:
        value = stored.get(section, {})
        if isinstance(value, dict):
            prefs[section].update(value)
        else:
            logger.warning(f"Ignoring preferences section {section!r}: not an object")
    return prefs


def save_preferences(prefs, path=None):
    path = path or preferences_path()
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(prefs, f, indent=2)
    logger.debug(f"Preferences saved to {path}")


def layout_config_from(prefs):
    """LayoutConfig with the overrides from the 'layout' section applied."""
    try:
        return LayoutConfig.from_dict(prefs.get('layout'))
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid layout preferences, using defaults: {e}")
        return LayoutConfig()
