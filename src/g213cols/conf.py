"""User settings for g213-cols.

Config is stored at ~/.config/g213cols/config.json (XDG-compliant)::

    {"timeout_ms": 50}

Only transfer tuning lives here; lighting commands are never stored.

Usage:
    from g213cols.conf import settings

    settings.timeout_ms     # USB transfer timeout (ms)
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .g213_protocol import DEFAULT_TIMEOUT_MS

log = logging.getLogger(__name__)

# =========================================================================
# Config file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'g213cols')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.json')

MIN_TIMEOUT_MS = 1
MAX_TIMEOUT_MS = 10_000


def load_config() -> dict:
    """Load user config from disk. Returns empty dict on missing/corrupt file."""
    try:
        with open(CONFIG_PATH, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, e)
        return {}
    if not isinstance(config, dict):
        log.warning("Ignoring config %s: expected a JSON object", CONFIG_PATH)
        return {}
    return config


def clamp_timeout(timeout_ms: int) -> int:
    return max(MIN_TIMEOUT_MS, min(MAX_TIMEOUT_MS, timeout_ms))


def get_saved_timeout() -> int:
    """Get configured transfer timeout, defaulting to DEFAULT_TIMEOUT_MS."""
    value = load_config().get('timeout_ms', DEFAULT_TIMEOUT_MS)
    try:
        return clamp_timeout(int(value))
    except (TypeError, ValueError):
        log.warning("Ignoring bad timeout_ms %r in %s", value, CONFIG_PATH)
        return DEFAULT_TIMEOUT_MS


class Settings:
    """Application-wide settings singleton.

    Values are read from the config file once; command-line options
    override them for the current process only.
    """

    def __init__(self) -> None:
        self._timeout_ms = get_saved_timeout()

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def override_timeout(self, timeout_ms: Optional[int]) -> None:
        """Use a different timeout for this run (None keeps the configured one)."""
        if timeout_ms is None:
            return
        self._timeout_ms = clamp_timeout(timeout_ms)
        log.debug("Settings: timeout overridden to %d ms", self._timeout_ms)


# Module-level singleton, import and use directly
settings = Settings()
