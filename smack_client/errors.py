from __future__ import annotations


class SmackError(Exception):
    """Base class for smack client errors."""


class ConfigError(SmackError, ValueError):
    """Raised when setup options carry an invalid value."""
