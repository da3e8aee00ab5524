"""Configuration model and option merging for the smack client."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from smack_client.errors import ConfigError

DEFAULT_SOCKET_PATH = "/tmp/smack.sock"
SOCKET_PATH_ENV_VAR = "SMACK_SOCKET_PATH"
SEVERITIES = ("light", "medium", "hard")
FALLBACK_LEVEL = 1

# camelCase aliases accepted alongside the dataclass field names.
_OPTION_ALIASES = {
    "socketPath": "socket_path",
    "undoCount": "undo_count",
    "shakeIntensity": "shake_intensity",
}

_LOGGER = logging.getLogger("Smack.Client.Config")


@dataclass(frozen=True)
class SeverityTable:
    light: int = 1
    medium: int = 3
    hard: int = 5

    def get(self, severity: str) -> int:
        if severity in SEVERITIES:
            return getattr(self, severity)
        return FALLBACK_LEVEL

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in SEVERITIES}


@dataclass(frozen=True)
class SmackConfig:
    socket_path: str = DEFAULT_SOCKET_PATH
    enabled: bool = True
    shake: bool = True
    undo_count: SeverityTable = field(default_factory=SeverityTable)
    shake_intensity: SeverityTable = field(default_factory=SeverityTable)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "socket_path": self.socket_path,
            "enabled": self.enabled,
            "shake": self.shake,
            "undo_count": self.undo_count.as_dict(),
            "shake_intensity": self.shake_intensity.as_dict(),
        }


DEFAULT_CONFIG = SmackConfig()


def _coerce_level(option: str, severity: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{option}.{severity} must be a positive integer, got {value!r}")
    if value < 1:
        raise ConfigError(f"{option}.{severity} must be a positive integer, got {value!r}")
    return value


def _merge_table(option: str, base: SeverityTable, overrides: Any) -> SeverityTable:
    if overrides is None:
        return base
    if not isinstance(overrides, Mapping):
        raise ConfigError(f"{option} must be a mapping of severity to integer, got {type(overrides).__name__}")
    changes: Dict[str, int] = {}
    for severity, value in overrides.items():
        if severity not in SEVERITIES:
            _LOGGER.debug("Ignoring unknown severity %r in %s", severity, option)
            continue
        changes[severity] = _coerce_level(option, severity, value)
    return replace(base, **changes)


def merge_options(options: Optional[Mapping[str, Any]] = None, *, base: SmackConfig = DEFAULT_CONFIG) -> SmackConfig:
    """Deep-merge caller options over ``base``.

    Top-level keys replace the base value; the per-severity tables merge key by
    key so ``{"undo_count": {"hard": 9}}`` keeps the base light/medium entries.
    """
    if not options:
        return base
    if not isinstance(options, Mapping):
        raise ConfigError(f"options must be a mapping, got {type(options).__name__}")

    normalised: Dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        normalised[name] = value

    changes: Dict[str, Any] = {}
    for key, value in normalised.items():
        if key == "socket_path":
            if not isinstance(value, (str, os.PathLike)) or not str(value):
                raise ConfigError(f"socket_path must be a non-empty path, got {value!r}")
            changes[key] = str(value)
        elif key in ("enabled", "shake"):
            changes[key] = bool(value)
        elif key in ("undo_count", "shake_intensity"):
            changes[key] = _merge_table(key, getattr(base, key), value)
        else:
            _LOGGER.debug("Ignoring unknown option %r", key)
    return replace(base, **changes)


def load_config_file(path: Path, *, base: SmackConfig = DEFAULT_CONFIG) -> SmackConfig:
    """Merge options from a JSON file, returning ``base`` when it is missing or unreadable."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return base
    except OSError as exc:
        _LOGGER.warning("Failed to read config %s: %s", path, exc)
        return base
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        _LOGGER.warning("Ignoring invalid JSON in %s: %s", path, exc)
        return base
    if not isinstance(data, dict):
        _LOGGER.warning("Ignoring config %s: expected a JSON object", path)
        return base
    return merge_options(data, base=base)


def resolve_socket_path(cli_value: Optional[str], config: SmackConfig) -> str:
    if cli_value:
        return str(Path(cli_value).expanduser())
    env_override = os.getenv(SOCKET_PATH_ENV_VAR)
    if env_override:
        return str(Path(env_override).expanduser())
    return config.socket_path
