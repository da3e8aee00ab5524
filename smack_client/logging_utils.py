from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "Smack.Client"
DEV_MODE_ENV_VAR = "SMACK_DEV_MODE"
LOG_DIR_ENV_VAR = "SMACK_LOG_DIR"
LOG_FILENAME = "smack-client.log"


def is_dev_mode() -> bool:
    value = os.getenv(DEV_MODE_ENV_VAR)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def resolve_logs_dir(log_dir_name: str = "smack") -> Path:
    """
    Resolve the directory to store client logs.

    Strategy:
    - Use SMACK_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / log_dir_name / "logs")
    candidates.append(cache_home / log_dir_name / "logs")
    candidates.append(Path.cwd() / "logs" / log_dir_name)

    for target in candidates:
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def build_rotating_file_handler(
    log_dir: Path,
    filename: str = LOG_FILENAME,
    *,
    retention: int = 5,
    max_bytes: int = 512 * 1024,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler with sane defaults."""
    retention = max(1, retention)
    backup_count = max(0, retention - 1)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler


def resolve_log_level(debug_enabled: bool) -> int:
    return logging.DEBUG if debug_enabled else logging.INFO


def configure_client_logger(
    *,
    debug_enabled: Optional[bool] = None,
    log_dir: Optional[Path] = None,
    retention: int = 5,
) -> logging.Logger:
    """Attach a rotating file handler to the client logger once."""
    logger = logging.getLogger(LOGGER_NAME)
    debug = is_dev_mode() if debug_enabled is None else debug_enabled
    logger.setLevel(resolve_log_level(debug))
    if any(getattr(handler, "_smack_handler", False) for handler in logger.handlers):
        return logger
    target_dir = log_dir if log_dir is not None else resolve_logs_dir()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    handler = build_rotating_file_handler(target_dir, retention=retention, formatter=formatter)
    handler._smack_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = debug
    return logger
