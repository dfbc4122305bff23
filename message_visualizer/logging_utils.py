from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Tuple

LOGGER_NAME = "MessageVisualizer.Client"
LOG_DIR_NAME = "message_visualizer"
LOG_FILE_NAME = "message_visualizer.log"
LOG_DIR_ENV_VAR = "MESSAGE_VISUALIZER_LOG_DIR"
LOG_LEVEL_ENV_VAR = "MESSAGE_VISUALIZER_LOG_LEVEL"
MAX_LOG_BYTES = 512 * 1024
_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_logs_dir(log_dir_name: str = LOG_DIR_NAME) -> Path:
    """
    Resolve the directory to store client logs.

    Strategy:
    - Use MESSAGE_VISUALIZER_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home)
    candidates.append(cache_home)
    candidates.append(Path.cwd() / "logs")

    for base in candidates:
        target = base / log_dir_name
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return target

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def open_log_file_handler(log_dir: Path, *, retention: int = 5) -> Tuple[RotatingFileHandler, Path]:
    """Open ``message_visualizer.log`` in ``log_dir``, keeping ``retention - 1`` rotated copies."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=max(0, retention - 1),
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
    return handler, log_path


def coerce_log_level(value: Any) -> Optional[int]:
    """Turn ``10``, ``"10"`` or ``"debug"`` into a numeric level; ``None`` if unrecognised."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    attr = getattr(logging, text.upper(), None)
    if isinstance(attr, int):
        return attr
    return None


def resolve_log_level_hint(cli_value: Any = None, settings_value: Any = None) -> Tuple[int, str]:
    """Return ``(level, source)`` from CLI, then environment, then settings, then INFO."""
    level = coerce_log_level(cli_value)
    if level is not None:
        return level, "cli"
    level = coerce_log_level(os.getenv(LOG_LEVEL_ENV_VAR))
    if level is not None:
        return level, "env"
    level = coerce_log_level(settings_value)
    if level is not None:
        return level, "settings"
    return logging.INFO, "default"


def _replace_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    for existing in list(logger.handlers):
        if getattr(existing, "_message_visualizer_handler", False):
            logger.removeHandler(existing)
            existing.close()
    setattr(handler, "_message_visualizer_handler", True)
    logger.addHandler(handler)


def configure_client_logging(
    logger: logging.Logger,
    *,
    retention: int = 5,
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Attach a rotating file handler to ``logger``; returns the log path or None on fallback."""
    logger.setLevel(level)
    logger.propagate = False
    try:
        target_dir = log_dir if log_dir is not None else resolve_logs_dir()
        handler, log_path = open_log_file_handler(target_dir, retention=retention)
    except OSError as exc:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        _replace_handler(logger, stream_handler)
        logger.warning("Failed to initialise file logging: %s", exc)
        return None
    _replace_handler(logger, handler)
    logger.debug(
        "Client logging initialised: path=%s retention=%d max_bytes=%d level=%s",
        log_path,
        retention,
        MAX_LOG_BYTES,
        logging.getLevelName(level),
    )
    return log_path
