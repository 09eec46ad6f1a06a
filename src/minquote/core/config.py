"""minquote configuration and logging."""

from __future__ import annotations

import atexit
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import IO

import structlog

from minquote.core.parser import CHECKERS

USER_CONFIG = Path.home() / ".minquote" / "config"
PROJECT_CONFIG_NAME = ".minquote"
ENV_CONFIG = "MINQUOTE_CONFIG"


# Config scopes in priority order (lowest to highest)
SCOPE_USER = "user"
SCOPE_PROJECT = "project"
SCOPE_ENV = "env"
SCOPE_CLI = "cli"


@dataclass(frozen=True)
class Config:
    """Parsed configuration."""

    self_check: bool = True
    checker: str = "builtin"  # key of minquote.core.parser.CHECKERS
    join: bool = False
    explain: bool = False
    log: Path | None = None  # None = no logging

    explicit: frozenset[str] = frozenset()
    """Settings actually written in a config file; only these override."""

    sources: tuple[tuple[str, str], ...] = field(default=())
    """(scope, path) of every file merged in, in load order."""


# === Config Loading ===


def _find_project_config(cwd: Path) -> Path | None:
    """Walk up from cwd to find .minquote file."""
    current = cwd.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:  # reached root
            return None
        current = parent


def _merge_configs(base: Config, overlay: Config) -> Config:
    """Merge overlay config into base. Settings written in overlay win."""
    changes = {name: getattr(overlay, name) for name in overlay.explicit}
    return replace(
        base,
        **changes,
        explicit=base.explicit | overlay.explicit,
        sources=base.sources + overlay.sources,
    )


def _load_file(config: Config, path: Path, scope: str) -> Config:
    try:
        overlay = parse_config(path.read_text())
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from None
    overlay = replace(overlay, sources=((scope, str(path)),))
    return _merge_configs(config, overlay)


def load_config(cwd: Path, path: Path | None = None) -> Config:
    """Load config from ~/.minquote/config, .minquote, $MINQUOTE_CONFIG and path.

    Later files override earlier ones. Raises ValueError on syntax errors.
    """
    config = Config()

    # 1. User config (lowest priority)
    if USER_CONFIG.is_file():
        config = _load_file(config, USER_CONFIG, SCOPE_USER)

    # 2. Project config (walk up from cwd)
    project_path = _find_project_config(cwd)
    if project_path is not None:
        config = _load_file(config, project_path, SCOPE_PROJECT)

    # 3. Env override
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        env_config_path = Path(env_path).expanduser()
        if env_config_path.is_file():
            config = _load_file(config, env_config_path, SCOPE_ENV)

    # 4. Explicit --config (highest priority)
    if path is not None:
        if not path.is_file():
            raise ValueError(f"{path}: no such config file")
        config = _load_file(config, path, SCOPE_CLI)

    return config


def parse_config(text: str) -> Config:
    """Parse config text into Config object. Raises ValueError on syntax errors."""
    settings: dict[str, bool | str | Path] = {}

    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        directive = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        try:
            if directive == "set":
                _apply_setting(settings, rest)
            else:
                raise ValueError(f"unknown directive '{directive}'")
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from None

    return replace(Config(), **settings, explicit=frozenset(settings))


def _apply_setting(settings: dict[str, bool | str | Path], rest: str) -> None:
    """Parse and apply a 'set' directive. Raises ValueError on invalid setting."""
    if not rest:
        raise ValueError("'set' requires a setting name")

    parts = rest.split(None, 1)
    key = parts[0].lower()
    value = parts[1].strip() if len(parts) > 1 else None
    key_normalized = key.replace("-", "_")

    negated = key_normalized.startswith("no_")
    if negated:
        key_normalized = key_normalized[3:]

    # Boolean settings (no value required)
    if key_normalized in ("self_check", "join", "explain"):
        if value is not None:
            raise ValueError(f"'{key}' takes no value")
        settings[key_normalized] = not negated

    elif negated:
        raise ValueError(f"unknown setting '{key}'")

    # Choice settings
    elif key_normalized == "checker":
        if value not in CHECKERS:
            choices = ", ".join(f"'{name}'" for name in CHECKERS)
            raise ValueError(f"'checker' must be one of {choices}, got '{value}'")
        settings[key_normalized] = value

    # Path settings
    elif key_normalized == "log":
        if value is None:
            raise ValueError("'log' requires a path")
        settings[key_normalized] = Path(value).expanduser()

    else:
        raise ValueError(f"unknown setting '{key}'")


# === Logging ===

_logger: structlog.typing.FilteringBoundLogger | None = None
_log_file: IO[str] | None = None


def _close_log_file() -> None:
    global _logger, _log_file
    _logger = None
    if _log_file is not None:
        _log_file.close()
        _log_file = None


atexit.register(_close_log_file)


def configure_logging(config: Config) -> None:
    """Configure logging based on config settings. Call once at startup."""
    global _logger, _log_file
    _close_log_file()

    if config.log is None:
        _logger = None
        return

    # Ensure log directory exists
    config.log.parent.mkdir(parents=True, exist_ok=True)
    _log_file = open(config.log, "a")

    # JSON lines, one event per quoted word
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(file=_log_file),
        cache_logger_on_first_use=False,
    )
    _logger = structlog.get_logger()


def log_event(event: str, level: str = "info", **fields: object) -> None:
    """Log an event. No-op if logging not configured."""
    if _logger is None:
        return
    getattr(_logger, level)(event, **fields)
