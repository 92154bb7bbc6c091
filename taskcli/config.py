"""Settings loaded from environment variables.

One `Settings` object per CLI invocation; command-line options override it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_PREFIX = "TASK_CLI"

BACKENDS = ("file", "sql", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(env: Mapping[str, str], name: str, default: str) -> str:
    v = env.get(name)
    if v is None or v.strip() == "":
        return default
    return v.strip()


@dataclass(frozen=True)
class Settings:
    tasks_file: Path = Path("tasks.json")
    backend: str = "file"
    db_url: str = "sqlite:///tasks.db"
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def validate_backend(backend: str) -> str:
    value = backend.strip().lower()
    if value not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Valid options: {', '.join(BACKENDS)}")
    return value


def validate_log_level(level: str) -> str:
    value = level.strip().upper()
    if value not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Valid options: {', '.join(LOG_LEVELS)}")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Read `TASK_CLI_*` variables; unset or blank ones fall back to defaults."""
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        tasks_file=Path(_env(env, _k("FILE"), str(defaults.tasks_file))),
        backend=validate_backend(_env(env, _k("BACKEND"), defaults.backend)),
        db_url=_env(env, _k("DB_URL"), defaults.db_url),
        log_level=validate_log_level(_env(env, _k("LOG_LEVEL"), defaults.log_level)),
    )
