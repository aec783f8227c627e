"""Global configuration — XDG paths, env vars, defaults."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from laracheck.errors import ConfigError


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "laracheck"
    return Path.home() / ".config" / "laracheck"


@dataclass
class LaraCheckConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    rules_path: Path | None = None
    max_files: int = 20_000
    timeout: float = 120.0
    max_file_size: int = 1_048_576
    workers: int = 1

    @classmethod
    def load(cls) -> LaraCheckConfig:
        """Load config from environment variables with XDG defaults."""
        config = cls()

        env_rules = os.environ.get("RULES_PATH")
        if env_rules:
            config.rules_path = Path(env_rules)
        else:
            user_rules = config.config_dir / "rules.yaml"
            if user_rules.is_file():
                config.rules_path = user_rules

        config.max_files = _env_number("LARACHECK_MAX_FILES", int, config.max_files)
        config.timeout = _env_number("LARACHECK_TIMEOUT", float, config.timeout)
        config.max_file_size = _env_number(
            "LARACHECK_MAX_FILE_SIZE", int, config.max_file_size
        )
        config.workers = _env_number("LARACHECK_WORKERS", int, config.workers)

        return config


def _env_number(name: str, kind, default):
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive number, got {raw!r}")
    return value
