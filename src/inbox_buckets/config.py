"""Runtime configuration, built once at startup and passed around explicitly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .constants import (
    CONFIG_DIR,
    CREDENTIALS_FILENAME,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MAX_WORKERS,
    ENV_CREDENTIALS_PATH,
    ENV_HOME,
    ENV_REDIRECT_URI,
    ENV_RULES_PATH,
    ENV_TOKEN_PATH,
    RULES_FILENAME,
    TOKEN_FILENAME,
)


@dataclass(frozen=True)
class AppConfig:
    """Paths and knobs for one process."""

    config_dir: Path
    credentials_path: Path
    token_path: Path
    rules_path: Path
    redirect_uri: str | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    max_workers: int = DEFAULT_MAX_WORKERS
    include_snippet: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> AppConfig:
        """Build the config from defaults, then environment, then explicit overrides.

        All files live in the config dir unless an env var points elsewhere.
        """
        env = os.environ if environ is None else environ

        config_dir = Path(env[ENV_HOME]).expanduser() if env.get(ENV_HOME) else CONFIG_DIR

        def _path(var: str, filename: str) -> Path:
            value = env.get(var)
            return Path(value).expanduser() if value else config_dir / filename

        values = {
            "config_dir": config_dir,
            "credentials_path": _path(ENV_CREDENTIALS_PATH, CREDENTIALS_FILENAME),
            "token_path": _path(ENV_TOKEN_PATH, TOKEN_FILENAME),
            "rules_path": _path(ENV_RULES_PATH, RULES_FILENAME),
            "redirect_uri": env.get(ENV_REDIRECT_URI) or None,
        }
        for key, value in overrides.items():
            if value is None:
                continue
            values[key] = Path(value) if key.endswith(("_path", "_dir")) else value
        return cls(**values)
