from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.toml")
CONFIG_PATH_ENV = "CHATDISPATCH_CONFIG"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit path first, then ``$CHATDISPATCH_CONFIG``, then ./config.toml."""

    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_PATH_ENV, "").strip()
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the application config file.

    Returns an empty dict when the file is missing so callers can fall back to
    environment variables. A malformed file is a startup error.
    """
    target = resolve_config_path(path)
    if not target.is_file():
        logger.debug("No config file at %s; using environment only", target)
        return {}

    with target.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid config file {target}: {exc}") from exc


__all__ = ["load_raw_config", "resolve_config_path", "DEFAULT_CONFIG_PATH", "CONFIG_PATH_ENV"]
