"""Locate and read the optional ``[pingu]`` table from a TOML file."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "PINGU_CONFIG"
CONFIG_TABLE = "pingu"
DEFAULT_CONFIG_PATH = Path("config.toml")


def config_path(path: str | Path | None = None) -> Path:
    """Resolve the file to read: explicit ``path``, then ``$PINGU_CONFIG``, then ``config.toml``."""

    if path is not None:
        return Path(path)
    override = os.getenv(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Return the ``[pingu]`` table of the bot's TOML file.

    A missing file or a file without the table yields an empty dict, so every
    setting falls back to its environment variable. Other tables in the file
    are ignored.
    """

    target = config_path(path)
    if not target.is_file():
        if path is not None or os.getenv(CONFIG_PATH_ENV):
            logger.warning("Config file %s not found; using environment only.", target)
        return {}

    with target.open("rb") as handle:
        document = tomllib.load(handle)

    table = document.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{CONFIG_TABLE}] in {target} must be a table")
    return table


__all__ = ["CONFIG_PATH_ENV", "CONFIG_TABLE", "DEFAULT_CONFIG_PATH", "config_path", "load_raw_config"]
