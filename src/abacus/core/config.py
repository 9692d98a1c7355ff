"""
Abacus settings.

Settings are read from ``abacus.toml`` (top-level keys or an ``[abacus]``
table) or from ``[tool.abacus]`` in ``pyproject.toml``, then overridden by
``ABACUS_*`` environment variables.

Example ``abacus.toml``::

    division = "error"
    max_depth = 100
    max_steps = 10000
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from abacus.core.errors import ConfigError

logger = logging.getLogger(__name__)

DIVISION_POLICIES = ("ieee", "error")

_ENV_PREFIX = "ABACUS_"


@dataclass(frozen=True)
class Settings:
    """Evaluation and parsing limits."""

    division: str = "ieee"  # "ieee" | "error"
    max_depth: int = 200  # maximum parenthesis nesting
    max_steps: int | None = None  # node visits per evaluation; None = unlimited

    def __post_init__(self) -> None:
        if self.division not in DIVISION_POLICIES:
            raise ConfigError(
                f"division must be one of {', '.join(DIVISION_POLICIES)}, got {self.division!r}"
            )
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 1:
            raise ConfigError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.max_steps is not None:
            if isinstance(self.max_steps, bool) or not isinstance(self.max_steps, int):
                raise ConfigError(f"max_steps must be an integer, got {self.max_steps!r}")
            if self.max_steps < 1:
                raise ConfigError(f"max_steps must be at least 1, got {self.max_steps}")


def _settings_from_mapping(data: dict[str, Any], source: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s) in {source}: {', '.join(unknown)}")
    return Settings(**data)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _load_file_settings(root: Path) -> Settings:
    abacus_toml = root / "abacus.toml"
    if abacus_toml.exists():
        data = _read_toml(abacus_toml)
        table = data.get("abacus", data)
        logger.debug("Loaded settings from %s", abacus_toml)
        return _settings_from_mapping(table, str(abacus_toml))

    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        data = _read_toml(pyproject)
        table = data.get("tool", {}).get("abacus")
        if table is not None:
            logger.debug("Loaded settings from [tool.abacus] in %s", pyproject)
            return _settings_from_mapping(table, f"{pyproject} [tool.abacus]")

    return Settings()


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{_ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from e


def _apply_env(settings: Settings, environ: Mapping[str, str]) -> Settings:
    overrides: dict[str, Any] = {}

    division = environ.get(f"{_ENV_PREFIX}DIVISION")
    if division:
        overrides["division"] = division.strip().lower()

    max_depth = environ.get(f"{_ENV_PREFIX}MAX_DEPTH")
    if max_depth:
        overrides["max_depth"] = _parse_int("max_depth", max_depth)

    max_steps = environ.get(f"{_ENV_PREFIX}MAX_STEPS")
    if max_steps:
        if max_steps.strip().lower() in ("none", "unlimited"):
            overrides["max_steps"] = None
        else:
            overrides["max_steps"] = _parse_int("max_steps", max_steps)

    if overrides:
        logger.debug("Environment overrides: %s", overrides)
        return replace(settings, **overrides)
    return settings


def load_settings(
    root: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings for a project directory.

    Args:
        root: Directory holding ``abacus.toml`` or ``pyproject.toml``
            (default: current directory).
        environ: Environment mapping for ``ABACUS_*`` overrides
            (default: ``os.environ``).

    Returns:
        Resolved settings.

    Raises:
        ConfigError: If a file is malformed or a value is invalid.
    """
    root_path = Path(root) if root is not None else Path.cwd()
    settings = _load_file_settings(root_path)
    return _apply_env(settings, os.environ if environ is None else environ)
