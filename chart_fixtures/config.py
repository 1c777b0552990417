"""Fixture settings.

Settings come from ``[tool.chart-fixtures]`` in a pyproject.toml, then
environment variables override individual keys:

    [tool.chart-fixtures]
    verbose = true
    log-level = "DEBUG"
    temp-prefix = "helm-action-test"

    CHART_FIXTURES_VERBOSE=1
    CHART_FIXTURES_LOG_LEVEL=INFO
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ValidationError, field_validator
from tomlkit.exceptions import ParseError

from .errors import ConfigError

logger = logging.getLogger(__name__)

TOOL_TABLE = "chart-fixtures"
ENV_VERBOSE = "CHART_FIXTURES_VERBOSE"
ENV_LOG_LEVEL = "CHART_FIXTURES_LOG_LEVEL"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


class FixtureSettings(BaseModel):
    """Knobs for the action configuration fixture.

    Attributes:
        verbose: Whether the collaborators' log callback emits anything.
        log_level: Level for setup_logging().
        temp_prefix: Prefix for the fixture's temporary directory.
        cache_debug: Debug flag handed to the registry cache.
    """

    verbose: bool = False
    log_level: str = "WARNING"
    temp_prefix: str = "helm-action-test"
    cache_debug: bool = True

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return upper


def _read_tool_table(pyproject: Path) -> dict[str, Any]:
    """Return [tool.chart-fixtures] with keys converted to snake_case."""
    try:
        doc = tomlkit.parse(pyproject.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read {pyproject}: {e}") from e
    except ParseError as e:
        raise ConfigError(f"Invalid TOML in {pyproject}: {e}") from e

    tool = doc.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigError(f"[tool] in {pyproject} must be a table")
    table = tool.get(TOOL_TABLE)
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{TOOL_TABLE}] in {pyproject} must be a table")
    # unwrap() turns tomlkit items into plain Python values
    return {str(k).replace("-", "_"): v for k, v in table.unwrap().items()}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def load_settings(
    pyproject: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> FixtureSettings:
    """Load settings from a pyproject.toml and the environment.

    A missing file or table means defaults.

    Args:
        pyproject: Path to pyproject.toml. Defaults to ./pyproject.toml.
        env: Environment to read overrides from. Defaults to os.environ.

    Raises:
        ConfigError: If the file or any value is invalid.
    """
    path = pyproject if pyproject is not None else Path.cwd() / "pyproject.toml"
    env = os.environ if env is None else env

    data: dict[str, Any] = {}
    if path.is_file():
        logger.debug("Loading fixture settings from %s", path)
        data = _read_tool_table(path)

    if ENV_VERBOSE in env:
        data["verbose"] = _parse_bool(ENV_VERBOSE, env[ENV_VERBOSE])
    if ENV_LOG_LEVEL in env:
        data["log_level"] = env[ENV_LOG_LEVEL]

    try:
        return FixtureSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid fixture settings: {e}") from e
