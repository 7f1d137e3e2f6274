# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration model and layered TOML sources."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .types import CATALOG_RELATIVE_PATH, OS_ARTIFACT_FILENAMES, PACKS_DIRNAME

LOGGER = logging.getLogger(__name__)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = "packcheck.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "packcheck"


class PackcheckConfig(BaseModel):
    """Effective settings for one packcheck invocation."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path = Field(default_factory=Path.cwd)
    catalog: Path = Path(CATALOG_RELATIVE_PATH)
    packs_dir: str = PACKS_DIRNAME
    strict: bool = False
    ignored_files: tuple[str, ...] = OS_ARTIFACT_FILENAMES
    emoji: bool = True
    color: bool = True

    @property
    def catalog_path(self) -> Path:
        return self.catalog if self.catalog.is_absolute() else self.root / self.catalog


class ConfigSource:
    """Base class for configuration fragments."""

    name: str = "source"

    def load(self) -> Mapping[str, Any]:
        raise NotImplementedError

    def describe(self) -> str:
        return self.name


class DefaultConfigSource(ConfigSource):
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return PackcheckConfig(root=Path(".")).model_dump(exclude={"root"})

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource(ConfigSource):
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        return _normalise_keys(self._read())

    def _read(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration at {self._path} is not valid TOML: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read configuration at {self._path}: {exc}") from exc

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.packcheck]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        tool_section = self._read().get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {self.name} must be a table")
        return _normalise_keys(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


def default_sources(root: Path) -> list[ConfigSource]:
    """Return configuration sources for ``root`` ordered lowest precedence first."""

    return [
        DefaultConfigSource(),
        PyProjectConfigSource(root / PYPROJECT_FILENAME),
        TomlConfigSource(root / CONFIG_FILENAME),
    ]


def load_config(
    root: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
    sources: Iterable[ConfigSource] | None = None,
) -> PackcheckConfig:
    """Build the effective configuration for the marketplace at ``root``.

    Args:
        root: Marketplace root directory.
        overrides: Values supplied on the command line; ``None`` entries are ignored.
        sources: Optional source list replacing :func:`default_sources`.

    Returns:
        PackcheckConfig: Validated configuration.

    Raises:
        ConfigError: If any source is malformed or a value fails validation.
    """
    merged: dict[str, Any] = {}
    for source in sources if sources is not None else default_sources(root):
        fragment = source.load()
        if fragment:
            LOGGER.debug("config: applying %s", source.describe())
        merged.update(fragment)
    merged.update({key: value for key, value in (overrides or {}).items() if value is not None})
    merged["root"] = root
    try:
        return PackcheckConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid packcheck configuration: {exc}") from exc


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in payload.items()}


__all__ = [
    "CONFIG_FILENAME",
    "ConfigSource",
    "DefaultConfigSource",
    "PackcheckConfig",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_config",
]
