# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence and traceability."""

from __future__ import annotations

import os
import re
import tomllib
from abc import abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import Config, ConfigError

CONFIG_FILENAME: Final[str] = ".aws-marketplace-cli.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "aws-marketplace-cli"
CLI_SOURCE_NAME: Final[str] = "cli"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@runtime_checkable
class ConfigSource(Protocol):
    """Provide a named configuration fragment."""

    name: str
    """Identifier recorded in the provenance trace."""

    @abstractmethod
    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment provided by this source.

        Returns:
            Mapping[str, Any]: Configuration values keyed by field name.
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable description of the source."""


class DefaultConfigSource(ConfigSource):
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().model_dump(exclude_none=True)

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource(ConfigSource):
    """Load configuration data from a TOML document."""

    def __init__(self, path: Path, *, name: str | None = None, env: Mapping[str, str] | None = None) -> None:
        self._path = path
        self.name = name or str(path)
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{self._path}: invalid TOML: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"{self._path}: {exc.strerror or exc}") from exc
        return _expand_env(data, self._env)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.aws-marketplace-cli]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return dict(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class FieldUpdate(BaseModel):
    """Description of a single configuration field set by a source."""

    model_config = ConfigDict(validate_assignment=True)

    field: str
    source: str
    value: Any


class ConfigLoadResult(BaseModel):
    """Container bundling a resolved config with provenance metadata."""

    model_config = ConfigDict(validate_assignment=True)

    config: Config
    updates: list[FieldUpdate] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    descriptions: list[str] = Field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, project_root: Path, sources: Sequence[ConfigSource]) -> None:
        """Initialise a loader that merges the supplied configuration sources.

        Args:
            project_root: Directory that anchors a relative ``data_dir``.
            sources: Ordered collection of configuration sources, lowest
                precedence first.
        """

        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)
        self._project_root = project_root.resolve()

    @classmethod
    def for_root(
        cls,
        project_root: Path,
        *,
        user_config: Path | None = None,
        project_config: Path | None = None,
    ) -> ConfigLoader:
        """Build a loader that respects user, project, and default sources.

        Args:
            project_root: Workspace root used to discover configuration files.
            user_config: Optional path to a user-level override.
            project_config: Optional project-level override path.

        Returns:
            ConfigLoader: Loader configured with default precedence ordering.
        """

        root = project_root.resolve()
        home_config = user_config if user_config is not None else Path.home() / CONFIG_FILENAME
        project_file = project_config if project_config is not None else root / CONFIG_FILENAME
        pyproject = root / "pyproject.toml"
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            TomlConfigSource(home_config, name=str(home_config)),
        ]
        if pyproject.exists():
            sources.append(PyProjectConfigSource(pyproject, name=str(pyproject)))
        sources.append(TomlConfigSource(project_file, name=str(project_file)))
        return cls(project_root=root, sources=sources)

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Config:
        """Return the resolved configuration without provenance metadata."""

        return self.load_with_trace(overrides=overrides).config

    def load_with_trace(self, *, overrides: Mapping[str, Any] | None = None) -> ConfigLoadResult:
        """Return the resolved configuration with trace metadata.

        Args:
            overrides: Values supplied on the command line; ``None`` entries are
                ignored so unset options never mask file values.

        Returns:
            ConfigLoadResult: Resolved configuration and provenance details.

        Raises:
            ConfigError: If a source is unreadable or the merged values are invalid.
        """

        merged: dict[str, Any] = {}
        updates: list[FieldUpdate] = []
        contributing: list[str] = []
        descriptions: list[str] = []
        fragments: list[tuple[str, str, Mapping[str, Any]]] = [
            (source.name, source.describe(), source.load()) for source in self._sources
        ]
        if overrides:
            cli_values = {key: value for key, value in overrides.items() if value is not None}
            fragments.append((CLI_SOURCE_NAME, "Command-line options", cli_values))
        for name, description, fragment in fragments:
            if not fragment:
                continue
            contributing.append(name)
            descriptions.append(description)
            for key, value in fragment.items():
                if name != DefaultConfigSource.name and merged.get(key) != value:
                    updates.append(FieldUpdate(field=key, source=name, value=value))
                merged[key] = value
        try:
            config = Config.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(_format_validation_error(exc)) from exc
        if not config.data_dir.is_absolute():
            config.data_dir = self._project_root / config.data_dir
        return ConfigLoadResult(config=config, updates=updates, sources=contributing, descriptions=descriptions)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "config"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "invalid configuration: " + "; ".join(parts)


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "FieldUpdate",
    "PyProjectConfigSource",
    "TomlConfigSource",
]
