# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Local YAML mirror of catalog products under ``data/``."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import ValidationError

from .errors import LocalFileError
from .models import EntityDetails, Version

DESCRIPTION_STEM: Final[str] = "description"
VERSIONS_DIRNAME: Final[str] = "versions"
YAML_SUFFIX: Final[str] = ".yaml"


class _TextScalarLoader(yaml.SafeLoader):
    """Safe loader that keeps plain numeric scalars as their literal text."""


for _tag in ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float"):
    _TextScalarLoader.add_constructor(_tag, yaml.SafeLoader.construct_yaml_str)


def render_yaml(data: Mapping[str, Any]) -> str:
    """Render ``data`` as block-style YAML preserving key order."""

    return yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True, default_flow_style=False)


def _check_component(parent: Path, value: str, label: str) -> None:
    """Reject names that would escape ``parent`` when used as a path component."""

    if not value or value in {".", ".."} or "/" in value or "\\" in value or "\x00" in value:
        raise LocalFileError(parent / value, f"invalid {label}: {value!r}")


class LocalStore:
    """Read and write the per-product YAML files below ``root``.

    Layout::

        <root>/<product>/description.yaml
        <root>/<product>/versions/<version>.yaml
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def description_path(self, product_name: str) -> Path:
        return self._product_dir(product_name) / f"{DESCRIPTION_STEM}{YAML_SUFFIX}"

    def version_path(self, product_name: str, version_title: str) -> Path:
        versions_dir = self._product_dir(product_name) / VERSIONS_DIRNAME
        _check_component(versions_dir, version_title, "version title")
        return versions_dir / f"{version_title}{YAML_SUFFIX}"

    def _product_dir(self, product_name: str) -> Path:
        _check_component(self.root, product_name, "product name")
        return self.root / product_name

    def write_if_changed(self, path: Path, content: str | bytes) -> bool:
        """Write ``content`` to ``path`` unless the file already holds it.

        Args:
            path: Destination file; parent directories are created on demand.
            content: Text or raw bytes to persist; text is UTF-8 encoded.

        Returns:
            bool: ``True`` when the file was written, ``False`` when skipped.

        Raises:
            LocalFileError: If the existing file cannot be read or the write fails.
        """

        data = content.encode("utf-8") if isinstance(content, str) else content
        if path.exists():
            if self._read_bytes(path) == data:
                return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise LocalFileError(path, f"failed to write file: {exc.strerror or exc}") from exc
        return True

    def write_description(self, product_name: str, details: EntityDetails) -> tuple[Path, bool]:
        """Persist the entity description (without versions)."""

        path = self.description_path(product_name)
        return path, self.write_if_changed(path, render_yaml(details.description_document()))

    def write_version(self, product_name: str, version: Version) -> tuple[Path, bool]:
        """Persist one version under its title."""

        path = self.version_path(product_name, version.version_title)
        return path, self.write_if_changed(path, render_yaml(version.to_yaml_data()))

    def read_description(self, product_name: str) -> EntityDetails:
        """Load ``description.yaml`` for ``product_name``."""

        path = self.description_path(product_name)
        return self._load_model(path, EntityDetails)

    def read_version(self, product_name: str, version_title: str) -> Version:
        """Load ``versions/<version_title>.yaml`` for ``product_name``."""

        path = self.version_path(product_name, version_title)
        return self._load_model(path, Version)

    def clone_version(self, product_name: str, src_version: str, dst_version: str) -> tuple[Path, bool]:
        """Copy a version file, replacing every occurrence of ``src_version``.

        The replacement is purely textual and also rewrites the source version
        string where it appears inside unrelated values.

        Args:
            product_name: Product owning both versions.
            src_version: Title of the existing version file.
            dst_version: Title of the file to create.

        Returns:
            tuple[Path, bool]: Destination path and whether it was written.
            The write is skipped when the destination already equals the
            source file byte for byte.
        """

        src_path = self.version_path(product_name, src_version)
        dst_path = self.version_path(product_name, dst_version)
        source = self._read_bytes(src_path)
        if dst_path.exists() and self._read_bytes(dst_path) == source:
            return dst_path, False
        output = source.replace(src_version.encode("utf-8"), dst_version.encode("utf-8"))
        return dst_path, self.write_if_changed(dst_path, output)

    @staticmethod
    def _read_bytes(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise LocalFileError(path, "file not found") from exc
        except OSError as exc:
            raise LocalFileError(path, f"failed to read file: {exc.strerror or exc}") from exc

    def _load_model(self, path: Path, model: type[EntityDetails] | type[Version]) -> Any:
        raw = self._read_bytes(path)
        try:
            data = yaml.load(raw, Loader=_TextScalarLoader)  # noqa: S506 - safe loader subclass
        except yaml.YAMLError as exc:
            raise LocalFileError(path, f"invalid YAML: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise LocalFileError(path, "expected a YAML mapping at the top level")
        try:
            return model.from_yaml_data(data)
        except ValidationError as exc:
            raise LocalFileError(path, f"does not match the expected schema: {exc}") from exc


__all__ = ["LocalStore", "render_yaml"]
