# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by catalog sync operations."""

from __future__ import annotations

from pathlib import Path


class CatalogError(RuntimeError):
    """Base class for every failure reported by the CLI."""


class ConfigError(CatalogError):
    """Raised when configuration or credential resolution fails."""


class CatalogAPIError(CatalogError):
    """Raised when a Marketplace Catalog API call fails."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        """Create the error with an optional AWS error ``code``.

        Args:
            message: Human-readable description including operation context.
            code: AWS error code extracted from the service response.
        """

        super().__init__(message)
        self.code = code


class EntityNotFoundError(CatalogError):
    """Raised when a product name is absent from every scanned product type."""

    def __init__(self, product_name: str) -> None:
        super().__init__(f"could not find product {product_name} in any supported type")
        self.product_name = product_name


class InvalidProductTypeError(CatalogError):
    """Raised when ``list`` receives an unknown product type."""


class EntityDecodeError(CatalogError):
    """Raised when entity details returned by the API cannot be decoded."""


class MissingSourceError(CatalogError):
    """Raised when a version has no sources to take container images from."""


class LocalFileError(CatalogError):
    """Raised when a local YAML file cannot be read, decoded or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path


__all__ = (
    "CatalogAPIError",
    "CatalogError",
    "ConfigError",
    "EntityDecodeError",
    "EntityNotFoundError",
    "InvalidProductTypeError",
    "LocalFileError",
    "MissingSourceError",
)
