# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model for the marketplace catalog CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError

DEFAULT_CATALOG: Final[str] = "AWSMarketplace"
DEFAULT_DATA_DIR: Final[Path] = Path("data")
MAX_PAGE_SIZE: Final[int] = 50

PRODUCT_TYPES: Final[tuple[str, ...]] = (
    "ServerProduct",
    "ContainerProduct",
    "DataProduct",
    "MachinelearningProduct",
    "SaaSProduct",
    "ServiceProduct",
    "SolutionProduct",
    "SupportProduct",
)


class Config(BaseModel):
    """Resolved settings shared by every command."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    catalog: str = DEFAULT_CATALOG
    data_dir: Path = DEFAULT_DATA_DIR
    profile: str | None = None
    region: str | None = None
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    product_types: list[str] = Field(default_factory=lambda: list(PRODUCT_TYPES))
    entity_type_version: str = "1.0"
    use_emoji: bool = True

    @field_validator("product_types")
    @classmethod
    def _require_product_types(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one product type is required")
        return value

    def entity_type_identifier(self, product_type: str) -> str:
        """Return the versioned entity type used to address changesets.

        Args:
            product_type: Catalog product type such as ``ContainerProduct``.

        Returns:
            str: Identifier of the form ``ContainerProduct@1.0``.
        """

        return f"{product_type}@{self.entity_type_version}"

    def to_dict(self) -> dict[str, Any]:
        """Return a TOML/JSON friendly snapshot of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_CATALOG",
    "DEFAULT_DATA_DIR",
    "MAX_PAGE_SIZE",
    "PRODUCT_TYPES",
]
