# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Changeset request models and builders for ``StartChangeSet``."""

from __future__ import annotations

import json
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from .models import Description
from .transcoder import VersionChangeDetails

UPDATE_INFORMATION: Final[str] = "UpdateInformation"
ADD_DELIVERY_OPTIONS: Final[str] = "AddDeliveryOptions"


class ChangeEntity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(alias="Type")
    identifier: str = Field(alias="Identifier")


class Change(BaseModel):
    """Single mutation addressed to one entity."""

    model_config = ConfigDict(populate_by_name=True)

    change_type: str = Field(alias="ChangeType")
    change_name: str = Field(alias="ChangeName")
    entity: ChangeEntity = Field(alias="Entity")
    details: str = Field(alias="Details")


class ChangeSetRequest(BaseModel):
    """Parameters passed to ``StartChangeSet``; always exactly one change."""

    model_config = ConfigDict(populate_by_name=True)

    catalog: str = Field(alias="Catalog")
    change_set: list[Change] = Field(alias="ChangeSet", min_length=1, max_length=1)
    change_set_name: str = Field(alias="ChangeSetName")

    @property
    def change(self) -> Change:
        return self.change_set[0]

    def to_api(self) -> dict[str, Any]:
        """Return the keyword arguments accepted by ``start_change_set``."""

        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Return the request as indented JSON for ``--no-op`` output."""

        return json.dumps(self.to_api(), indent=2)


def _encode_details(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)


def build_update_information(
    *,
    catalog: str,
    entity_type: str,
    entity_id: str,
    product_name: str,
    description: Description,
) -> ChangeSetRequest:
    """Return an ``UpdateInformation`` changeset for a product description.

    Args:
        catalog: Catalog name, normally ``AWSMarketplace``.
        entity_type: Versioned entity type such as ``ContainerProduct@1.0``.
        entity_id: Opaque entity identifier resolved from the catalog.
        product_name: Product name used in the changeset name.
        description: Description block serialised as the change details.

    Returns:
        ChangeSetRequest: Request ready for ``StartChangeSet``.
    """

    change = Change(
        change_type=UPDATE_INFORMATION,
        change_name="UpdateProductInformation",
        entity=ChangeEntity(type=entity_type, identifier=entity_id),
        details=_encode_details(description.to_api()),
    )
    return ChangeSetRequest(
        catalog=catalog,
        change_set=[change],
        change_set_name=f"Updated product Information for {product_name}",
    )


def build_add_delivery_options(
    *,
    catalog: str,
    entity_type: str,
    entity_id: str,
    product_name: str,
    version_title: str,
    details: VersionChangeDetails,
) -> ChangeSetRequest:
    """Return an ``AddDeliveryOptions`` changeset publishing a new version."""

    change = Change(
        change_type=ADD_DELIVERY_OPTIONS,
        change_name="AddNewVersion",
        entity=ChangeEntity(type=entity_type, identifier=entity_id),
        details=_encode_details(details.to_api()),
    )
    return ChangeSetRequest(
        catalog=catalog,
        change_set=[change],
        change_set_name=f"Push {product_name} version {version_title}",
    )


__all__ = [
    "ADD_DELIVERY_OPTIONS",
    "UPDATE_INFORMATION",
    "Change",
    "ChangeEntity",
    "ChangeSetRequest",
    "build_add_delivery_options",
    "build_update_information",
]
