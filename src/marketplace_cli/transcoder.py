# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Convert a local version record into an ``AddDeliveryOptions`` payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingSourceError
from .models import Version


class _ChangeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        """Return the PascalCase JSON representation."""

        return self.model_dump(mode="json", by_alias=True)


class VersionInfo(_ChangeModel):
    release_notes: str = Field("", alias="ReleaseNotes")
    version_title: str = Field("", alias="VersionTitle")


class DeploymentResourceLink(_ChangeModel):
    name: str = Field("", alias="Name")
    url: str = Field("", alias="Url")


class EcrDeliveryOptionDetails(_ChangeModel):
    deployment_resources: list[DeploymentResourceLink] = Field(default_factory=list, alias="DeploymentResources")
    compatible_services: list[str] = Field(default_factory=list, alias="CompatibleServices")
    container_images: list[str] = Field(default_factory=list, alias="ContainerImages")
    description: str = Field("", alias="Description")
    usage_instructions: str = Field("", alias="UsageInstructions")


class DeliveryOptionDetails(_ChangeModel):
    ecr_delivery_option_details: EcrDeliveryOptionDetails = Field(alias="EcrDeliveryOptionDetails")


class DeliveryOptionChange(_ChangeModel):
    details: DeliveryOptionDetails = Field(alias="Details")
    delivery_option_title: str = Field("", alias="DeliveryOptionTitle")


class VersionChangeDetails(_ChangeModel):
    """Details document of an ``AddDeliveryOptions`` change."""

    version: VersionInfo = Field(alias="Version")
    delivery_options: list[DeliveryOptionChange] = Field(default_factory=list, alias="DeliveryOptions")


def convert_to_dst(src: Version) -> VersionChangeDetails:
    """Translate a local version record into the changeset details shape.

    Every delivery option receives the container images of the first source;
    additional sources are ignored.

    Args:
        src: Version loaded from ``versions/<title>.yaml``.

    Returns:
        VersionChangeDetails: Payload for an ``AddDeliveryOptions`` change,
        delivery options in input order.

    Raises:
        MissingSourceError: If ``src`` has no sources.
    """

    if not src.sources:
        raise MissingSourceError(
            f"version {src.version_title or '<untitled>'} has no sources; at least one is required "
            "to supply container images"
        )
    images = list(src.sources[0].images)

    delivery_options = []
    for option in src.delivery_options:
        details = EcrDeliveryOptionDetails(
            deployment_resources=[
                DeploymentResourceLink(name=resource.text, url=resource.url)
                for resource in option.recommendations.deployment_resources
            ],
            compatible_services=list(option.compatibility.aws_services),
            container_images=list(images),
            description=option.short_description,
            usage_instructions=option.instructions.usage,
        )
        delivery_options.append(
            DeliveryOptionChange(
                details=DeliveryOptionDetails(ecr_delivery_option_details=details),
                delivery_option_title=option.title,
            )
        )

    return VersionChangeDetails(
        version=VersionInfo(release_notes=src.release_notes, version_title=src.version_title),
        delivery_options=delivery_options,
    )


__all__ = [
    "DeliveryOptionChange",
    "EcrDeliveryOptionDetails",
    "VersionChangeDetails",
    "convert_to_dst",
]
