# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Entity schema models shared by the catalog API and the local YAML mirror.

The Marketplace Catalog returns entity details as JSON with PascalCase keys.
Local YAML files persist the same fields with their API names lowercased
(``LongDescription`` becomes ``longdescription``). Every model accepts both
spellings on input; :meth:`CatalogModel.to_api` renders the API shape and
:meth:`CatalogModel.to_yaml_data` renders the YAML shape. Only the subset of
the entity document needed for edits is modelled; unknown keys are dropped.
"""

from __future__ import annotations

import json
from collections.abc import Collection, Mapping
from datetime import datetime
from typing import Annotated, Any, Self, TypeAlias

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from .errors import EntityDecodeError


def _none_as_empty_str(value: Any) -> Any:
    return "" if value is None else value


def _none_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


Text: TypeAlias = Annotated[str, BeforeValidator(_none_as_empty_str)]
TextList: TypeAlias = Annotated[list[str], BeforeValidator(_none_as_empty_list)]
AnyList: TypeAlias = Annotated[list[Any], BeforeValidator(_none_as_empty_list)]


def api_field(api_name: str, *, default: Any = None, factory: Any = None) -> Any:
    """Return a field bound to ``api_name`` and its lowercased YAML key.

    Args:
        api_name: Key used by the catalog API JSON documents.
        default: Default value when the key is absent.
        factory: Optional default factory for mutable defaults.

    Returns:
        Any: Pydantic ``FieldInfo`` accepting either spelling on input.
    """

    aliases = AliasChoices(api_name, api_name.lower())
    if factory is not None:
        return Field(default_factory=factory, validation_alias=aliases, serialization_alias=api_name)
    return Field(default=default, validation_alias=aliases, serialization_alias=api_name)


class CatalogModel(BaseModel):
    """Base model rendering either the API or the local YAML key style."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> Self:
        """Build the model from a PascalCase API mapping."""

        return cls.model_validate(payload)

    @classmethod
    def from_yaml_data(cls, data: Mapping[str, Any]) -> Self:
        """Build the model from a lowercase-keyed YAML mapping."""

        return cls.model_validate(data)

    def to_api(self) -> dict[str, Any]:
        """Return the PascalCase JSON representation."""

        return self.model_dump(mode="json", by_alias=True)

    def to_yaml_data(self, *, exclude: Collection[str] = ()) -> dict[str, Any]:
        """Return the lowercase-keyed representation persisted to YAML.

        Args:
            exclude: Top-level field names omitted from the output.

        Returns:
            dict[str, Any]: Mapping in field declaration order.
        """

        return {
            _yaml_key(name, info.serialization_alias): _yaml_value(getattr(self, name))
            for name, info in type(self).model_fields.items()
            if name not in exclude
        }


def _yaml_key(name: str, alias: str | None) -> str:
    return (alias or name).lower()


def _yaml_value(value: Any) -> Any:
    if isinstance(value, CatalogModel):
        return value.to_yaml_data()
    if isinstance(value, list):
        return [_yaml_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _yaml_value(item) for key, item in value.items()}
    return value


class Description(CatalogModel):
    """Product description block submitted with ``UpdateInformation``."""

    highlights: TextList = api_field("Highlights", factory=list)
    long_description: Text = api_field("LongDescription", default="")
    sku: Any = api_field("Sku")
    search_keywords: TextList = api_field("SearchKeywords", factory=list)
    product_title: Text = api_field("ProductTitle", default="")
    short_description: Text = api_field("ShortDescription", default="")
    categories: TextList = api_field("Categories", factory=list)


class PlatformCompatibility(CatalogModel):
    platform: Text = api_field("Platform", default="")


class Source(CatalogModel):
    """Deliverable reference, such as a list of container images."""

    type: Text = api_field("Type", default="")
    id: Text = api_field("Id", default="")
    images: TextList = api_field("Images", factory=list)
    compatibility: PlatformCompatibility = api_field("Compatibility", factory=PlatformCompatibility)


class ServicesCompatibility(CatalogModel):
    aws_services: TextList = api_field("AWSServices", factory=list)


class Instructions(CatalogModel):
    usage: Text = api_field("Usage", default="")


class DeploymentResource(CatalogModel):
    text: Text = api_field("Text", default="")
    url: Text = api_field("Url", default="")


class Recommendations(CatalogModel):
    deployment_resources: list[DeploymentResource] = api_field("DeploymentResources", factory=list)


class DeliveryOption(CatalogModel):
    """Named distribution channel attached to a version."""

    id: Text = api_field("Id", default="")
    type: Text = api_field("Type", default="")
    source_id: Text = api_field("SourceId", default="")
    title: Text = api_field("Title", default="")
    short_description: Text = api_field("ShortDescription", default="")
    is_recommended: bool = api_field("isRecommended", default=False)
    compatibility: ServicesCompatibility = api_field("Compatibility", factory=ServicesCompatibility)
    instructions: Instructions = api_field("Instructions", factory=Instructions)
    recommendations: Recommendations = api_field("Recommendations", factory=Recommendations)
    visibility: Text = api_field("Visibility", default="")


class Version(CatalogModel):
    """One product version; also the schema of ``versions/<title>.yaml``."""

    id: Text = api_field("Id", default="")
    release_notes: Text = api_field("ReleaseNotes", default="")
    upgrade_instructions: Text = api_field("UpgradeInstructions", default="")
    version_title: Text = api_field("VersionTitle", default="")
    creation_date: datetime | None = api_field("CreationDate")
    sources: list[Source] = api_field("Sources", factory=list)
    delivery_options: list[DeliveryOption] = api_field("DeliveryOptions", factory=list)


class PositiveTargeting(CatalogModel):
    buyer_accounts: TextList = api_field("BuyerAccounts", factory=list)


class Targeting(CatalogModel):
    positive_targeting: PositiveTargeting = api_field("PositiveTargeting", factory=PositiveTargeting)


class AdditionalResource(CatalogModel):
    type: Text = api_field("Type", default="")
    text: Text = api_field("Text", default="")
    url: Text = api_field("Url", default="")


class Video(CatalogModel):
    type: Text = api_field("Type", default="")
    title: Text = api_field("Title", default="")
    url: Text = api_field("Url", default="")


class PromotionalResources(CatalogModel):
    promotional_media: Any = api_field("PromotionalMedia")
    logo_url: Text = api_field("LogoUrl", default="")
    additional_resources: list[AdditionalResource] = api_field("AdditionalResources", factory=list)
    videos: list[Video] = api_field("Videos", factory=list)


class Dimension(CatalogModel):
    types: TextList = api_field("Types", factory=list)
    description: Text = api_field("Description", default="")
    unit: Text = api_field("Unit", default="")
    key: Text = api_field("Key", default="")
    name: Text = api_field("Name", default="")


class SupportInformation(CatalogModel):
    description: Text = api_field("Description", default="")
    resources: AnyList = api_field("Resources", factory=list)


class RegionAvailability(CatalogModel):
    restrict: AnyList = api_field("Restrict", factory=list)
    regions: TextList = api_field("Regions", factory=list)
    future_region_support: Any = api_field("FutureRegionSupport")


class Repository(CatalogModel):
    url: Text = api_field("Url", default="")
    type: Text = api_field("Type", default="")


class EntityDetails(CatalogModel):
    """Modelled subset of a product entity's details document."""

    versions: list[Version] = api_field("Versions", factory=list)
    description: Description = api_field("Description", factory=Description)
    targeting: Targeting = api_field("Targeting", factory=Targeting)
    promotional_resources: PromotionalResources = api_field("PromotionalResources", factory=PromotionalResources)
    dimensions: list[Dimension] = api_field("Dimensions", factory=list)
    support_information: SupportInformation = api_field("SupportInformation", factory=SupportInformation)
    region_availability: RegionAvailability = api_field("RegionAvailability", factory=RegionAvailability)
    repositories: list[Repository] = api_field("Repositories", factory=list)

    @classmethod
    def parse_json(cls, raw: str) -> EntityDetails:
        """Decode the ``Details`` string returned by ``DescribeEntity``.

        Args:
            raw: JSON document describing the entity.

        Returns:
            EntityDetails: Parsed entity details.

        Raises:
            EntityDecodeError: If ``raw`` is not a JSON object of the expected shape.
        """

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise EntityDecodeError(f"entity details are not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise EntityDecodeError("entity details must be a JSON object")
        try:
            return cls.from_api(payload)
        except ValidationError as exc:
            raise EntityDecodeError(f"entity details do not match the catalog schema: {exc}") from exc

    def description_document(self) -> dict[str, Any]:
        """Return the YAML mapping persisted as ``description.yaml``."""

        return self.to_yaml_data(exclude={"versions"})


__all__ = [
    "CatalogModel",
    "DeliveryOption",
    "DeploymentResource",
    "Description",
    "EntityDetails",
    "Source",
    "Version",
    "api_field",
]
