# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from marketplace_cli.changeset import ChangeSetRequest
from marketplace_cli.client import ChangeSetReceipt, EntitySummary
from marketplace_cli.config import Config
from marketplace_cli.errors import CatalogAPIError
from marketplace_cli.models import EntityDetails
from marketplace_cli.storage import LocalStore
from marketplace_cli.sync import CatalogSync

ENTITY_DETAILS: dict[str, Any] = {
    "Versions": [
        {
            "Id": "ver-1",
            "ReleaseNotes": "Initial release of 1.0.0",
            "UpgradeInstructions": "None",
            "VersionTitle": "1.0.0",
            "CreationDate": "2024-03-01T12:00:00Z",
            "Sources": [
                {
                    "Type": "DockerImages",
                    "Id": "src-1",
                    "Images": ["123456789012.dkr.ecr.us-east-1.amazonaws.com/acme/widget:1.0.0"],
                    "Compatibility": {"Platform": "Linux"},
                }
            ],
            "DeliveryOptions": [
                {
                    "Id": "do-1",
                    "Type": "ElasticContainerRegistry",
                    "SourceId": "src-1",
                    "Title": "Helm chart",
                    "ShortDescription": "Install with Helm",
                    "isRecommended": True,
                    "Compatibility": {"AWSServices": ["EKS"]},
                    "Instructions": {"Usage": "helm install widget"},
                    "Recommendations": {
                        "DeploymentResources": [{"Text": "Docs", "Url": "https://example.com/docs"}]
                    },
                    "Visibility": "Public",
                },
                {
                    "Id": "do-2",
                    "Type": "ElasticContainerRegistry",
                    "SourceId": "src-1",
                    "Title": "ECS task",
                    "ShortDescription": "Run on ECS",
                    "isRecommended": False,
                    "Compatibility": {"AWSServices": ["ECS", "ECS-Anywhere"]},
                    "Instructions": {"Usage": "aws ecs run-task"},
                    "Recommendations": {"DeploymentResources": []},
                    "Visibility": "Public",
                },
            ],
        },
        {
            "Id": "ver-2",
            "ReleaseNotes": "Bug fixes",
            "UpgradeInstructions": "Pull the new image",
            "VersionTitle": "1.1.0",
            "CreationDate": "2024-05-01T08:30:00Z",
            "Sources": [
                {
                    "Type": "DockerImages",
                    "Id": "src-2",
                    "Images": ["123456789012.dkr.ecr.us-east-1.amazonaws.com/acme/widget:1.1.0"],
                    "Compatibility": {"Platform": "Linux"},
                }
            ],
            "DeliveryOptions": [],
        },
    ],
    "Description": {
        "Highlights": ["Fast", "Small"],
        "LongDescription": "A widget for containers.",
        "Sku": None,
        "SearchKeywords": ["widget"],
        "ProductTitle": "Acme Widget",
        "ShortDescription": "Widgets as a service",
        "Categories": ["Developer Tools"],
        "ProductCode": "abc123",
        "Visibility": "Public",
    },
    "Targeting": {"PositiveTargeting": {"BuyerAccounts": []}},
    "PromotionalResources": {
        "PromotionalMedia": None,
        "LogoUrl": "https://example.com/logo.png",
        "AdditionalResources": [],
        "Videos": [],
    },
    "Dimensions": [],
    "SupportInformation": {"Description": "Email support@example.com", "Resources": []},
    "RegionAvailability": {"Restrict": [], "Regions": ["us-east-1"], "FutureRegionSupport": None},
    "Repositories": [{"Url": "123456789012.dkr.ecr.us-east-1.amazonaws.com/acme/widget", "Type": "ECR"}],
    "Compliance": {"Ignored": True},
}


@pytest.fixture
def entity_payload() -> dict[str, Any]:
    """Return a mutable copy of the sample entity details document."""

    return copy.deepcopy(ENTITY_DETAILS)


@pytest.fixture
def entity_details(entity_payload: dict[str, Any]) -> EntityDetails:
    return EntityDetails.parse_json(json.dumps(entity_payload))


class RecordingReporter:
    """Reporter collecting every emitted line."""

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def echo(self, message: str) -> None:
        self.lines.append(("echo", message))

    def info(self, message: str) -> None:
        self.lines.append(("info", message))

    def ok(self, message: str) -> None:
        self.lines.append(("ok", message))

    def warn(self, message: str) -> None:
        self.lines.append(("warn", message))

    def text(self, kind: str | None = None) -> str:
        return "\n".join(message for level, message in self.lines if kind is None or level == kind)


class FakeCatalog:
    """In-memory stand-in for :class:`marketplace_cli.client.CatalogClient`."""

    def __init__(self) -> None:
        self.entities: dict[str, list[EntitySummary]] = {}
        self.list_errors: dict[str, CatalogAPIError] = {}
        self.details: dict[str, EntityDetails] = {}
        self.listed: list[str] = []
        self.described: list[str] = []
        self.submitted: list[ChangeSetRequest] = []

    def add_entity(self, product_type: str, name: str, entity_id: str) -> None:
        self.entities.setdefault(product_type, []).append(
            EntitySummary(name=name, entity_id=entity_id, entity_type=product_type)
        )

    def list_entities(self, entity_type: str) -> Iterator[EntitySummary]:
        self.listed.append(entity_type)
        if entity_type in self.list_errors:
            raise self.list_errors[entity_type]
        yield from self.entities.get(entity_type, [])

    def describe_entity(self, entity_id: str) -> EntityDetails:
        self.described.append(entity_id)
        return self.details[entity_id]

    def start_change_set(self, request: ChangeSetRequest) -> ChangeSetReceipt:
        self.submitted.append(request)
        return ChangeSetReceipt(change_set_id=f"cs-{len(self.submitted)}", change_set_arn="arn:aws:catalog:cs")


def _entity_type_error(product_type: str) -> CatalogAPIError:
    return CatalogAPIError(
        f"ListEntities failed (ValidationException): Unsupported entity type {product_type}",
        code="ValidationException",
    )


@pytest.fixture
def entity_type_error() -> Callable[[str], CatalogAPIError]:
    """Return a factory for the validation error raised for unsupported types."""

    return _entity_type_error


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(data_dir=tmp_path / "data")


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def sync(catalog: FakeCatalog, config: Config, reporter: RecordingReporter) -> CatalogSync:
    return CatalogSync(catalog, LocalStore(config.data_dir), config, reporter)
