# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Thin wrapper over the boto3 ``marketplace-catalog`` client."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Final

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, NoRegionError, ProfileNotFound

from .changeset import ChangeSetRequest
from .config import Config
from .errors import CatalogAPIError, ConfigError, EntityDecodeError
from .models import EntityDetails

SERVICE_NAME: Final[str] = "marketplace-catalog"
VALIDATION_ERROR_CODE: Final[str] = "ValidationException"

DebugSink = Callable[[str], None]


@dataclass(slots=True, frozen=True)
class EntitySummary:
    """Entry returned by ``ListEntities``."""

    name: str
    entity_id: str
    entity_type: str


@dataclass(slots=True, frozen=True)
class ChangeSetReceipt:
    """Identifiers returned by ``StartChangeSet``."""

    change_set_id: str
    change_set_arn: str


def is_entity_type_error(exc: CatalogAPIError) -> bool:
    """Return ``True`` for validation errors rejecting the requested entity type."""

    return exc.code == VALIDATION_ERROR_CODE and "entity type" in str(exc).lower()


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


def _noop_debug(_message: str) -> None:
    return None


class CatalogClient:
    """Issue list, describe and changeset calls against one catalog."""

    def __init__(self, service: Any, *, catalog: str, page_size: int, debug: DebugSink | None = None) -> None:
        """Wrap an existing boto3 client.

        Args:
            service: boto3 ``marketplace-catalog`` client (or a stub).
            catalog: Catalog name sent with every request.
            page_size: ``MaxResults`` used when listing entities.
            debug: Optional sink receiving ``key=value`` trace messages.
        """

        self._service = service
        self.catalog = catalog
        self.page_size = page_size
        self._debug = debug or _noop_debug

    @classmethod
    def from_config(cls, config: Config, *, debug: DebugSink | None = None) -> CatalogClient:
        """Create a client using ambient AWS credentials.

        Args:
            config: Resolved CLI configuration supplying profile and region.
            debug: Optional trace sink.

        Returns:
            CatalogClient: Client bound to ``config.catalog``.

        Raises:
            ConfigError: If the profile, region or credentials cannot be resolved.
        """

        try:
            session = boto3.Session(profile_name=config.profile, region_name=config.region)
            if session.get_credentials() is None:
                raise ConfigError("no AWS credentials found; configure a profile or environment credentials")
            service = session.client(SERVICE_NAME)
        except ProfileNotFound as exc:
            raise ConfigError(f"AWS profile not found: {config.profile}") from exc
        except NoRegionError as exc:
            raise ConfigError("no AWS region configured; pass --region or set AWS_REGION") from exc
        except BotoCoreError as exc:
            raise ConfigError(f"couldn't load AWS configuration: {exc}") from exc
        return cls(service, catalog=config.catalog, page_size=config.page_size, debug=debug)

    def list_entities(self, entity_type: str) -> Iterator[EntitySummary]:
        """Yield every entity of ``entity_type``, following continuation tokens.

        Raises:
            CatalogAPIError: If any page request fails.
        """

        params: dict[str, Any] = {
            "Catalog": self.catalog,
            "EntityType": entity_type,
            "MaxResults": self.page_size,
        }
        page = 0
        while True:
            page += 1
            self._debug(f"list_entities entity_type={entity_type} page={page}")
            response = self._call("ListEntities", self._service.list_entities, **params)
            for entry in response.get("EntitySummaryList", []):
                yield EntitySummary(
                    name=entry.get("Name", ""),
                    entity_id=entry.get("EntityId", ""),
                    entity_type=entry.get("EntityType", entity_type),
                )
            next_token = response.get("NextToken")
            if not next_token:
                return
            params["NextToken"] = next_token

    def describe_entity(self, entity_id: str) -> EntityDetails:
        """Return the decoded details document of ``entity_id``.

        Raises:
            CatalogAPIError: If the call fails.
            EntityDecodeError: If the details cannot be decoded.
        """

        self._debug(f"describe_entity entity_id={entity_id}")
        response = self._call(
            "DescribeEntity",
            self._service.describe_entity,
            Catalog=self.catalog,
            EntityId=entity_id,
        )
        raw = response.get("Details")
        if isinstance(raw, str) and raw:
            return EntityDetails.parse_json(raw)
        document = response.get("DetailsDocument")
        if isinstance(document, dict):
            return EntityDetails.from_api(document)
        raise EntityDecodeError(f"entity {entity_id} returned no details")

    def start_change_set(self, request: ChangeSetRequest) -> ChangeSetReceipt:
        """Submit ``request`` and return the created changeset identifiers."""

        self._debug(f"start_change_set name={request.change_set_name!r} change_type={request.change.change_type}")
        response = self._call("StartChangeSet", self._service.start_change_set, **request.to_api())
        return ChangeSetReceipt(
            change_set_id=response.get("ChangeSetId", ""),
            change_set_arn=response.get("ChangeSetArn", ""),
        )

    @staticmethod
    def _call(operation: str, method: Callable[..., dict[str, Any]], **params: Any) -> dict[str, Any]:
        try:
            return method(**params)
        except ClientError as exc:
            code = _error_code(exc)
            message = exc.response.get("Error", {}).get("Message") or str(exc)
            raise CatalogAPIError(f"{operation} failed ({code}): {message}", code=code) from exc
        except NoCredentialsError as exc:
            raise ConfigError(f"{operation} failed: no AWS credentials found") from exc
        except BotoCoreError as exc:
            raise CatalogAPIError(f"{operation} failed: {exc}") from exc


__all__ = [
    "CatalogClient",
    "ChangeSetReceipt",
    "EntitySummary",
    "is_entity_type_error",
]
