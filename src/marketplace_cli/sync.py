# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Orchestrate catalog reads and writes against the local YAML mirror."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from .changeset import ChangeSetRequest, build_add_delivery_options, build_update_information
from .client import ChangeSetReceipt, EntitySummary, is_entity_type_error
from .config import Config
from .errors import CatalogAPIError, EntityNotFoundError, InvalidProductTypeError
from .models import EntityDetails
from .storage import LocalStore
from .transcoder import convert_to_dst

ALL_PRODUCT_TYPES: Final[str] = "all"


class CatalogService(Protocol):
    """Catalog operations consumed by :class:`CatalogSync`."""

    def list_entities(self, entity_type: str) -> Iterator[EntitySummary]: ...

    def describe_entity(self, entity_id: str) -> EntityDetails: ...

    def start_change_set(self, request: ChangeSetRequest) -> ChangeSetReceipt: ...


class Reporter(Protocol):
    """Output channel used for progress and results."""

    def echo(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def ok(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...


@dataclass(slots=True, frozen=True)
class ResolvedEntity:
    """Entity located by name within one of the product types."""

    product_name: str
    entity_id: str
    product_type: str


@dataclass(slots=True, frozen=True)
class ChangeSetOutcome:
    """Request built by a push command and the receipt when it was submitted."""

    request: ChangeSetRequest
    receipt: ChangeSetReceipt | None


class CatalogSync:
    """Implement the list, dump, update, push and clone workflows."""

    def __init__(self, client: CatalogService | None, store: LocalStore, config: Config, reporter: Reporter) -> None:
        """Bind the workflows to their collaborators.

        Args:
            client: Catalog API client; ``None`` for purely local operations.
            store: Local YAML mirror.
            config: Resolved CLI configuration.
            reporter: Sink for user-facing output.
        """

        self._client = client
        self.store = store
        self.config = config
        self.reporter = reporter

    @property
    def client(self) -> CatalogService:
        if self._client is None:
            raise RuntimeError("this operation requires a catalog client")
        return self._client

    def list_products(self, requested_type: str) -> dict[str, list[str]]:
        """Print product names grouped by type and return them.

        Args:
            requested_type: One product type or ``"all"``.

        Returns:
            dict[str, list[str]]: Sorted names for each type that has products.

        Raises:
            InvalidProductTypeError: If ``requested_type`` is not a known type.
            CatalogAPIError: For any failure other than an unsupported entity type.
        """

        product_types = self._select_types(requested_type)
        found: dict[str, list[str]] = {}
        for product_type in product_types:
            try:
                names = sorted(entity.name for entity in self.client.list_entities(product_type))
            except CatalogAPIError as exc:
                if is_entity_type_error(exc):
                    continue
                raise CatalogAPIError(f"error listing {product_type}: {exc}", code=exc.code) from exc
            if not names:
                continue
            found[product_type] = names
            self.reporter.echo(f"\n{product_type} ({len(names)} products):")
            for name in names:
                self.reporter.echo(f"  - {name}")

        if not found:
            if requested_type == ALL_PRODUCT_TYPES:
                self.reporter.echo("No products found in any category")
            else:
                self.reporter.echo(f"No products found of type: {requested_type}")
        return found

    def resolve(self, product_name: str) -> ResolvedEntity:
        """Find the entity ID and product type of ``product_name``.

        Product types are scanned in configuration order and the first name
        match wins.

        Raises:
            EntityNotFoundError: If no product type contains ``product_name``.
            CatalogAPIError: For failures other than an unsupported entity type.
        """

        for product_type in self.config.product_types:
            try:
                for entity in self.client.list_entities(product_type):
                    if entity.name == product_name:
                        return ResolvedEntity(product_name, entity.entity_id, product_type)
            except CatalogAPIError as exc:
                if is_entity_type_error(exc):
                    continue
                raise CatalogAPIError(
                    f"error resolving product {product_name} in {product_type}: {exc}",
                    code=exc.code,
                ) from exc
        raise EntityNotFoundError(product_name)

    def fetch(self, product_name: str) -> tuple[ResolvedEntity, EntityDetails]:
        """Resolve ``product_name`` and return its decoded details."""

        entity = self.resolve(product_name)
        try:
            details = self.client.describe_entity(entity.entity_id)
        except CatalogAPIError as exc:
            raise CatalogAPIError(f"error describing product {product_name}: {exc}", code=exc.code) from exc
        return entity, details

    def dump(self, product_name: str) -> tuple[Path, bool]:
        """Write the product description to ``<data>/<product>/description.yaml``.

        Returns:
            tuple[Path, bool]: File path and whether it was (re)written.
        """

        entity, details = self.fetch(product_name)
        path, written = self.store.write_description(product_name, details)
        if written:
            self.reporter.ok(f"Data written to {path}")
        else:
            self.reporter.info(f"Data for entity {entity.entity_id} has not changed")
        return path, written

    def dump_versions(self, product_name: str) -> list[tuple[Path, bool]]:
        """Write every version to ``<data>/<product>/versions/<title>.yaml``.

        Unchanged files are skipped and the remaining versions are still
        processed.

        Returns:
            list[tuple[Path, bool]]: One entry per version in catalog order.
        """

        entity, details = self.fetch(product_name)
        results: list[tuple[Path, bool]] = []
        for version in details.versions:
            path, written = self.store.write_version(product_name, version)
            if written:
                self.reporter.ok(f"Data written to {path}")
            else:
                self.reporter.info(f"Version {version.version_title} of entity {entity.entity_id} has not changed")
            results.append((path, written))
        if not details.versions:
            self.reporter.warn(f"Product {product_name} has no versions")
        return results

    def update(self, product_name: str, *, no_op: bool) -> ChangeSetOutcome:
        """Submit the local description as an ``UpdateInformation`` changeset.

        Args:
            product_name: Product whose ``description.yaml`` is pushed.
            no_op: Print the request JSON instead of submitting it.

        Returns:
            ChangeSetOutcome: Built request and, unless ``no_op``, the receipt.
        """

        entity = self.resolve(product_name)
        details = self.store.read_description(product_name)
        request = build_update_information(
            catalog=self.config.catalog,
            entity_type=self.config.entity_type_identifier(entity.product_type),
            entity_id=entity.entity_id,
            product_name=product_name,
            description=details.description,
        )
        return self._submit(request, entity, no_op=no_op)

    def push_version(self, product_name: str, version_title: str, *, no_op: bool) -> ChangeSetOutcome:
        """Submit a local version file as an ``AddDeliveryOptions`` changeset."""

        entity = self.resolve(product_name)
        version = self.store.read_version(product_name, version_title)
        request = build_add_delivery_options(
            catalog=self.config.catalog,
            entity_type=self.config.entity_type_identifier(entity.product_type),
            entity_id=entity.entity_id,
            product_name=product_name,
            version_title=version_title,
            details=convert_to_dst(version),
        )
        return self._submit(request, entity, no_op=no_op)

    def clone(self, product_name: str, src_version: str, dst_version: str) -> tuple[Path, bool]:
        """Copy a version file under a new title (local only)."""

        path, written = self.store.clone_version(product_name, src_version, dst_version)
        if written:
            self.reporter.ok(f"Data written to {path}")
        else:
            self.reporter.info(f"Data for product {product_name} version {src_version} has not changed")
        return path, written

    def _submit(self, request: ChangeSetRequest, entity: ResolvedEntity, *, no_op: bool) -> ChangeSetOutcome:
        if no_op:
            self.reporter.echo(request.to_json())
            return ChangeSetOutcome(request=request, receipt=None)
        try:
            receipt = self.client.start_change_set(request)
        except CatalogAPIError as exc:
            raise CatalogAPIError(f"could not start change set: {exc}", code=exc.code) from exc
        self.reporter.ok(
            f"Changeset {receipt.change_set_id} created for product {entity.product_name} "
            f"({entity.product_type}) with entity ID {entity.entity_id}"
        )
        return ChangeSetOutcome(request=request, receipt=receipt)

    def _select_types(self, requested_type: str) -> list[str]:
        if requested_type == ALL_PRODUCT_TYPES:
            return list(self.config.product_types)
        if requested_type not in self.config.product_types:
            valid = ", ".join(self.config.product_types)
            raise InvalidProductTypeError(
                f"invalid product type: {requested_type}. Valid types are: {valid}, or use 'all' to list all types"
            )
        return [requested_type]


__all__ = [
    "ALL_PRODUCT_TYPES",
    "CatalogService",
    "CatalogSync",
    "ChangeSetOutcome",
    "Reporter",
    "ResolvedEntity",
]
