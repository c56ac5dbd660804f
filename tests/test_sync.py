# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the product and version sync workflows."""

from __future__ import annotations

import json

import pytest

from marketplace_cli.config import PRODUCT_TYPES
from marketplace_cli.errors import (
    CatalogAPIError,
    EntityNotFoundError,
    InvalidProductTypeError,
    LocalFileError,
    MissingSourceError,
)
from marketplace_cli.models import EntityDetails, Version
from marketplace_cli.storage import render_yaml
from marketplace_cli.sync import CatalogSync


def test_list_groups_and_sorts_names(sync: CatalogSync, catalog, reporter) -> None:
    catalog.add_entity("ContainerProduct", "zeta", "c-2")
    catalog.add_entity("ContainerProduct", "alpha", "c-1")
    catalog.add_entity("SaaSProduct", "portal", "s-1")

    found = sync.list_products("all")

    assert found == {"ContainerProduct": ["alpha", "zeta"], "SaaSProduct": ["portal"]}
    assert catalog.listed == list(PRODUCT_TYPES)
    assert reporter.text("echo") == "\n".join(
        [
            "\nContainerProduct (2 products):",
            "  - alpha",
            "  - zeta",
            "\nSaaSProduct (1 products):",
            "  - portal",
        ]
    )


def test_list_all_ignores_unsupported_entity_types(sync: CatalogSync, catalog, reporter, entity_type_error) -> None:
    catalog.list_errors["ServerProduct"] = entity_type_error("ServerProduct")
    catalog.add_entity("ContainerProduct", "widget", "c-1")

    found = sync.list_products("all")

    assert found == {"ContainerProduct": ["widget"]}
    assert "ServerProduct" not in reporter.text()


def test_list_aborts_on_other_errors(sync: CatalogSync, catalog) -> None:
    catalog.list_errors["DataProduct"] = CatalogAPIError("ListEntities failed (AccessDenied)", code="AccessDenied")

    with pytest.raises(CatalogAPIError, match="error listing DataProduct"):
        sync.list_products("all")


def test_list_single_type(sync: CatalogSync, catalog, reporter) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    catalog.add_entity("SaaSProduct", "portal", "s-1")

    assert sync.list_products("SaaSProduct") == {"SaaSProduct": ["portal"]}
    assert catalog.listed == ["SaaSProduct"]


def test_list_reports_empty_results(sync: CatalogSync, reporter) -> None:
    sync.list_products("all")
    sync.list_products("DataProduct")

    assert reporter.text("echo") == "No products found in any category\nNo products found of type: DataProduct"


def test_list_rejects_unknown_type(sync: CatalogSync, catalog) -> None:
    with pytest.raises(InvalidProductTypeError, match="Valid types are: ServerProduct"):
        sync.list_products("GadgetProduct")
    assert catalog.listed == []


def test_resolve_first_matching_type_wins(sync: CatalogSync, catalog) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    catalog.add_entity("SaaSProduct", "widget", "s-1")

    entity = sync.resolve("widget")

    assert entity.entity_id == "c-1"
    assert entity.product_type == "ContainerProduct"
    assert catalog.listed == ["ServerProduct", "ContainerProduct"]


def test_resolve_skips_unsupported_types(sync: CatalogSync, catalog, entity_type_error) -> None:
    catalog.list_errors["ServerProduct"] = entity_type_error("ServerProduct")
    catalog.add_entity("DataProduct", "dataset", "d-1")

    assert sync.resolve("dataset").product_type == "DataProduct"


def test_resolve_not_found_names_product(sync: CatalogSync) -> None:
    with pytest.raises(EntityNotFoundError, match="could not find product ghost"):
        sync.resolve("ghost")


def test_dump_writes_description_once(sync: CatalogSync, catalog, config, entity_details: EntityDetails) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    catalog.details["c-1"] = entity_details

    path, written = sync.dump("widget")
    first = path.read_bytes()
    mtime = path.stat().st_mtime_ns
    again_path, again_written = sync.dump("widget")

    assert path == config.data_dir / "widget" / "description.yaml"
    assert written is True
    assert again_path == path
    assert again_written is False
    assert path.read_bytes() == first
    assert path.stat().st_mtime_ns == mtime
    assert first.decode("utf-8") == render_yaml(entity_details.description_document())


def test_dump_versions_writes_each_version(sync: CatalogSync, catalog, config, entity_details) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    catalog.details["c-1"] = entity_details

    results = sync.dump_versions("widget")

    versions_dir = config.data_dir / "widget" / "versions"
    assert results == [(versions_dir / "1.0.0.yaml", True), (versions_dir / "1.1.0.yaml", True)]
    assert sync.dump_versions("widget") == [(versions_dir / "1.0.0.yaml", False), (versions_dir / "1.1.0.yaml", False)]


def test_dump_versions_continues_after_unchanged_version(
    sync: CatalogSync, catalog, config, entity_details: EntityDetails
) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    catalog.details["c-1"] = entity_details
    sync.dump_versions("widget")

    changed = entity_details.model_copy(deep=True)
    changed.versions[1].release_notes = "Security fixes"
    catalog.details["c-1"] = changed
    results = sync.dump_versions("widget")

    assert [written for _, written in results] == [False, True]
    reloaded = sync.store.read_version("widget", "1.1.0")
    assert reloaded.release_notes == "Security fixes"


def test_update_no_op_prints_request(sync: CatalogSync, catalog, reporter, entity_details) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_description("widget", entity_details)

    outcome = sync.update("widget", no_op=True)

    assert catalog.submitted == []
    assert outcome.receipt is None
    printed = json.loads(reporter.text("echo"))
    assert printed == outcome.request.to_api()
    change = printed["ChangeSet"][0]
    assert change["ChangeType"] == "UpdateInformation"
    assert change["Entity"] == {"Type": "ContainerProduct@1.0", "Identifier": "c-1"}
    assert json.loads(change["Details"])["ProductTitle"] == "Acme Widget"


def test_update_submits_edited_description(sync: CatalogSync, catalog, reporter, entity_details) -> None:
    catalog.add_entity("SaaSProduct", "widget", "s-1")
    path, _ = sync.store.write_description("widget", entity_details)
    path.write_text(
        path.read_text(encoding="utf-8").replace("producttitle: Acme Widget", "producttitle: Acme Widget Pro"),
        encoding="utf-8",
    )

    outcome = sync.update("widget", no_op=False)

    assert catalog.submitted == [outcome.request]
    assert outcome.receipt is not None and outcome.receipt.change_set_id == "cs-1"
    change = outcome.request.change
    assert change.entity.type == "SaaSProduct@1.0"
    assert json.loads(change.details)["ProductTitle"] == "Acme Widget Pro"
    assert "cs-1" in reporter.text("ok")


def test_update_missing_local_file(sync: CatalogSync, catalog) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")

    with pytest.raises(LocalFileError, match="description.yaml"):
        sync.update("widget", no_op=True)


def test_push_version_no_op(sync: CatalogSync, catalog, reporter, entity_details) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_version("widget", entity_details.versions[0])

    outcome = sync.push_version("widget", "1.0.0", no_op=True)

    assert catalog.submitted == []
    printed = json.loads(reporter.text("echo"))
    assert printed["ChangeSetName"] == "Push widget version 1.0.0"
    change = printed["ChangeSet"][0]
    assert change["ChangeType"] == "AddDeliveryOptions"
    details = json.loads(change["Details"])
    assert details["Version"]["VersionTitle"] == "1.0.0"
    assert [option["DeliveryOptionTitle"] for option in details["DeliveryOptions"]] == ["Helm chart", "ECS task"]
    assert printed == outcome.request.to_api()


def test_push_version_submits(sync: CatalogSync, catalog, entity_details) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_version("widget", entity_details.versions[0])

    outcome = sync.push_version("widget", "1.0.0", no_op=False)

    assert catalog.submitted == [outcome.request]


def test_push_version_without_sources(sync: CatalogSync, catalog) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_version("widget", Version(version_title="9.9", delivery_options=[]))

    with pytest.raises(MissingSourceError):
        sync.push_version("widget", "9.9", no_op=True)
    assert catalog.submitted == []


def test_submit_failure_is_wrapped(sync: CatalogSync, catalog, entity_details, monkeypatch) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_description("widget", entity_details)

    def boom(request):
        raise CatalogAPIError("StartChangeSet failed (ResourceInUseException): busy", code="ResourceInUseException")

    monkeypatch.setattr(catalog, "start_change_set", boom)

    with pytest.raises(CatalogAPIError, match="could not start change set"):
        sync.update("widget", no_op=False)


def test_clone_reports_result(sync: CatalogSync, reporter, entity_details) -> None:
    sync.store.write_version("widget", entity_details.versions[0])

    path, written = sync.clone("widget", "1.0.0", "1.2.0")

    assert written
    assert sync.store.read_version("widget", "1.2.0").version_title == "1.2.0"
    assert f"Data written to {path}" in reporter.text("ok")
    sync.clone("widget", "1.0.0", "1.2.0")
    assert "version 1.0.0 has not changed" in reporter.text("info")


@pytest.mark.parametrize("dst_version", ["2.0", "1.10", "3"])
def test_clone_to_numeric_title_then_push(sync: CatalogSync, catalog, reporter, entity_details, dst_version) -> None:
    catalog.add_entity("ContainerProduct", "widget", "c-1")
    sync.store.write_version("widget", entity_details.versions[0])

    path, _ = sync.clone("widget", "1.0.0", dst_version)
    outcome = sync.push_version("widget", dst_version, no_op=True)

    assert f"versiontitle: {dst_version}\n" in path.read_text(encoding="utf-8")
    details = json.loads(outcome.request.change.details)
    assert details["Version"]["VersionTitle"] == dst_version
    assert outcome.request.change_set_name == f"Push widget version {dst_version}"
