# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Product-level commands: ``list``, ``dump`` and ``update``."""

from __future__ import annotations

from typing import Annotated

import typer

from ...config import PRODUCT_TYPES
from ..context import get_context
from ..shared import report_errors

PRODUCT_ARGUMENT = Annotated[str, typer.Argument(help="Product name as shown in the catalog.", show_default=False)]
NO_OP_OPTION = Annotated[
    bool,
    typer.Option("--no-op", help="Print the changeset JSON to stdout without creating the changeset."),
]

_LIST_HELP = "\n\n".join(
    [
        "List AWS Marketplace products of a given type, or 'all' for all types.",
        "Valid product types: " + ", ".join(PRODUCT_TYPES) + ".",
    ]
)


def list_products(
    ctx: typer.Context,
    product_type: Annotated[str, typer.Argument(help="Product type or 'all'.", show_default=False)],
) -> None:
    """List my AWS Marketplace products grouped by type."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync().list_products(product_type)


def dump_product(ctx: typer.Context, product: PRODUCT_ARGUMENT) -> None:
    """Dump marketplace catalog data for a product to a YAML file."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync().dump(product)


def update_product(ctx: typer.Context, product: PRODUCT_ARGUMENT, no_op: NO_OP_OPTION = False) -> None:
    """Update a product's information from its local YAML representation."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync().update(product, no_op=no_op)


def register(app: typer.Typer) -> None:
    """Attach the product commands to ``app``."""

    app.command("list", help=_LIST_HELP)(list_products)
    app.command("dump")(dump_product)
    app.command("update")(update_product)


__all__ = ["dump_product", "list_products", "register", "update_product"]
