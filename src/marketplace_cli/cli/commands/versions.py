# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Version-level commands: ``dump-versions``, ``push-version`` and ``clone``."""

from __future__ import annotations

from typing import Annotated

import typer

from ..context import get_context
from ..shared import report_errors
from .products import NO_OP_OPTION, PRODUCT_ARGUMENT

VERSION_ARGUMENT = Annotated[str, typer.Argument(help="Version title.", show_default=False)]


def dump_versions(ctx: typer.Context, product: PRODUCT_ARGUMENT) -> None:
    """Dump every version of a product to its own YAML file."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync().dump_versions(product)


def push_version(
    ctx: typer.Context,
    product: PRODUCT_ARGUMENT,
    version: VERSION_ARGUMENT,
    no_op: NO_OP_OPTION = False,
) -> None:
    """Push the local state of a version's YAML file as a new version."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync().push_version(product, version, no_op=no_op)


def clone_version(
    ctx: typer.Context,
    product: PRODUCT_ARGUMENT,
    src_version: Annotated[str, typer.Argument(help="Existing version title.", show_default=False)],
    dst_version: Annotated[str, typer.Argument(help="New version title.", show_default=False)],
) -> None:
    """Copy the YAML data from the src version to the dst version."""

    cli = get_context(ctx)
    with report_errors(cli.logger):
        cli.sync(with_client=False).clone(product, src_version, dst_version)


def register(app: typer.Typer) -> None:
    """Attach the version commands to ``app``."""

    app.command("dump-versions")(dump_versions)
    app.command("push-version")(push_version)
    app.command("clone")(clone_version)


__all__ = ["clone_version", "dump_versions", "push_version", "register"]
