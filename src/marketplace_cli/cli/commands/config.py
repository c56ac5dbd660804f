# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``config`` command printing the resolved configuration."""

from __future__ import annotations

import json

import typer

from ..context import get_context


def show_config(ctx: typer.Context) -> None:
    """Print the effective configuration and the sources that set it."""

    cli = get_context(ctx)
    result = cli.load_result
    cli.logger.echo(json.dumps(result.config.to_dict(), indent=2))
    cli.logger.echo("")
    cli.logger.echo("Sources (lowest precedence first):")
    for description in result.descriptions:
        cli.logger.echo(f"  - {description}")
    if result.updates:
        cli.logger.echo("")
        for update in result.updates:
            cli.logger.echo(f"{update.field} <- {update.source}")


def register(app: typer.Typer) -> None:
    """Attach the config command to ``app``."""

    app.command("config")(show_config)


__all__ = ["register", "show_config"]
