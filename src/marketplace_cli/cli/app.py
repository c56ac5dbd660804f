# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from .commands import register_commands
from .context import (
    CONFIG_OPTION,
    DATA_DIR_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    PROFILE_OPTION,
    REGION_OPTION,
    GlobalOptions,
    build_context,
)

app = typer.Typer(
    name="aws-marketplace-cli",
    help="Mirror AWS Marketplace Catalog products to local YAML and push edits back as changesets.",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: DATA_DIR_OPTION = None,
    profile: PROFILE_OPTION = None,
    region: REGION_OPTION = None,
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = None,
    debug: DEBUG_OPTION = False,
) -> None:
    """Resolve configuration once for the invoked command."""

    options = GlobalOptions(
        data_dir=data_dir,
        profile=profile,
        region=region,
        config_path=config,
        emoji=emoji,
        debug=debug,
    )
    ctx.obj = build_context(options)


register_commands(app)

__all__ = ["app", "main"]
