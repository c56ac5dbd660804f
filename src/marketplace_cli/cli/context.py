# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any

import typer

from ..client import CatalogClient
from ..config import Config
from ..config_loader import ConfigLoader, ConfigLoadResult
from ..storage import LocalStore
from ..sync import CatalogSync
from .shared import CLILogger, build_cli_logger, report_errors

DATA_DIR_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--data-dir",
        "-d",
        help="Directory holding the local YAML mirror (default: ./data).",
        show_default=False,
    ),
]
PROFILE_OPTION = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="AWS profile used to resolve credentials."),
]
REGION_OPTION = Annotated[
    str | None,
    typer.Option("--region", help="AWS region of the Marketplace Catalog endpoint."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Project configuration file (default: ./.aws-marketplace-cli.toml).",
        show_default=False,
    ),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output.", show_default=False),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Trace catalog API calls to stderr."),
]


@dataclass(slots=True)
class GlobalOptions:
    """Normalised options accepted before the command name."""

    data_dir: Path | None = None
    profile: str | None = None
    region: str | None = None
    config_path: Path | None = None
    emoji: bool | None = None
    debug: bool = False

    def overrides(self) -> dict[str, Any]:
        return {
            "data_dir": self.data_dir,
            "profile": self.profile,
            "region": self.region,
            "use_emoji": self.emoji,
        }


@dataclass(slots=True)
class CLIContext:
    """Resolved configuration and logger for one command invocation."""

    load_result: ConfigLoadResult
    logger: CLILogger
    _client: CatalogClient | None = field(default=None, init=False)

    @property
    def config(self) -> Config:
        return self.load_result.config

    def client(self) -> CatalogClient:
        """Return the catalog client, creating the boto3 session on first use."""

        if self._client is None:
            self._client = CatalogClient.from_config(self.config, debug=self.logger.debug)
        return self._client

    def sync(self, *, with_client: bool = True) -> CatalogSync:
        """Return a :class:`CatalogSync` bound to this invocation."""

        client = self.client() if with_client else None
        return CatalogSync(client, LocalStore(self.config.data_dir), self.config, self.logger)


def build_context(options: GlobalOptions, *, project_root: Path | None = None) -> CLIContext:
    """Load configuration for ``options`` and return the invocation context.

    Raises:
        typer.Exit: When configuration resolution fails.
    """

    root = project_root or Path.cwd()
    bootstrap_logger = build_cli_logger(emoji=True if options.emoji is None else options.emoji, debug=options.debug)
    with report_errors(bootstrap_logger):
        loader = ConfigLoader.for_root(root, project_config=options.config_path)
        load_result = loader.load_with_trace(overrides=options.overrides())
    logger = build_cli_logger(emoji=load_result.config.use_emoji, debug=options.debug)
    return CLIContext(load_result=load_result, logger=logger)


def get_context(ctx: typer.Context) -> CLIContext:
    """Return the :class:`CLIContext` stored by the root callback."""

    obj = ctx.find_root().obj
    if not isinstance(obj, CLIContext):
        obj = build_context(GlobalOptions())
        ctx.find_root().obj = obj
    return obj


__all__ = [
    "CLIContext",
    "GlobalOptions",
    "build_context",
    "get_context",
]
