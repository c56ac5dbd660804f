# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Allow ``python -m marketplace_cli``."""

from __future__ import annotations

from .cli.app import app

if __name__ == "__main__":
    app()
