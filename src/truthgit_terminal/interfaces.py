# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces separate the session engine from the surface it draws on
and from whatever actually runs the commands.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import ExecutionResult


class Display(Protocol):
    """Protocol for the surface the session writes to."""

    def write(self, text: str) -> None:
        """Write text (may contain ANSI styling) exactly as given."""
        ...

    def clear(self) -> None:
        """Clear the whole surface."""
        ...

    def focus(self) -> None:
        """Give the surface input focus."""
        ...


class CommandExecutor(Protocol):
    """Protocol for command execution."""

    async def execute(
        self, command: str, cwd: str | None = None
    ) -> ExecutionResult:
        """Run a command and return its structured result.

        Raises:
            ExecutorError: the command could not be run at all.
        """
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def execution(self) -> dict[str, Any]:
        """Executor configuration."""
        ...

    @property
    def quick_commands(self) -> list[dict[str, str]]:
        """Quick command bindings."""
        ...

    @property
    def keys(self) -> dict[str, Any]:
        """Host key bindings."""
        ...

    def get_path(self, path: str, default: Any = None) -> Any:
        """Dotted lookup."""
        ...
