# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor for the TruthGit terminal.

Runs each command through ``<shell> -c <command>`` on the asyncio loop and
returns a buffered ExecutionResult. A command that runs and fails is a
normal result; only a failure to start the process raises ExecutorError.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from .errors import ExecutorError
from .models import ExecutionResult

logger = logging.getLogger(__name__)


class SubprocessExecutor:
    """Subprocess implementation of the CommandExecutor protocol."""

    def __init__(
        self, force_color: bool = True, timeout: int = 30,
        max_capture_bytes: int = 256_000, shell: str = "/bin/sh"
    ):
        """Initialize executor with configuration.

        Args:
            force_color: If True, set color-forcing env variables
            timeout: Command timeout in seconds (default: 30)
            max_capture_bytes: Max bytes to keep per captured stream
            shell: Shell used to interpret each command line
        """
        self.force_color = force_color
        self.timeout = timeout
        self.max_capture_bytes = max_capture_bytes
        self.shell = shell

    @classmethod
    def from_config(cls, execution: dict[str, Any]) -> SubprocessExecutor:
        return cls(
            force_color=bool(execution.get("force_color", True)),
            timeout=int(execution.get("timeout", 30)),
            max_capture_bytes=int(
                execution.get("max_capture_bytes", 256_000)
            ),
            shell=str(execution.get("shell") or "/bin/sh"),
        )

    def _build_env(self) -> dict:
        env = os.environ.copy()
        if self.force_color:
            env["PY_COLORS"] = "1"
            env["FORCE_COLOR"] = "1"
            env["CLICOLOR_FORCE"] = "1"
        return env

    def _decode(self, raw: bytes) -> str:
        max_bytes = max(0, int(self.max_capture_bytes))
        return raw[:max_bytes].decode("utf-8", errors="replace")

    async def execute(
        self, command: str, cwd: str | None = None
    ) -> ExecutionResult:
        """Run a shell command and return its buffered result.

        Args:
            command: shell command to execute
            cwd: working directory (default: current directory)

        Raises:
            ExecutorError: the shell process could not be started
        """
        logger.debug("executing %r (cwd=%s)", command, cwd)

        try:
            proc = await asyncio.create_subprocess_exec(
                self.shell, "-c", command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._build_env(),
                cwd=cwd,
            )
        except OSError as e:
            raise ExecutorError(f"Failed to start {self.shell}: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.communicate()
            logger.warning(
                "command timed out after %ss: %r", self.timeout, command
            )
            return ExecutionResult(
                stdout="",
                stderr=f"Command timed out after {self.timeout} seconds\n",
                exit_code=1,
                success=False,
            )

        exit_code = proc.returncode if proc.returncode is not None else 1
        return ExecutionResult(
            stdout=self._decode(stdout_bytes),
            stderr=self._decode(stderr_bytes),
            exit_code=exit_code,
            success=exit_code == 0,
        )
