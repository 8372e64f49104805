# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Output formatting policy for executor results.

Write order for one command is fixed: stdout, stderr, exit annotation. The
prompt that follows is added by the runner.
"""

from __future__ import annotations

from .config import NEWLINE, paint
from .models import ExecutionResult


def _terminated(raw: str, styled: str) -> list[str]:
    # The newline check looks at the raw text, not the styled wrapper
    if raw.endswith("\n"):
        return [styled]
    return [styled, NEWLINE]


def format_result(result: ExecutionResult) -> list[str]:
    writes: list[str] = []

    if result.stdout:
        writes.extend(_terminated(result.stdout, result.stdout))

    if result.stderr:
        writes.extend(
            _terminated(result.stderr, paint(result.stderr, "error"))
        )

    if not result.success:
        writes.append(paint(f"Exit code: {result.exit_code}", "dim") + NEWLINE)

    return writes


def format_failure(error: BaseException | str) -> list[str]:
    """Annotation for a call that produced no result at all."""
    return [paint(f"Error: {error}", "error") + NEWLINE]
