# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Execution gate and command runner transitions.

The gate is the single ``in_flight`` flag in ExecutionState. These functions
are the only ones that flip it:

- begin(): submit a line; empty lines just re-prompt
- settle(): the executor returned a result
- settle_failure(): the executor call itself failed

The kernel performs the awaited executor call between begin() and settle().
"""

from __future__ import annotations

from . import history
from .config import PROMPT
from .errors import GateBusyError
from .formatter import format_failure, format_result
from .models import Effect, Execute, ExecutionResult, SessionState, Write


def begin(
    state: SessionState, line: str
) -> tuple[SessionState, list[Effect]]:
    if state.busy:
        raise GateBusyError(f"Cannot submit {line!r}: a command is in flight")

    if not line.strip():
        return state, [Write(PROMPT)]

    new = state.with_execution(True).with_history(
        history.record(state.history, line)
    )
    return new, [Execute(line, cwd=None)]


def settle(
    state: SessionState, result: ExecutionResult
) -> tuple[SessionState, list[Effect]]:
    effects: list[Effect] = [Write(text) for text in format_result(result)]
    effects.append(Write(PROMPT))
    return state.with_execution(False), effects


def settle_failure(
    state: SessionState, error: BaseException | str
) -> tuple[SessionState, list[Effect]]:
    effects: list[Effect] = [Write(text) for text in format_failure(error)]
    effects.append(Write(PROMPT))
    return state.with_execution(False), effects
