# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
In-memory command history with a recall cursor.

History is browsed most-recent-first: ``cursor`` 0 is the last submitted
command, ``len(entries) - 1`` the oldest. Nothing is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import HistoryState


@dataclass(frozen=True)
class Recall:
    """Outcome of a recall step.

    moved=False: nothing changed, leave the line alone.
    moved=True, entry=None: walked past the newest entry, clear the line.
    """

    moved: bool
    entry: str | None = None


NO_RECALL = Recall(moved=False)


def _entry_at(history: HistoryState, cursor: int) -> str:
    return history.entries[len(history.entries) - 1 - cursor]


def record(history: HistoryState, line: str) -> HistoryState:
    """Append ``line`` unless it is blank; always stop browsing."""
    if line.strip():
        return HistoryState(history.entries + (line,), -1)
    return HistoryState(history.entries, -1)


def recall_previous(history: HistoryState) -> tuple[HistoryState, Recall]:
    if not history.entries:
        return history, NO_RECALL

    oldest = len(history.entries) - 1
    cursor = min(history.cursor + 1, oldest)
    new = HistoryState(history.entries, cursor)
    return new, Recall(moved=True, entry=_entry_at(new, cursor))


def recall_next(history: HistoryState) -> tuple[HistoryState, Recall]:
    if history.cursor > 0:
        cursor = history.cursor - 1
        new = HistoryState(history.entries, cursor)
        return new, Recall(moved=True, entry=_entry_at(new, cursor))

    if history.cursor == 0:
        return HistoryState(history.entries, -1), Recall(moved=True)

    return history, NO_RECALL
