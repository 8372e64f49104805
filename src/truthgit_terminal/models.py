# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Data model for the terminal session.

All state is immutable: every operation returns a new value, and the session
engine swaps the whole SessionState in one assignment. Effects describe what
should happen to the outside world (display writes, executor calls) without
performing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


# -----------------------
# Session state
# -----------------------


@dataclass(frozen=True)
class LineState:
    """Characters typed since the last submit or clear."""

    buffer: str = ""


@dataclass(frozen=True)
class HistoryState:
    """Submitted commands, oldest first.

    ``cursor`` is an offset from the most recent entry; -1 means the user is
    not browsing history.
    """

    entries: tuple[str, ...] = ()
    cursor: int = -1


@dataclass(frozen=True)
class ExecutionState:
    in_flight: bool = False


@dataclass(frozen=True)
class SessionState:
    line: LineState = field(default_factory=LineState)
    history: HistoryState = field(default_factory=HistoryState)
    execution: ExecutionState = field(default_factory=ExecutionState)

    @property
    def busy(self) -> bool:
        return self.execution.in_flight

    def with_line(self, line: LineState) -> SessionState:
        return replace(self, line=line)

    def with_history(self, history: HistoryState) -> SessionState:
        return replace(self, history=history)

    def with_execution(self, in_flight: bool) -> SessionState:
        return replace(self, execution=ExecutionState(in_flight=in_flight))


# -----------------------
# Executor boundary
# -----------------------


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    success: bool = True


# -----------------------
# Key events
# -----------------------


@dataclass(frozen=True)
class Modifiers:
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    shift: bool = False


@dataclass(frozen=True)
class KeyEvent:
    """One keystroke.

    ``key`` uses DOM-style names: the character itself for printable keys,
    otherwise "Enter", "Backspace", "ArrowUp", "F1", ...
    """

    key: str
    modifiers: Modifiers = field(default_factory=Modifiers)

    @classmethod
    def ctrl(cls, key: str) -> KeyEvent:
        return cls(key, Modifiers(ctrl=True))


# -----------------------
# Effects
# -----------------------


@dataclass(frozen=True)
class Write:
    text: str


@dataclass(frozen=True)
class ClearScreen:
    pass


@dataclass(frozen=True)
class Submit:
    line: str


@dataclass(frozen=True)
class Execute:
    command: str
    cwd: str | None = None


Effect = Write | ClearScreen | Submit | Execute
