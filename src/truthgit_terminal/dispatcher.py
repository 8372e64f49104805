# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Key dispatcher.

Two steps:
- classify(): raw KeyEvent -> Action (what the key means)
- transition(): (SessionState, KeyEvent) -> (SessionState, effects)

The transition is pure. It never touches the display or the executor; it
only describes what should happen, and the kernel applies the effects.

States are Idle (accepting edits) and Busy (a command is in flight). While
Busy only the interrupt gesture is honoured.
"""

from __future__ import annotations

from enum import Enum, auto

from . import buffer, history
from .config import NEWLINE, PROMPT
from .models import ClearScreen, Effect, KeyEvent, SessionState, Submit, Write

INTERRUPT_MARKER = "^C"


class Action(Enum):
    APPEND = auto()
    DELETE = auto()
    SUBMIT = auto()
    RECALL_PREVIOUS = auto()
    RECALL_NEXT = auto()
    INTERRUPT = auto()
    CLEAR_SCREEN = auto()
    IGNORE = auto()


_NAMED_KEYS: dict[str, Action] = {
    "Enter": Action.SUBMIT,
    "Backspace": Action.DELETE,
    "ArrowUp": Action.RECALL_PREVIOUS,
    "ArrowDown": Action.RECALL_NEXT,
}

_CTRL_KEYS: dict[str, Action] = {
    "c": Action.INTERRUPT,
    "l": Action.CLEAR_SCREEN,
}

# Actions still honoured while a command is in flight
_BUSY_ACTIONS = frozenset({Action.INTERRUPT})


def classify(event: KeyEvent) -> Action:
    key = event.key
    mods = event.modifiers

    # Named keys win regardless of modifiers
    if key in _NAMED_KEYS:
        return _NAMED_KEYS[key]

    if mods.ctrl and key in _CTRL_KEYS:
        return _CTRL_KEYS[key]

    if len(key) == 1 and key.isprintable():
        if not (mods.ctrl or mods.alt or mods.meta):
            return Action.APPEND

    return Action.IGNORE


def transition(
    state: SessionState, event: KeyEvent
) -> tuple[SessionState, list[Effect]]:
    action = classify(event)

    if action is Action.IGNORE:
        return state, []
    if state.busy and action not in _BUSY_ACTIONS:
        return state, []

    if action is Action.APPEND:
        line, effects = buffer.append(state.line, event.key)
        return state.with_line(line), effects

    if action is Action.DELETE:
        line, effects = buffer.delete_last(state.line)
        return state.with_line(line), effects

    if action is Action.SUBMIT:
        submitted = state.line.buffer
        cleared = buffer.clear(state.line)
        return state.with_line(cleared), [Write(NEWLINE), Submit(submitted)]

    if action is Action.RECALL_PREVIOUS:
        hist, recall = history.recall_previous(state.history)
        return _apply_recall(state.with_history(hist), recall)

    if action is Action.RECALL_NEXT:
        hist, recall = history.recall_next(state.history)
        return _apply_recall(state.with_history(hist), recall)

    if action is Action.INTERRUPT:
        cleared = buffer.clear(state.line)
        return state.with_line(cleared), [
            Write(INTERRUPT_MARKER + NEWLINE),
            Write(PROMPT),
        ]

    # Action.CLEAR_SCREEN
    return state, [ClearScreen(), Write(PROMPT)]


def _apply_recall(
    state: SessionState, recall: history.Recall
) -> tuple[SessionState, list[Effect]]:
    if not recall.moved:
        return state, []
    # entry None: walked past the newest entry, back to an empty line
    line, effects = buffer.replace_and_redraw(state.line, recall.entry or "")
    return state.with_line(line), effects
