# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Line buffer operations.

The cursor always sits at the end of the line, so every edit is an append or
a removal of the last character. Each function returns the new LineState and
the display writes that echo the change.
"""

from __future__ import annotations

from .config import PROMPT
from .models import Effect, LineState, Write

# Move left, blank the cell, move left again
ERASE_ONE = "\b \b"


def append(line: LineState, ch: str) -> tuple[LineState, list[Effect]]:
    return LineState(line.buffer + ch), [Write(ch)]


def delete_last(line: LineState) -> tuple[LineState, list[Effect]]:
    if not line.buffer:
        return line, []
    return LineState(line.buffer[:-1]), [Write(ERASE_ONE)]


def clear(line: LineState) -> LineState:
    return LineState()


def replace_and_redraw(
    line: LineState, text: str, prompt: str = PROMPT
) -> tuple[LineState, list[Effect]]:
    """Swap the buffer for ``text`` and repaint the prompt line.

    The erase width comes from the *previous* buffer so that a longer old
    line leaves no stale characters behind.
    """
    blank = " " * len(line.buffer)
    redraw = "\r" + prompt + blank + "\r" + prompt + text
    return LineState(text), [Write(redraw)]
