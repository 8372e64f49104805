# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
prompt_toolkit-backed terminal surface.

- TerminalDisplay: the Display protocol over a prompt_toolkit Output.
  Writes go out raw (ANSI preserved) and are flushed immediately.
- KeyTranslator: prompt_toolkit KeyPress -> KeyEvent with DOM-style key
  names and modifier flags.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import Output, create_output

from .models import KeyEvent, Modifiers, SessionState

TITLE = "TruthGit Terminal"

# Seconds an Escape may precede a key and still mean Alt+<key>
# (prompt_toolkit's ttimeoutlen)
ESCAPE_TIMEOUT = 0.5

# prompt_toolkit key values with a fixed meaning (the terminal cannot tell
# Enter from c-m or Backspace from c-h)
_SPECIAL_KEYS: dict[str, tuple[str, Modifiers]] = {
    "c-m": ("Enter", Modifiers()),
    "c-j": ("Enter", Modifiers()),
    "c-h": ("Backspace", Modifiers()),
    "c-i": ("Tab", Modifiers()),
    "s-tab": ("Tab", Modifiers(shift=True)),
    "escape": ("Escape", Modifiers()),
}

_NAMED_KEYS: dict[str, str] = {
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "home": "Home",
    "end": "End",
    "delete": "Delete",
    "insert": "Insert",
    "pageup": "PageUp",
    "pagedown": "PageDown",
}


def key_from_name(name: str, alt: bool = False) -> KeyEvent | None:
    """Translate a prompt_toolkit key name ("c-c", "s-up", "f5", "x")."""
    if name in _SPECIAL_KEYS:
        key, mods = _SPECIAL_KEYS[name]
        return KeyEvent(key, Modifiers(shift=mods.shift, alt=alt))

    # Pseudo keys: "<cursor-position-response>", "<sigint>", ...
    if len(name) > 1 and name.startswith("<"):
        return None

    ctrl = shift = False
    base = name
    while len(base) > 2 and base[:2] in ("c-", "s-"):
        if base[0] == "c":
            ctrl = True
        else:
            shift = True
        base = base[2:]

    if base in _NAMED_KEYS:
        key = _NAMED_KEYS[base]
    elif len(base) > 1 and base[0] == "f" and base[1:].isdigit():
        key = base.upper()
    elif len(base) == 1:
        key = base
        shift = shift or base.isupper()
    else:
        return None

    return KeyEvent(key, Modifiers(ctrl=ctrl, alt=alt, shift=shift))


def parse_key_spec(spec: str) -> KeyEvent | None:
    """Key spec from config ("F5", "c-d") -> the KeyEvent it matches."""
    spec = spec.strip()
    if len(spec) == 1:
        return key_from_name(spec)
    return key_from_name(spec.lower())


class KeyTranslator:
    """Stateful KeyPress -> KeyEvent translation.

    Terminals send Alt+<key> as Escape followed by the key, so an Escape is
    held back and turns the next key into an alt-modified one, but only if
    that key arrives within ``timeout`` seconds. Past that the Escape was a
    lone keypress and the next key is delivered unmodified.
    """

    def __init__(
        self,
        timeout: float = ESCAPE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self._clock = clock
        self._escape_at: float | None = None

    @property
    def escape_pending(self) -> bool:
        return self._escape_at is not None

    def feed(self, press: KeyPress) -> KeyEvent | None:
        key = press.key
        if isinstance(key, Keys):
            name = key.value
        else:
            name = str(key)

        alt = self._take_escape()
        if name == "escape" and not alt:
            self._escape_at = self._clock()
            return None

        return key_from_name(name, alt=alt)

    def expire(self) -> KeyEvent | None:
        """Release a held Escape as a plain Escape key."""
        if self._escape_at is None:
            return None
        self._escape_at = None
        return KeyEvent("Escape")

    def _take_escape(self) -> bool:
        at = self._escape_at
        self._escape_at = None
        return at is not None and self._clock() - at <= self.timeout


class TerminalDisplay:
    """Display protocol implementation over a prompt_toolkit Output."""

    def __init__(self, output: Output | None = None, title: str = TITLE):
        self.output = output if output is not None else create_output()
        self.title = title
        self._shown_busy: bool | None = None

    def write(self, text: str) -> None:
        """Write EXACTLY what we receive (no extra newline)."""
        if not text:
            return
        self.output.write_raw(text)
        self.output.flush()

    def clear(self) -> None:
        self.output.erase_screen()
        self.output.cursor_goto(0, 0)
        self.output.flush()

    def focus(self) -> None:
        self.output.show_cursor()
        self.set_title(self.title)

    def set_title(self, title: str) -> None:
        self.output.set_title(title)
        self.output.flush()

    def show_state(self, state: SessionState) -> None:
        """State listener: reflect the busy flag in the window title."""
        if state.busy == self._shown_busy:
            return
        self._shown_busy = state.busy
        if state.busy:
            self.set_title(f"{self.title} (running)")
        else:
            self.set_title(self.title)
