# tests/test_ui.py
from __future__ import annotations

import io

import pytest

from prompt_toolkit.data_structures import Size
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output.vt100 import Vt100_Output

from truthgit_terminal.models import (
    ExecutionState,
    KeyEvent,
    Modifiers,
    SessionState,
)
from truthgit_terminal.ui import (
    KeyTranslator,
    TerminalDisplay,
    key_from_name,
    parse_key_spec,
)


def _output() -> tuple[Vt100_Output, io.StringIO]:
    stream = io.StringIO()
    out = Vt100_Output(stream, lambda: Size(rows=24, columns=80), term="xterm")
    return out, stream


# ----------------------------------------------------------------
# Key translation
# ----------------------------------------------------------------


@pytest.mark.parametrize(
    "press, expected",
    [
        (KeyPress("a", "a"), KeyEvent("a")),
        (KeyPress("A", "A"), KeyEvent("A", Modifiers(shift=True))),
        (KeyPress(" ", " "), KeyEvent(" ")),
        (KeyPress(Keys.ControlM, "\r"), KeyEvent("Enter")),
        (KeyPress(Keys.ControlJ, "\n"), KeyEvent("Enter")),
        (KeyPress(Keys.ControlH, "\x7f"), KeyEvent("Backspace")),
        (KeyPress(Keys.Up, "\x1b[A"), KeyEvent("ArrowUp")),
        (KeyPress(Keys.Down, "\x1b[B"), KeyEvent("ArrowDown")),
        (KeyPress(Keys.ControlC, "\x03"), KeyEvent.ctrl("c")),
        (KeyPress(Keys.ControlL, "\x0c"), KeyEvent.ctrl("l")),
        (KeyPress(Keys.ControlI, "\t"), KeyEvent("Tab")),
        (KeyPress(Keys.F5, "\x1b[15~"), KeyEvent("F5")),
        (KeyPress(Keys.ShiftUp, ""), KeyEvent("ArrowUp", Modifiers(shift=True))),
        (
            KeyPress(Keys.ControlShiftLeft, ""),
            KeyEvent("ArrowLeft", Modifiers(ctrl=True, shift=True)),
        ),
    ],
)
def test_translator_maps_key_presses(press, expected):
    assert KeyTranslator().feed(press) == expected


@pytest.mark.parametrize(
    "key", [Keys.CPRResponse, Keys.Vt100MouseEvent, Keys.Ignore]
)
def test_translator_drops_pseudo_keys(key):
    assert KeyTranslator().feed(KeyPress(key, "")) is None


def test_escape_prefix_becomes_alt_modifier():
    translator = KeyTranslator()

    assert translator.feed(KeyPress(Keys.Escape, "\x1b")) is None
    assert translator.feed(KeyPress("x", "x")) == KeyEvent(
        "x", Modifiers(alt=True)
    )
    # only the next key is affected
    assert translator.feed(KeyPress("y", "y")) == KeyEvent("y")


def test_double_escape_yields_alt_escape():
    translator = KeyTranslator()
    translator.feed(KeyPress(Keys.Escape, "\x1b"))

    assert translator.feed(KeyPress(Keys.Escape, "\x1b")) == KeyEvent(
        "Escape", Modifiers(alt=True)
    )


class StepClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_escape_followed_late_by_key_is_plain_key():
    clock = StepClock()
    translator = KeyTranslator(timeout=0.5, clock=clock)
    translator.feed(KeyPress(Keys.Escape, "\x1b"))

    clock.now += 0.6

    assert translator.feed(KeyPress("l", "l")) == KeyEvent("l")
    assert not translator.escape_pending


def test_escape_followed_within_window_is_alt():
    clock = StepClock()
    translator = KeyTranslator(timeout=0.5, clock=clock)
    translator.feed(KeyPress(Keys.Escape, "\x1b"))

    clock.now += 0.2

    assert translator.feed(KeyPress("l", "l")) == KeyEvent(
        "l", Modifiers(alt=True)
    )


def test_stale_escape_then_escape_starts_new_prefix():
    clock = StepClock()
    translator = KeyTranslator(timeout=0.5, clock=clock)
    translator.feed(KeyPress(Keys.Escape, "\x1b"))

    clock.now += 1.0

    assert translator.feed(KeyPress(Keys.Escape, "\x1b")) is None
    assert translator.escape_pending


def test_expire_releases_pending_escape():
    translator = KeyTranslator()
    translator.feed(KeyPress(Keys.Escape, "\x1b"))

    assert translator.expire() == KeyEvent("Escape")
    assert not translator.escape_pending
    assert translator.feed(KeyPress("l", "l")) == KeyEvent("l")


def test_expire_without_pending_escape_is_none():
    assert KeyTranslator().expire() is None


def test_key_from_name_unknown_multi_char_is_none():
    assert key_from_name("c-space") is None


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("F5", KeyEvent("F5")),
        ("f12", KeyEvent("F12")),
        ("c-d", KeyEvent.ctrl("d")),
        ("x", KeyEvent("x")),
        ("", None),
    ],
)
def test_parse_key_spec(spec, expected):
    assert parse_key_spec(spec) == expected


# ----------------------------------------------------------------
# TerminalDisplay
# ----------------------------------------------------------------


def test_display_writes_raw_ansi_unchanged():
    out, stream = _output()
    display = TerminalDisplay(output=out)

    display.write("\033[31mboom\033[0m\r\n")

    assert stream.getvalue() == "\033[31mboom\033[0m\r\n"


def test_display_ignores_empty_writes():
    out, stream = _output()
    TerminalDisplay(output=out).write("")

    assert stream.getvalue() == ""


def test_display_clear_erases_screen_and_homes_cursor():
    out, stream = _output()
    TerminalDisplay(output=out).clear()

    assert "\033[2J" in stream.getvalue()
    assert "H" in stream.getvalue()


def test_display_focus_shows_cursor_and_sets_title():
    out, stream = _output()
    TerminalDisplay(output=out, title="TG").focus()

    assert "\033[?25h" in stream.getvalue()
    assert "TG" in stream.getvalue()


def test_show_state_updates_title_only_on_busy_change():
    out, stream = _output()
    display = TerminalDisplay(output=out, title="TG")
    busy = SessionState(execution=ExecutionState(in_flight=True))

    display.show_state(busy)
    first = stream.getvalue()
    display.show_state(busy)

    assert "TG (running)" in first
    assert stream.getvalue() == first

    display.show_state(SessionState())
    assert stream.getvalue().endswith("TG\a")


def test_angle_bracket_characters_are_printable_keys():
    assert KeyTranslator().feed(KeyPress("<", "<")) == KeyEvent("<")
