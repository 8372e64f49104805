# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
TruthGit terminal entry point and host loop.

Design:
- CLI owns process startup: config, logging, executor and display wiring.
- Kernel is the session engine (display + executor injected).
- The host loop reads raw keys from a prompt_toolkit input and hands them to
  the kernel; a few host-level keys (quick commands, reset, quit) are
  handled here before the kernel sees them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding.key_processor import KeyPress

from . import config
from .config import NEWLINE
from .executor import SubprocessExecutor
from .interfaces import ConfigModel
from .kernel import Kernel, write_crash_log
from .models import KeyEvent
from .ui import KeyTranslator, TerminalDisplay, parse_key_spec

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(cfg: ConfigModel) -> Path:
    """Send log records to a file; the terminal itself is in raw mode."""
    level_name = str(cfg.get_path("logging.level", "WARNING") or "WARNING")
    log_file = cfg.get_path("logging.file", "")

    if log_file:
        log_path = Path(str(log_file)).expanduser().resolve()
    else:
        log_path = (
            config.logs_dir(config.get_data_root()) / "terminal.log"
        )
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(str(log_path), encoding="utf-8")],
        force=True,
    )
    return log_path


@dataclass
class HostBindings:
    """Keys the host loop handles itself instead of passing to the kernel."""

    quick_commands: dict[KeyEvent, str] = field(default_factory=dict)
    reset: KeyEvent | None = None
    quit: KeyEvent | None = None

    @classmethod
    def from_config(cls, cfg: ConfigModel) -> HostBindings:
        quick: dict[KeyEvent, str] = {}
        for item in cfg.quick_commands:
            event = parse_key_spec(item.get("key", ""))
            if event is not None:
                quick[event] = item["command"]

        keys = cfg.keys
        return cls(
            quick_commands=quick,
            reset=parse_key_spec(str(keys.get("reset") or "")),
            quit=parse_key_spec(str(keys.get("quit") or "")),
        )


async def run_terminal(
    kernel: Kernel,
    cfg: ConfigModel,
    input_: Input | None = None,
) -> None:
    """Run one terminal session until the quit key or end of input."""
    inp = input_ if input_ is not None else create_input()
    bindings = HostBindings.from_config(cfg)
    translator = KeyTranslator()
    done = asyncio.Event()
    loop = asyncio.get_running_loop()
    flush_handle: asyncio.TimerHandle | None = None

    unsubscribe = None
    show_state = getattr(kernel.display, "show_state", None)
    if callable(show_state):
        unsubscribe = kernel.subscribe(show_state)

    def _dispatch(event: KeyEvent) -> None:
        if event == bindings.quit:
            kernel.display.write(NEWLINE + "Bye!" + NEWLINE)
            done.set()
        elif event == bindings.reset:
            kernel.reset()
        elif event in bindings.quick_commands:
            kernel.run_quick_command(bindings.quick_commands[event])
        else:
            kernel.handle_key(event)

    def _handle(presses: list[KeyPress]) -> None:
        for press in presses:
            if done.is_set():
                return
            event = translator.feed(press)
            if event is None:
                continue
            _guarded_dispatch(event)

    def _guarded_dispatch(event: KeyEvent) -> None:
        try:
            _dispatch(event)
        except Exception as e:
            # Unhandled exception - write crash log, keep the session
            write_crash_log(e, key=event.key)
            kernel.display.write(
                f"[ERROR] Unhandled exception: "
                f"{type(e).__name__}: {e}" + NEWLINE
            )

    def _flush_pending() -> None:
        # The vt100 parser holds a lone "\x1b" until flushed
        nonlocal flush_handle
        flush_handle = None
        if done.is_set():
            return
        _handle(inp.flush_keys())
        event = translator.expire()
        if event is not None and not done.is_set():
            _guarded_dispatch(event)

    def _on_keys() -> None:
        nonlocal flush_handle
        _handle(inp.read_keys())
        if inp.closed:
            done.set()
        if flush_handle is not None:
            flush_handle.cancel()
        if not done.is_set():
            flush_handle = loop.call_later(translator.timeout, _flush_pending)

    try:
        with inp.raw_mode(), inp.attach(_on_keys):
            kernel.start()
            await done.wait()
    finally:
        if flush_handle is not None:
            flush_handle.cancel()
        if unsubscribe is not None:
            unsubscribe()
        kernel.dispose()


def main() -> None:
    """Main entry point for the TruthGit terminal."""
    cfg = config.load_system_config()
    log_path = configure_logging(cfg)
    logger.info("session starting, logging to %s", log_path)

    # Explicit wiring: executor + display injected into kernel
    executor = SubprocessExecutor.from_config(cfg.execution)
    display = TerminalDisplay()
    kernel = Kernel(display=display, executor=executor)

    try:
        asyncio.run(run_terminal(kernel, cfg))
    except KeyboardInterrupt:
        pass
