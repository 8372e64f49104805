# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
TruthGit terminal kernel.

The session engine:
- owns the single authoritative SessionState
- feeds key events through the pure dispatcher
- applies the resulting effects to the injected Display
- runs submitted commands on the injected CommandExecutor (one at a time)

Important boundary:
- Kernel does not read keys from a terminal or load YAML; the host does
  that and hands in KeyEvents, a Display and an executor.
"""

from __future__ import annotations

import asyncio
import logging
import traceback
from collections.abc import Callable
from datetime import datetime
from typing import Any

from . import buffer, runner
from . import config as cfg_module
from .config import BANNER, NEWLINE, PROMPT
from .dispatcher import transition
from .errors import ExecutorError
from .interfaces import CommandExecutor, Display
from .models import (
    ClearScreen,
    Effect,
    Execute,
    ExecutionResult,
    KeyEvent,
    SessionState,
    Submit,
    Write,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


def write_crash_log(
    error: Exception,
    raw_command: str = "",
    key: str = "",
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions or critical failures.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        logs_dir = cfg_module.logs_dir(cfg_module.get_data_root())

        # Create logs directory only when we need to write
        logs_dir.mkdir(parents=True, exist_ok=True)

        crash_log_path = logs_dir / "crash.log"

        lines = [f"{datetime.now().isoformat()}"]
        if key:
            lines.append(f"key={key}")
        if raw_command:
            lines.append(f"raw={raw_command}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(traceback.format_exc())
        lines.append("----")

        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already in an error state; nowhere left to report to
        pass


class Kernel:
    """TruthGit terminal session engine."""

    def __init__(
        self,
        display: Display,
        executor: CommandExecutor,
        banner: str = BANNER,
    ) -> None:
        self.display = display
        self.executor = executor
        self.banner = banner

        self.state = SessionState()
        self.started = False
        self.disposed = False

        self._listeners: list[StateListener] = []
        self._pending: asyncio.Task[None] | None = None

    # -----------------------
    # State
    # -----------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_state(self, state: SessionState) -> None:
        if state == self.state:
            return
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    @property
    def busy(self) -> bool:
        return self.state.busy

    # -----------------------
    # Session
    # -----------------------

    def start(self) -> None:
        """Write the banner and the first prompt (once per session)."""
        if self.started:
            return
        self.started = True
        self.display.write(self.banner)
        self.display.write(PROMPT)
        self.display.focus()

    def reset(self) -> None:
        """Clear the surface, redraw banner + prompt, drop the typed line."""
        self.display.clear()
        self.display.write(self.banner)
        self.display.write(PROMPT)
        self._set_state(self.state.with_line(buffer.clear(self.state.line)))

    def dispose(self) -> None:
        """Tear the session down. Later settlements write nothing."""
        self.disposed = True
        self._listeners.clear()

    # -----------------------
    # Input
    # -----------------------

    def handle_key(self, event: KeyEvent) -> None:
        if self.disposed:
            return
        state, effects = transition(self.state, event)
        self._set_state(state)
        self._apply(effects)

    def submit(self, line: str) -> None:
        state, effects = runner.begin(self.state, line)
        self._set_state(state)
        self._apply(effects)

    def run_quick_command(self, command: str) -> bool:
        """Run ``command`` as if typed. Returns False if a command is running."""
        if self.disposed or self.busy:
            return False
        line, effects = buffer.replace_and_redraw(self.state.line, command)
        self._set_state(self.state.with_line(buffer.clear(line)))
        self._apply(effects + [Write(NEWLINE), Submit(command)])
        return True

    # -----------------------
    # Effects
    # -----------------------

    def _apply(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Write):
                self.display.write(effect.text)
            elif isinstance(effect, ClearScreen):
                self.display.clear()
            elif isinstance(effect, Submit):
                self.submit(effect.line)
            elif isinstance(effect, Execute):
                self._pending = asyncio.ensure_future(
                    self._run(effect.command, effect.cwd)
                )

    async def _run(self, command: str, cwd: str | None) -> None:
        logger.debug("dispatching %r", command)
        try:
            result = await self.executor.execute(command, cwd=cwd)
        except (ExecutorError, OSError) as e:
            logger.exception("executor failed for %r", command)
            self._settle(runner.settle_failure, e)
            return
        except Exception as e:
            logger.exception("unexpected executor error for %r", command)
            write_crash_log(e, raw_command=command)
            self._settle(runner.settle_failure, e)
            return

        if not isinstance(result, ExecutionResult):
            self._settle(
                runner.settle_failure,
                f"executor returned {type(result).__name__}",
            )
            return
        self._settle(runner.settle, result)

    def _settle(
        self,
        settle_fn: Callable[
            [SessionState, Any], tuple[SessionState, list[Effect]]
        ],
        outcome: ExecutionResult | BaseException | str,
    ) -> None:
        state, effects = settle_fn(self.state, outcome)
        self._set_state(state)
        if self.disposed:
            return
        self._apply(effects)

    async def wait_idle(self) -> None:
        """Wait for the in-flight command (if any) to settle."""
        while self._pending is not None and not self._pending.done():
            await self._pending
