# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Exception types raised by the terminal core."""

from __future__ import annotations


class TerminalError(Exception):
    """Base class for terminal core errors."""


class ExecutorError(TerminalError):
    """The executor could not run the command at all (spawn/host failure).

    Distinct from a command that ran and exited non-zero, which is reported
    through ExecutionResult.
    """


class GateBusyError(TerminalError):
    """A submit was attempted while another command is in flight."""


class ConfigError(TerminalError):
    """Configuration file did not load to the expected shape."""
