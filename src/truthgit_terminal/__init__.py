# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
TruthGit terminal core package.

Line editing, history recall, serialized command execution and output
formatting for a keystroke-driven terminal surface.
"""
from .kernel import Kernel as Kernel  # noqa: F401 (re-export)
