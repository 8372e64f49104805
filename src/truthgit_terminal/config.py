# TruthGit Terminal — Interactive Command-Line Front-End
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and presentation constants for the TruthGit terminal.

Handles:
- Data root resolution (TRUTHGIT_DATA_HOME, ~/.local/share)
- Packaged YAML defaults loading (truthgit_terminal/defaults/system.yaml)
- Optional user override file (TRUTHGIT_CONFIG), merged over the defaults
- ANSI palette, banner and prompt constants
"""

from __future__ import annotations

import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

# -----------------------
# UI + branding constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "reset": "\033[0m",
    "red": "\033[31m",
    "gray": "\033[90m",
    "bold_cyan": "\033[1;36m",
    "bold_blue": "\033[1;34m",
    "bold_magenta": "\033[1;35m",
}

# Semantic roles the core is allowed to write with
PALETTE: dict[str, str] = {
    "default": ANSI_COLORS["reset"],
    "error": ANSI_COLORS["red"],
    "dim": ANSI_COLORS["gray"],
    "accent": ANSI_COLORS["bold_cyan"],
}

NEWLINE = "\r\n"


def paint(text: str, role: str) -> str:
    """Wrap text in the palette color for ``role`` (unknown roles -> plain)."""
    color = PALETTE.get(role)
    if not color or role == "default":
        return text
    return f"{color}{text}{ANSI_COLORS['reset']}"


PROMPT = (
    ANSI_COLORS["bold_cyan"] + "truthgit" + ANSI_COLORS["reset"] + ":"
    + ANSI_COLORS["bold_blue"] + "~" + ANSI_COLORS["reset"] + "$ "
)

BANNER = (
    ANSI_COLORS["bold_magenta"]
    + "╔══════════════════════════════════════════════════════════╗\r\n"
    + "║           TruthGit Terminal - Governance Layer            ║\r\n"
    + "╚══════════════════════════════════════════════════════════╝"
    + ANSI_COLORS["reset"] + "\r\n\r\n"
    + paint(
        "Type commands to interact with the ecosystem.\r\n"
        "Quick commands: truthgit status, truthgit verify \"claim\"",
        "dim",
    )
    + "\r\n\r\n"
)


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements the ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def execution(self) -> dict[str, Any]:
        return self._section("execution")

    @property
    def quick_commands(self) -> list[dict[str, str]]:
        raw = self._config.get("quick_commands", [])
        if not isinstance(raw, list):
            return []
        out: list[dict[str, str]] = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("command"):
                continue
            out.append({
                "key": str(item.get("key", "")),
                "label": str(item.get("label") or item["command"]),
                "command": str(item["command"]),
            })
        return out

    @property
    def keys(self) -> dict[str, Any]:
        return self._section("keys")

    @property
    def logging(self) -> dict[str, Any]:
        return self._section("logging")

    def _section(self, name: str) -> dict[str, Any]:
        val = self._config.get(name, {})
        return val if isinstance(val, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("execution.timeout", 30)
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root helpers
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory.

    Resolution order:
    1. TRUTHGIT_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    data_home = os.getenv("TRUTHGIT_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir(data_root: Path) -> Path:
    """<data_root>/truthgit/logs (not created here)."""
    return data_root / "truthgit" / "logs"


# -----------------------
# YAML loading
# -----------------------


def _defaults_dir() -> Path:
    return Path(
        importlib_resources.files("truthgit_terminal.defaults")
    )  # type: ignore[arg-type]


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config YAML {path} must load to a mapping/dict.")
    return data


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """Load a YAML file from truthgit_terminal/defaults/."""
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )
    return _load_yaml_mapping(path)


def merge_config(
    base: dict[str, Any], override: dict[str, Any]
) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings merge key by key; any other value (lists included)
    replaces the base value.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_system_config(override_path: Path | None = None) -> YAMLConfig:
    """
    Load system.yaml from packaged defaults, then merge the user override
    file (explicit path, else TRUTHGIT_CONFIG) over it.
    """
    data = load_defaults_yaml("system.yaml")

    if override_path is None:
        env_path = os.getenv("TRUTHGIT_CONFIG")
        if env_path:
            override_path = Path(env_path).expanduser()

    if override_path is not None:
        if not override_path.exists():
            raise FileNotFoundError(f"Config file not found: {override_path}")
        data = merge_config(data, _load_yaml_mapping(override_path))

    return YAMLConfig(data)
