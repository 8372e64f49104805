"""
Tests for the subprocess implementation of the CommandExecutor protocol.
Covers command execution in isolation from the Kernel.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from truthgit_terminal.errors import ExecutorError
from truthgit_terminal.executor import SubprocessExecutor
from truthgit_terminal.models import ExecutionResult

# ----------------------------------------------------------------
# Basic execution
# ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_executor_runs_simple_command():
    """Executor must run command and return output."""
    result = await SubprocessExecutor().execute("echo test")

    assert isinstance(result, ExecutionResult)
    assert result.stdout == "test\n"
    assert result.stderr == ""
    assert result.exit_code == 0
    assert result.success


@pytest.mark.asyncio
async def test_executor_captures_stderr_separately():
    result = await SubprocessExecutor().execute("echo oops 1>&2")

    assert result.stdout == ""
    assert result.stderr == "oops\n"


@pytest.mark.asyncio
async def test_executor_reports_non_zero_exit_as_result():
    result = await SubprocessExecutor().execute("exit 42")

    assert result.exit_code == 42
    assert not result.success


@pytest.mark.asyncio
async def test_executor_runs_in_given_cwd(tmp_path):
    result = await SubprocessExecutor().execute("pwd", cwd=str(tmp_path))

    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


# ----------------------------------------------------------------
# Environment variables (force color)
# ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_executor_sets_color_env_when_force_color_true():
    result = await SubprocessExecutor(force_color=True).execute(
        'echo "$FORCE_COLOR"'
    )

    assert result.stdout.strip() == "1"


@pytest.mark.asyncio
async def test_executor_does_not_set_color_env_when_force_color_false(
    monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    result = await SubprocessExecutor(force_color=False).execute(
        'echo "${FORCE_COLOR:-NONE}"'
    )

    assert result.stdout.strip() == "NONE"


# ----------------------------------------------------------------
# Limits and failures
# ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_executor_handles_timeout():
    result = await SubprocessExecutor(timeout=1).execute("exec sleep 10")

    assert result.exit_code == 1
    assert not result.success
    assert result.stdout == ""
    assert "timed out after 1 seconds" in result.stderr


@pytest.mark.asyncio
async def test_executor_caps_captured_output():
    result = await SubprocessExecutor(max_capture_bytes=4).execute(
        "echo abcdefgh"
    )

    assert result.stdout == "abcd"


@pytest.mark.asyncio
async def test_executor_raises_when_shell_cannot_start():
    executor = SubprocessExecutor(shell="/nonexistent/shell")

    with pytest.raises(ExecutorError):
        await executor.execute("echo hi")


@pytest.mark.asyncio
async def test_executor_raises_for_missing_cwd(tmp_path):
    with pytest.raises(ExecutorError):
        await SubprocessExecutor().execute("ls", cwd=str(tmp_path / "gone"))


def test_from_config_reads_execution_section():
    executor = SubprocessExecutor.from_config(
        {"timeout": 5, "force_color": False, "max_capture_bytes": 10,
         "shell": "/bin/bash"}
    )

    assert executor.timeout == 5
    assert executor.force_color is False
    assert executor.max_capture_bytes == 10
    assert executor.shell == "/bin/bash"


def test_from_config_defaults():
    executor = SubprocessExecutor.from_config({})

    assert executor.timeout == 30
    assert executor.force_color is True
    assert executor.shell == "/bin/sh"
