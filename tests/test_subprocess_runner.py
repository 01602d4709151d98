"""Tests for the compression tool subprocess runner."""

import sys

import pytest

from exceptions import CompressionError, ToolTimeoutError
from utils.subprocess_runner import run_tool

PY = sys.executable


@pytest.mark.asyncio
async def test_run_tool_success():
    """Successful tool invocation."""
    stdout, stderr, rc = await run_tool([PY, "-c", "import sys; sys.stdout.buffer.write(b'hello')"])
    assert stdout == b"hello"
    assert rc == 0


@pytest.mark.asyncio
async def test_run_tool_stdin_closed():
    """The tool sees an empty stdin and never blocks on it."""
    stdout, _, _ = await run_tool(
        [PY, "-c", "import sys; sys.stdout.buffer.write(sys.stdin.buffer.read() or b'empty')"]
    )
    assert stdout == b"empty"


@pytest.mark.asyncio
async def test_run_tool_timeout():
    """Tool timeout -> ToolTimeoutError."""
    with pytest.raises(ToolTimeoutError):
        await run_tool([PY, "-c", "import time; time.sleep(10)"], timeout=1)


@pytest.mark.asyncio
async def test_run_tool_zero_timeout_waits(monkeypatch):
    """Default timeout of 0 means no limit."""
    from config import settings

    monkeypatch.setattr(settings, "tool_timeout_seconds", 0)
    stdout, _, rc = await run_tool([PY, "-c", "import time; time.sleep(0.2); print('done')"])
    assert stdout.strip() == b"done"


@pytest.mark.asyncio
async def test_run_tool_nonzero_exit():
    """Non-zero exit code -> CompressionError with stderr excerpt."""
    with pytest.raises(CompressionError) as exc_info:
        await run_tool([PY, "-c", "import sys; sys.stderr.write('bad input'); sys.exit(1)"])
    assert "bad input" in exc_info.value.message
    assert exc_info.value.details["exit_code"] == 1
