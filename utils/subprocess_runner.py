import asyncio

from config import settings
from exceptions import CompressionError, ToolTimeoutError


async def run_tool(
    cmd: list[str],
    timeout: int | None = None,
) -> tuple[bytes, bytes, int]:
    """Run a CLI compression tool and wait for it.

    Tools read and write files named on the command line; stdin is
    closed.

    Args:
        cmd: Command and arguments (e.g., ["sharp", "--input", "a.png", ...]).
        timeout: Seconds before killing the process.
            Defaults to settings.tool_timeout_seconds; 0 waits forever.

    Returns:
        Tuple of (stdout_bytes, stderr_bytes, return_code).

    Raises:
        ToolTimeoutError: If the process exceeds the timeout.
        CompressionError: If the process exits with a non-zero code.
    """
    if timeout is None:
        timeout = settings.tool_timeout_seconds

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(),
            timeout=timeout or None,
        )
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise ToolTimeoutError(
            f"Tool {cmd[0]} timed out after {timeout}s",
            tool=cmd[0],
            timeout=timeout,
        )

    if proc.returncode != 0:
        raise CompressionError(
            f"{cmd[0]} failed with exit code {proc.returncode}: "
            f"{stderr.decode(errors='replace')[:500]}",
            tool=cmd[0],
            exit_code=proc.returncode,
        )

    return stdout, stderr, proc.returncode
