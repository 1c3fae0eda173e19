"""Process execution for external collaborators.

External binaries (``node``, ``npm``, ``pnpm`` ...) are reached only through
``run_command``: an argument list goes in and exit code, stdout and stderr
come out. Nothing here raises for process failures; callers inspect the
returned ``CommandResult``.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

# Default timeout in milliseconds
DEFAULT_TIMEOUT_MS: int = 30000  # 30 seconds

# Maximum output size in bytes
MAX_OUTPUT_BYTES: int = 102400  # 100KB


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result from command execution.

    Attributes:
        success: Whether the command ran and exited with status 0.
        exit_code: Process exit code, or None if execution failed.
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        error: Error message if execution failed (timeout, not found, etc.).
        timed_out: Whether the command timed out.
        command_not_found: Whether the command was not found.
    """

    success: bool
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    timed_out: bool = False
    command_not_found: bool = False


def truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Truncate output to max bytes, preserving valid UTF-8.

    Args:
        output: The string to truncate.
        max_bytes: Maximum size in bytes.

    Returns:
        Truncated string with indicator if truncated.
    """
    if not output:
        return output

    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output

    # 'ignore' drops a multi-byte sequence cut at the boundary
    truncated = encoded[:max_bytes].decode("utf-8", errors="ignore")
    return truncated + "\n... [output truncated]"


def run_command(
    argv: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    stdin: bytes | None = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> CommandResult:
    """Execute a command given as an argument list.

    Args:
        argv: Program and arguments. No shell is involved.
        cwd: Working directory for execution.
        env: Additional environment variables layered over ``os.environ``.
        stdin: Optional data piped to the process.
        timeout_ms: Execution timeout in milliseconds.

    Returns:
        CommandResult with execution outcome.
    """
    if not argv:
        return CommandResult(success=False, error="No command specified")

    merged_env = {**os.environ, **(env or {})}
    timeout_seconds = timeout_ms / 1000.0

    try:
        result = subprocess.run(  # noqa: S603
            list(argv),
            env=merged_env,
            cwd=str(cwd) if cwd else None,
            input=stdin,
            capture_output=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            success=False,
            error=f"Command timed out after {timeout_seconds}s",
            timed_out=True,
        )
    except FileNotFoundError as e:
        return CommandResult(
            success=False,
            error=str(e),
            command_not_found=True,
        )
    except OSError as e:
        return CommandResult(success=False, error=str(e))

    return CommandResult(
        success=result.returncode == 0,
        exit_code=result.returncode,
        stdout=truncate_output(result.stdout.decode("utf-8", errors="replace")),
        stderr=truncate_output(result.stderr.decode("utf-8", errors="replace")),
    )
