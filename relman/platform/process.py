"""Asynchronous subprocess execution with Result-based error handling.

Wraps ``asyncio.create_subprocess_exec`` so that a slow network command
(``git clone``, ``git push``) suspends only its own task. Failures come back
as ``Err(ProcessError)`` instead of exceptions.

Secrets passed via ``secrets=`` are masked in the recorded command line and in
captured output, so a ``ProcessError`` is always safe to print.

Usage:
    result = await run(["git", "ls-remote", "--heads", url], cwd=tmp, secrets=(token,))
    match result:
        case Ok(stdout):
            ...
        case Err(error):
            console.error(error.stderr)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from relman.core.result import Err, Ok, Result

__all__ = ["MASK", "ProcessError", "redact", "run"]

MASK = "***"


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The (redacted) command that was executed.
        returncode: Exit code, or -1 when the process could not run or timed out.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every non-empty secret in text with a mask."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, MASK)
    return text


async def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    secrets: Iterable[str] = (),
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
        secrets: Strings to mask in the returned command and output.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    hidden = tuple(s for s in secrets if s)
    shown = tuple(redact(part, hidden) for part in cmd)

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return Err(ProcessError(command=shown, returncode=-1, stdout="", stderr=redact(str(e), hidden)))

    try:
        stdout_b, stderr_b = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        return Err(
            ProcessError(
                command=shown,
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )

    stdout = redact(stdout_b.decode("utf-8", errors="replace"), hidden)
    stderr = redact(stderr_b.decode("utf-8", errors="replace"), hidden)

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=shown,
                returncode=proc.returncode if proc.returncode is not None else -1,
                stdout=stdout,
                stderr=stderr,
            )
        )

    return Ok(stdout)
