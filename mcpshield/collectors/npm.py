"""
npm Runner — Bounded `npm audit --json` / `npm outdated --json` calls.

Both commands exit non-zero when they have something to report, so the
exit status is ignored and stdout is parsed regardless. Spawn failures,
timeouts and oversized output kill the whole process group and raise
DependencyAuditError; output that is not a JSON object is returned as None.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import signal
from typing import Any

from mcpshield.config import settings

logger = logging.getLogger("mcpshield.collectors.npm")

# Bound on reaping a killed process group
KILL_GRACE_SECONDS = 5.0


class DependencyAuditError(Exception):
    """The external audit tool was unavailable, too slow, or too chatty."""


class NpmRunner:
    """Runs npm in the scan root with an explicit timeout and output cap."""

    def __init__(self, executable: str | None = None) -> None:
        self.executable = executable or settings.npm_executable

    async def audit(self, cwd: str) -> dict[str, Any] | None:
        return await self._run_json(
            cwd,
            ["audit", "--json"],
            timeout=settings.npm_audit_timeout,
            max_bytes=settings.npm_audit_max_bytes,
        )

    async def outdated(self, cwd: str) -> dict[str, Any] | None:
        return await self._run_json(
            cwd,
            ["outdated", "--json"],
            timeout=settings.npm_outdated_timeout,
            max_bytes=settings.npm_outdated_max_bytes,
        )

    async def _run_json(
        self,
        cwd: str,
        args: list[str],
        timeout: float,
        max_bytes: int,
    ) -> dict[str, Any] | None:
        command = f"{self.executable} {' '.join(args)}"
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise DependencyAuditError(f"Could not start '{command}': {e}") from e

        try:
            stdout = await asyncio.wait_for(
                _communicate_capped(proc, max_bytes), timeout=timeout
            )
        except asyncio.TimeoutError:
            await _terminate(proc, command)
            raise DependencyAuditError(f"'{command}' timed out after {timeout:g}s")

        if stdout is None:
            await _terminate(proc, command)
            raise DependencyAuditError(f"'{command}' output exceeded {max_bytes} bytes")

        logger.debug(f"'{command}' exited with {proc.returncode} ({len(stdout)} bytes)")

        try:
            data = json.loads(stdout.decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"'{command}' produced invalid JSON: {e}")
            return None
        return data if isinstance(data, dict) else None


async def _communicate_capped(proc: asyncio.subprocess.Process, max_bytes: int) -> bytes | None:
    """Read stdout to EOF and reap the process; None once more than ``max_bytes`` arrive."""
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await proc.stdout.read(65536)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            return None
        chunks.append(chunk)
    await proc.wait()
    return b"".join(chunks)


async def _terminate(proc: asyncio.subprocess.Process, command: str) -> None:
    """Kill the whole process group, so wrappers and shims die with npm."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    try:
        await asyncio.wait_for(proc.wait(), timeout=KILL_GRACE_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(f"'{command}' did not exit {KILL_GRACE_SECONDS:g}s after SIGKILL")
