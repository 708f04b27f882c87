"""Helpers for running external command-line tools (yt-dlp, ffmpeg, ffprobe)."""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404 - tools are invoked with argument lists, never a shell
from typing import List, Optional, Sequence

from ..exceptions import ExternalCallError

logger = logging.getLogger(__name__)

# Truncate tool stderr in error messages
MAX_STDERR_CHARS = 500


def check_tool_available(name: str) -> bool:
    """Return True if ``name`` is found on PATH."""
    return shutil.which(name) is not None


def run_command(
    args: Sequence[str],
    *,
    timeout: Optional[float] = None,
) -> str:
    """Run a command and return its stdout.

    Args:
        args: Command and arguments (no shell expansion)
        timeout: Optional timeout in seconds

    Returns:
        Captured standard output as text

    Raises:
        ExternalCallError: If the tool is missing, exits non-zero, or times out
    """
    cmd: List[str] = [str(a) for a in args]
    logger.debug("Running command: %s", " ".join(cmd))
    try:
        result = subprocess.run(  # nosec B603
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ExternalCallError(
            f"{cmd[0]} not found",
            target=cmd[0],
            suggestion=f"Install {cmd[0]} and make sure it is on PATH",
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise ExternalCallError(f"{cmd[0]} timed out after {timeout}s", target=cmd[0]) from exc

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()[:MAX_STDERR_CHARS]
        raise ExternalCallError(
            f"{cmd[0]} exited with status {result.returncode}: {stderr}", target=cmd[0]
        )
    if result.stderr:
        logger.debug("%s stderr: %s", cmd[0], result.stderr.strip()[:MAX_STDERR_CHARS])
    return result.stdout
