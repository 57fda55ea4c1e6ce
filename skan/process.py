"""Helpers for running external programs."""

from __future__ import annotations

import subprocess
from typing import IO, Sequence

from .exceptions import ExternalToolError, ToolNotFoundError


def run_tool(
    command: Sequence[str], stdout: IO[bytes] | None = None
) -> subprocess.CompletedProcess:
    """Run command to completion and raise if it fails.

    When stdout is given the program's output is streamed into it (used for
    scanimage, which writes the image to stdout). Otherwise stdout is
    captured and returned as text.

    There is no timeout: a scan can legitimately take a long time.
    """
    tool = command[0]
    try:
        if stdout is not None:
            result = subprocess.run(
                list(command),
                stdout=stdout,
                stderr=subprocess.PIPE,
                check=False,
            )
            stderr = result.stderr.decode(errors="replace") if result.stderr else ""
        else:
            result = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                check=False,
            )
            stderr = result.stderr or ""
    except FileNotFoundError:
        raise ToolNotFoundError(tool)

    if result.returncode != 0:
        raise ExternalToolError(tool, result.returncode, stderr)
    return result


def launch_detached(command: Sequence[str]) -> subprocess.Popen:
    """Start command in its own session and return without waiting for it.

    The child keeps running after this process exits.
    """
    try:
        return subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError:
        raise ToolNotFoundError(command[0])
