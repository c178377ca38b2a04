"""Subprocess runners for the external media engine (ffmpeg, ffprobe)."""

from __future__ import annotations

import logging
import subprocess
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import IO, cast

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = 60,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command to completion with logging and error handling."""
    cmd_str = " ".join(cmd)
    logger.info(f"Running: {cmd_str}")

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )

    if result.stdout:
        logger.debug(f"stdout: {result.stdout[-500:]}")
    if result.stderr:
        logger.debug(f"stderr: {result.stderr[-500:]}")

    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, cmd_str, result.stdout, result.stderr
        )
    return result


def stream_command(
    cmd: list[str],
    on_line: Callable[[str], None],
    cwd: Path | None = None,
    tail_lines: int = 20,
) -> tuple[int, list[str]]:
    """Run a long-lived command, handing each output line to ``on_line``.

    stderr is merged into stdout so a chatty process cannot block on a full
    pipe. Returns the exit code and the last ``tail_lines`` lines of output.
    """
    cmd_str = " ".join(cmd)
    logger.info(f"Streaming: {cmd_str}")

    tail: deque[str] = deque(maxlen=tail_lines)
    with subprocess.Popen(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        bufsize=1,
    ) as proc:
        for raw in cast(IO[str], proc.stdout):
            line = raw.rstrip("\r\n")
            if not line:
                continue
            tail.append(line)
            on_line(line)
        returncode = proc.wait()

    logger.debug(f"exit code {returncode}, last output: {list(tail)[-5:]}")
    return returncode, list(tail)
