"""Step 04: Run ffmpeg to render the GIF, reporting progress as it goes."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import ClassVar

from video2gif.core.errors import TranscodeFailure
from video2gif.core.step_base import BaseStep
from video2gif.utils.parsing import parse_time
from video2gif.utils.subprocess_utils import stream_command
from .config import TranscodeConfig
from .contracts import TranscodeInput, TranscodeOutput

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

# Lines written by `-progress pipe:1`, e.g. "out_time_us=1234567"
_PROGRESS_LINE_RE = re.compile(r"^([a-z0-9_]+)=(\S*)$")


def build_transcode_command(
    input_path: Path,
    output_path: Path,
    filter_graph: str,
    overwrite: bool = False,
    config: TranscodeConfig | None = None,
) -> list[str]:
    config = config or TranscodeConfig()
    return [
        config.ffmpeg_bin,
        "-hide_banner",
        "-loglevel", config.loglevel,
        "-nostats",
        "-i", str(input_path),
        "-filter_complex", filter_graph,
        "-vsync", config.vsync,
        "-f", "gif",
        "-y" if overwrite else "-n",
        "-progress", "pipe:1",
        str(output_path),
    ]


def progress_seconds(key: str, value: str) -> float | None:
    """Output position in seconds from one ``-progress`` key/value pair."""
    try:
        if key in ("out_time_us", "out_time_ms"):
            # Both keys carry microseconds.
            return int(value) / 1_000_000
        if key == "out_time":
            return parse_time(value)
    except ValueError:
        return None
    return None


def clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))


def transcode(
    input_path: Path,
    output_path: Path,
    filter_graph: str,
    overwrite: bool = False,
    expected_seconds: float = 5.0,
    on_progress: ProgressCallback | None = None,
    config: TranscodeConfig | None = None,
) -> Path:
    """Render ``input_path`` through ``filter_graph`` into a GIF at ``output_path``.

    ``on_progress`` receives percentages in [0, 100] measured against
    ``expected_seconds`` of output; 100 is always reported on success. A
    partially written file is left in place on failure.

    Raises:
        TranscodeFailure: ffmpeg could not be started or exited non-zero.
    """
    cmd = build_transcode_command(input_path, output_path, filter_graph, overwrite, config)
    diagnostics: list[str] = []

    def handle_line(line: str) -> None:
        match = _PROGRESS_LINE_RE.match(line)
        if match is None:
            diagnostics.append(line)
            return
        if on_progress is None:
            return
        seconds = progress_seconds(match.group(1), match.group(2))
        if seconds is not None:
            on_progress(clamp_percent(seconds / expected_seconds * 100))

    try:
        returncode, _ = stream_command(cmd, handle_line)
    except OSError as exc:
        raise TranscodeFailure(f"Conversion failed: {exc}") from exc

    if returncode != 0:
        detail = " | ".join(diagnostics[-3:]) or f"ffmpeg exited with code {returncode}"
        raise TranscodeFailure(f"Conversion failed: {detail}")

    if on_progress is not None:
        on_progress(100.0)
    return output_path


class TranscodeStep(BaseStep[TranscodeInput, TranscodeOutput, TranscodeConfig]):
    name: ClassVar[str] = "transcode"
    input_type: ClassVar = TranscodeInput
    output_type: ClassVar = TranscodeOutput
    config_type: ClassVar = TranscodeConfig

    def __init__(self, config: TranscodeConfig | None = None, on_progress: ProgressCallback | None = None):
        super().__init__(config)
        self.on_progress = on_progress

    def validate_inputs(self, inputs: TranscodeInput) -> bool:
        if not inputs.input_path.is_file():
            logger.error(f"Video not found: {inputs.input_path}")
            return False
        if inputs.output_path.exists() and not inputs.overwrite:
            logger.error(f"Output exists and overwrite is off: {inputs.output_path}")
            return False
        return True

    def run(self, inputs: TranscodeInput) -> TranscodeOutput:
        output_path = transcode(
            input_path=inputs.input_path,
            output_path=inputs.output_path,
            filter_graph=inputs.filter_graph,
            overwrite=inputs.overwrite,
            expected_seconds=inputs.expected_seconds,
            on_progress=self.on_progress,
            config=self.config,
        )
        if not output_path.is_file():
            raise TranscodeFailure(f"Conversion failed: ffmpeg wrote no output to {output_path}")
        size = output_path.stat().st_size
        logger.info(f"Wrote {output_path} ({size} bytes)")
        return TranscodeOutput(output_path=output_path, size_bytes=size)
