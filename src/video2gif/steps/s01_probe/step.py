"""Step 01: Probe the input video with ffprobe."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, ClassVar

from pydantic import ValidationError

from video2gif.core.contracts import VideoMetadata
from video2gif.core.errors import ProbeFailure
from video2gif.core.step_base import BaseStep
from video2gif.utils.parsing import parse_fraction
from video2gif.utils.subprocess_utils import run_command
from .config import ProbeConfig
from .contracts import ProbeInput, ProbeOutput

logger = logging.getLogger(__name__)


def _binary_works(binary: str, timeout: float) -> bool:
    try:
        result = run_command([binary, "-version"], timeout=timeout, check=False)
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug(f"{binary} is not usable: {exc}")
        return False
    return result.returncode == 0


def check_engine(ffprobe_bin: str = "ffprobe", ffmpeg_bin: str = "ffmpeg", timeout: float = 60.0) -> bool:
    """Return True when both ffmpeg and ffprobe can be executed.

    Pass the same ``ffmpeg_bin`` the transcode step will run.
    """
    return all(_binary_works(binary, timeout) for binary in (ffmpeg_bin, ffprobe_bin))


def metadata_from_probe(probe: dict[str, Any], default_fps: float = 30.0) -> VideoMetadata:
    """Extract the first video stream's properties from ffprobe JSON output."""
    streams = probe.get("streams") or []
    video_stream = next((s for s in streams if s.get("codec_type") == "video"), None)
    if video_stream is None:
        raise ProbeFailure("No video stream found in file")

    duration = (probe.get("format") or {}).get("duration") or video_stream.get("duration")
    try:
        return VideoMetadata(
            duration_seconds=duration,
            width=video_stream.get("width"),
            height=video_stream.get("height"),
            native_fps=parse_fraction(video_stream.get("r_frame_rate")) or default_fps,
        )
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ProbeFailure(f"Failed to read video metadata: missing or invalid {fields}") from None


def probe_video(video_path: Path, config: ProbeConfig | None = None) -> VideoMetadata:
    """Run ffprobe on ``video_path`` and return its video metadata."""
    config = config or ProbeConfig()
    cmd = [
        config.ffprobe_bin,
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(video_path),
    ]
    try:
        result = run_command(cmd, timeout=config.timeout)
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"ffprobe exited with code {exc.returncode}"
        raise ProbeFailure(f"Failed to read video metadata: {detail}") from exc
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ProbeFailure(f"Failed to read video metadata: {exc}") from exc

    try:
        probe = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise ProbeFailure(f"Failed to read video metadata: {exc}") from exc

    metadata = metadata_from_probe(probe, default_fps=config.default_fps)
    logger.info(
        f"Probed {video_path.name}: {metadata.duration_seconds:.2f}s, "
        f"{metadata.width}x{metadata.height} @ {metadata.native_fps:.3f} fps"
    )
    return metadata


class ProbeStep(BaseStep[ProbeInput, ProbeOutput, ProbeConfig]):
    name: ClassVar[str] = "probe"
    input_type: ClassVar = ProbeInput
    output_type: ClassVar = ProbeOutput
    config_type: ClassVar = ProbeConfig

    def validate_inputs(self, inputs: ProbeInput) -> bool:
        if not inputs.video_path.is_file():
            logger.error(f"Video not found: {inputs.video_path}")
            return False
        return True

    def run(self, inputs: ProbeInput) -> ProbeOutput:
        metadata = probe_video(inputs.video_path, self.config)
        return ProbeOutput(video_path=inputs.video_path, metadata=metadata)
