"""Shared pytest fixtures for video2gif tests."""

import json
import subprocess
from pathlib import Path

import pytest

from video2gif.core.contracts import VideoMetadata

PROGRESS_LINES = [
    "frame=10",
    "out_time_us=1000000",
    "out_time=00:00:01.000000",
    "progress=continue",
    "frame=50",
    "out_time_us=5000000",
    "progress=end",
]


def make_probe_json(duration=60.0, width=1280, height=720, r_frame_rate="30/1") -> dict:
    return {
        "streams": [
            {"index": 0, "codec_type": "audio", "r_frame_rate": "0/0"},
            {
                "index": 1,
                "codec_type": "video",
                "width": width,
                "height": height,
                "r_frame_rate": r_frame_rate,
            },
        ],
        "format": {"duration": f"{duration:.6f}", "format_name": "mov,mp4,m4a,3gp,3g2,mj2"},
    }


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    """An input file with a supported extension (contents are never decoded)."""
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 64)
    return path


@pytest.fixture
def metadata() -> VideoMetadata:
    return VideoMetadata(duration_seconds=60.0, width=1280, height=720, native_fps=30.0)


class FakeEngine:
    """Stands in for ffprobe/ffmpeg; records every command it receives."""

    def __init__(self):
        self.available = True
        self.missing: set[str] = set()
        self.probe = make_probe_json()
        self.progress_lines = list(PROGRESS_LINES)
        self.transcode_returncode = 0
        self.commands: list[list[str]] = []

    def run_command(self, cmd, cwd=None, timeout=60, check=True):
        self.commands.append(cmd)
        if cmd[-1] == "-version":
            if not self.available or cmd[0] in self.missing:
                raise FileNotFoundError(cmd[0])
            return subprocess.CompletedProcess(cmd, 0, stdout="ffmpeg version 6.1", stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(self.probe), stderr="")

    def stream_command(self, cmd, on_line, cwd=None, tail_lines=20):
        self.commands.append(cmd)
        lines = list(self.progress_lines)
        if self.transcode_returncode == 0:
            Path(cmd[-1]).write_bytes(b"GIF89a" + b"\x00" * 1024)
        else:
            lines.append("Error while filtering: Invalid argument")
        for line in lines:
            on_line(line)
        return self.transcode_returncode, lines[-tail_lines:]


@pytest.fixture
def fake_engine(monkeypatch) -> FakeEngine:
    engine = FakeEngine()
    monkeypatch.setattr("video2gif.steps.s01_probe.step.run_command", engine.run_command)
    monkeypatch.setattr("video2gif.steps.s04_transcode.step.stream_command", engine.stream_command)
    return engine


@pytest.fixture
def probe_json():
    """Factory for ffprobe ``-print_format json`` output."""
    return make_probe_json
