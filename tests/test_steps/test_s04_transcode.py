"""Tests for S04: Transcode step."""

from pathlib import Path

import pytest

from video2gif.core.errors import InvalidOption, TranscodeFailure
from video2gif.steps.s04_transcode.config import TranscodeConfig
from video2gif.steps.s04_transcode.contracts import TranscodeInput, TranscodeOutput
from video2gif.steps.s04_transcode.step import (
    TranscodeStep,
    build_transcode_command,
    clamp_percent,
    progress_seconds,
    transcode,
)

GRAPH = "select='gte(t\\,0)',setpts=N/10/TB"


class TestTranscodeContracts:
    def test_output_schema(self):
        schema = TranscodeOutput.model_json_schema()
        assert "output_path" in schema["properties"]
        assert "size_bytes" in schema["properties"]

    def test_config_defaults(self):
        cfg = TranscodeConfig()
        assert cfg.ffmpeg_bin == "ffmpeg"
        assert cfg.vsync == "vfr"
        assert cfg.loglevel == "error"


class TestBuildCommand:
    def test_no_overwrite(self, tmp_path: Path):
        cmd = build_transcode_command(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH)
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-i") + 1] == str(tmp_path / "in.mp4")
        assert cmd[cmd.index("-filter_complex") + 1] == GRAPH
        assert cmd[cmd.index("-vsync") + 1] == "vfr"
        assert cmd[cmd.index("-f") + 1] == "gif"
        assert cmd[cmd.index("-progress") + 1] == "pipe:1"
        assert "-n" in cmd and "-y" not in cmd
        assert cmd[-1] == str(tmp_path / "out.gif")

    def test_overwrite(self, tmp_path: Path):
        cmd = build_transcode_command(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH, overwrite=True)
        assert "-y" in cmd and "-n" not in cmd


class TestProgressParsing:
    @pytest.mark.parametrize("key, value, expected", [
        ("out_time_us", "2500000", 2.5),
        ("out_time_ms", "2500000", 2.5),
        ("out_time", "00:00:02.500000", 2.5),
        ("out_time_us", "N/A", None),
        ("out_time", "N/A", None),
        ("frame", "12", None),
        ("progress", "continue", None),
    ])
    def test_progress_seconds(self, key, value, expected):
        assert progress_seconds(key, value) == expected

    def test_clamp(self):
        assert clamp_percent(-3) == 0
        assert clamp_percent(42.5) == 42.5
        assert clamp_percent(250) == 100


class TestTranscode:
    def test_progress_is_clamped_and_completes(self, tmp_path: Path, fake_engine):
        fake_engine.progress_lines = [
            "out_time_us=-40000",
            "out_time_us=N/A",
            "out_time_us=2000000",
            "out_time_us=9000000",
            "progress=end",
        ]
        seen = []
        out = transcode(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH, expected_seconds=4.0, on_progress=seen.append)
        assert out == tmp_path / "out.gif"
        assert seen == [0.0, 50.0, 100.0, 100.0]

    def test_without_callback(self, tmp_path: Path, fake_engine):
        assert transcode(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH).exists()

    def test_failure_reports_diagnostics(self, tmp_path: Path, fake_engine):
        fake_engine.transcode_returncode = 1
        fake_engine.progress_lines = ["out_time_us=1000000"]
        seen = []
        with pytest.raises(TranscodeFailure, match="Conversion failed: Error while filtering"):
            transcode(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH, on_progress=seen.append)
        assert seen == [20.0]

    def test_failure_without_progress(self, tmp_path: Path, fake_engine):
        fake_engine.transcode_returncode = 1
        fake_engine.progress_lines = []
        with pytest.raises(TranscodeFailure):
            transcode(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH)

    def test_engine_cannot_start(self, tmp_path: Path, monkeypatch):
        def missing(cmd, on_line, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr("video2gif.steps.s04_transcode.step.stream_command", missing)
        with pytest.raises(TranscodeFailure, match="No such file"):
            transcode(tmp_path / "in.mp4", tmp_path / "out.gif", GRAPH)


class TestTranscodeStep:
    def _input(self, video_file: Path, **kwargs) -> TranscodeInput:
        return TranscodeInput(
            input_path=video_file,
            output_path=video_file.with_suffix(".gif"),
            filter_graph=GRAPH,
            **kwargs,
        )

    def test_execute(self, video_file: Path, fake_engine):
        seen = []
        step = TranscodeStep(TranscodeConfig(), on_progress=seen.append)
        output = step.execute(self._input(video_file))
        assert output.output_path.exists()
        assert output.size_bytes == output.output_path.stat().st_size
        assert seen[-1] == 100.0

    def test_existing_output_rejected(self, video_file: Path, fake_engine):
        video_file.with_suffix(".gif").write_bytes(b"GIF89a")
        step = TranscodeStep()
        assert step.validate_inputs(self._input(video_file)) is False
        with pytest.raises(InvalidOption, match="Input validation failed"):
            step.execute(self._input(video_file))
        assert fake_engine.commands == []

    def test_existing_output_overwritten(self, video_file: Path, fake_engine):
        video_file.with_suffix(".gif").write_bytes(b"GIF89a")
        output = TranscodeStep().execute(self._input(video_file, overwrite=True))
        assert output.size_bytes > 6
        assert "-y" in fake_engine.commands[-1]

    def test_success_without_file(self, video_file: Path, monkeypatch):
        monkeypatch.setattr(
            "video2gif.steps.s04_transcode.step.stream_command",
            lambda cmd, on_line, **kwargs: (0, []),
        )
        with pytest.raises(TranscodeFailure, match="wrote no output"):
            TranscodeStep().execute(self._input(video_file))
