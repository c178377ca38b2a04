"""CLI entry point for video2gif.

Usage:
    video2gif video.mp4                      # 5-second timelapse of the whole video
    video2gif video.mp4 -d 3 -r 15 -w 480    # 3 seconds, 15 FPS, 480px wide
    video2gif input.mov -o ./gifs -n clip -y
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn

from video2gif import __version__
from video2gif.core.contracts import ConversionOptions, SamplingPlan, VideoMetadata
from video2gif.core.errors import EngineUnavailable, Video2GifError
from video2gif.core.logging import setup_logging

app = typer.Typer(
    name="video2gif",
    help="Convert MP4 or MOV videos to timelapse GIFs showing the entire video progression.",
    add_completion=False,
)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

HOW_IT_WORKS = """\
How it works: the whole video, from --start to the end, is sampled evenly and
compressed into a short GIF (max 5 seconds).

Example: a 60-second video with the defaults (5s, 10 FPS) gives a 50-frame GIF,
sampling one frame every 1.2 seconds of video.

Examples:

  video2gif video.mp4

  video2gif video.mp4 -d 3 -r 15 -w 480 -q high

  video2gif video.mp4 -s 30

  video2gif input.mov -o ./gifs -n my-timelapse -y
"""


def _version_callback(value: bool) -> None:
    if value:
        console.print(__version__)
        raise typer.Exit()


def _fail(message: str) -> None:
    err_console.print(f"Error: {message}", style="red", markup=False, soft_wrap=True)
    raise typer.Exit(1)


def _print_summary(
    options: ConversionOptions, metadata: VideoMetadata, plan: SamplingPlan, estimated_frames: int
) -> None:
    console.print()
    console.print(f"Input: {options.input_path}", markup=False)
    console.print(f"Output: {options.output_path}", markup=False)
    console.print(
        f"Mode: Timelapse (sampling {plan.range_duration:.2f}s video "
        f"into {plan.output_duration_seconds:.2f}s GIF)"
    )
    console.print(
        f"Sampling: ~{plan.output_frame_count} frames from {plan.range_start:g}s "
        f"to {plan.range_end:.2f}s (~{estimated_frames} at {metadata.native_fps:.2f} fps source)"
    )
    console.print(f"Frame rate: {options.fps} FPS")
    console.print(f"Quality: {options.quality.value}")
    console.print()


@app.command(epilog=HOW_IT_WORKS)
def main(
    ctx: typer.Context,
    input_path: Optional[Path] = typer.Argument(None, metavar="INPUT", help="Input video file (MP4 or MOV)"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Output directory (default: same as input)"
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Output filename without extension (default: same as input)"
    ),
    start: str = typer.Option(
        "0", "--start", "-s", help="Start sampling from this timestamp (formats: SS, MM:SS, HH:MM:SS)"
    ),
    duration: str = typer.Option("5", "--duration", "-d", help="Output GIF duration in seconds (max 5)"),
    fps: str = typer.Option("10", "--fps", "-r", help="Frame rate (frames per second, 1-60)"),
    width: Optional[str] = typer.Option(
        None, "--width", "-w", help="Output width in pixels (height auto-calculated)"
    ),
    quality: str = typer.Option("high", "--quality", "-q", help="Quality preset: low, medium, high"),
    overwrite: bool = typer.Option(False, "--overwrite", "-y", help="Overwrite output file if it exists"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config for engine paths and limits"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Convert MP4 or MOV videos to timelapse GIFs showing the entire video progression."""
    from video2gif.core.pipeline_runner import build_options, load_pipeline_config, run_conversion
    from video2gif.steps.s01_probe.step import check_engine

    try:
        setup_logging(log_level)
        pipeline_cfg = load_pipeline_config(config)

        if not check_engine(
            pipeline_cfg.probe.ffprobe_bin,
            pipeline_cfg.transcode.ffmpeg_bin,
            timeout=pipeline_cfg.probe.timeout,
        ):
            raise EngineUnavailable(
                "FFmpeg is not installed or not found in PATH. "
                "Please install FFmpeg: https://ffmpeg.org/download.html"
            )

        if input_path is None:
            err_console.print("Error: Input video file is required.", style="red")
            typer.echo(ctx.get_help(), err=True)
            raise typer.Exit(1)

        options = build_options(
            input_path=input_path,
            output_dir=output_dir,
            name=name,
            start=start,
            duration=duration,
            fps=fps,
            width=width,
            quality=quality,
            overwrite=overwrite,
        )
    except Video2GifError as exc:
        _fail(str(exc))

    progress = Progress(
        TextColumn("Converting"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("| ETA:"),
        TimeRemainingColumn(),
        console=console,
    )
    task_id = progress.add_task("convert", total=100)

    def on_plan(metadata: VideoMetadata, plan: SamplingPlan, estimated_frames: int) -> None:
        _print_summary(options, metadata, plan, estimated_frames)
        progress.start()

    def on_progress(percent: float) -> None:
        progress.update(task_id, completed=round(percent))

    try:
        result = run_conversion(options, pipeline_cfg, on_plan=on_plan, on_progress=on_progress)
    except Video2GifError as exc:
        progress.stop()
        _fail(str(exc))
    progress.stop()

    console.print(f"\n✓ Timelapse GIF created successfully! ({result.size_mb:.2f} MB)", style="green")


if __name__ == "__main__":
    app()
