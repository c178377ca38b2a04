"""Conversion orchestrator: validates options and runs probe -> plan -> filter graph -> transcode."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .contracts import (
    SUPPORTED_FORMATS,
    ConversionOptions,
    SamplingPlan,
    StepMeta,
    VideoMetadata,
    get_preset_settings,
)
from .errors import InputNotFound, InvalidOption, OutputExists, UnsupportedFormat
from video2gif.steps.s01_probe.config import ProbeConfig
from video2gif.steps.s01_probe.contracts import ProbeInput
from video2gif.steps.s01_probe.step import ProbeStep
from video2gif.steps.s02_sampling_plan.config import SamplingPlanConfig
from video2gif.steps.s02_sampling_plan.contracts import SamplingPlanInput
from video2gif.steps.s02_sampling_plan.step import SamplingPlanStep
from video2gif.steps.s03_filter_graph.config import FilterGraphConfig
from video2gif.steps.s03_filter_graph.contracts import FilterGraphInput
from video2gif.steps.s03_filter_graph.step import FilterGraphStep
from video2gif.steps.s04_transcode.config import TranscodeConfig
from video2gif.steps.s04_transcode.contracts import TranscodeInput
from video2gif.steps.s04_transcode.step import TranscodeStep
from video2gif.utils.parsing import parse_time

logger = logging.getLogger(__name__)

PlanCallback = Callable[[VideoMetadata, SamplingPlan, int], None]
ProgressCallback = Callable[[float], None]

# User-facing messages for option fields rejected by ConversionOptions
_OPTION_MESSAGES = {
    "duration": "Duration must be a positive number",
    "fps": "FPS must be between 1 and 60",
    "width": "Width must be a positive number",
    "name": "Output name must not be empty",
}


class PipelineConfig(BaseModel):
    """Top-level configuration, optionally loaded from a YAML file."""

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    sampling: SamplingPlanConfig = Field(default_factory=SamplingPlanConfig)
    filter_graph: FilterGraphConfig = Field(default_factory=FilterGraphConfig)
    transcode: TranscodeConfig = Field(default_factory=TranscodeConfig)


class ConversionResult(BaseModel):
    output_path: Path
    size_bytes: int
    metadata: VideoMetadata
    plan: SamplingPlan
    estimated_frames: int
    filter_graph: str
    steps: list[StepMeta] = Field(default_factory=list)

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


def load_pipeline_config(config_path: Path | None = None) -> PipelineConfig:
    """Load and validate a YAML config; no path means all defaults."""
    if config_path is None:
        return PipelineConfig()
    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as exc:
        raise InvalidOption(f"Cannot read config file {config_path}: {exc.strerror}") from exc
    except yaml.YAMLError as exc:
        raise InvalidOption(f"Invalid YAML in config file {config_path}: {exc}") from exc
    try:
        return PipelineConfig(**raw)
    except (TypeError, ValidationError) as exc:
        raise InvalidOption(f"Invalid config file {config_path}: {exc}") from exc


def validate_input_path(input_path: Path) -> Path:
    """Resolve the input video and check it exists with a supported extension."""
    path = Path(input_path).resolve()
    if not path.is_file():
        raise InputNotFound(f"Input file not found: {path}")
    ext = path.suffix.lower()
    if ext not in SUPPORTED_FORMATS:
        raise UnsupportedFormat(
            f'Unsupported format "{ext}". Supported: {", ".join(SUPPORTED_FORMATS)}'
        )
    return path


def build_options(
    input_path: Path,
    output_dir: Path | None = None,
    name: str | None = None,
    start: str | float = "0",
    duration: str | float = 5,
    fps: str | int = 10,
    width: str | int | None = None,
    quality: str = "high",
    overwrite: bool = False,
) -> ConversionOptions:
    """Validate raw option values into ``ConversionOptions``.

    The output directory defaults to the input's directory and the name to
    the input's stem.

    Raises:
        InputNotFound, UnsupportedFormat: the input file is unusable.
        UnknownQualityPreset, InvalidOption: an option is out of range.
        InvalidTimeFormat: ``start`` is not a valid time expression.
    """
    path = validate_input_path(input_path)
    get_preset_settings(quality)
    start_seconds = parse_time(start)

    try:
        return ConversionOptions(
            input_path=path,
            output_dir=Path(output_dir).resolve() if output_dir else path.parent,
            name=name or path.stem,
            start=start_seconds,
            duration=duration,
            fps=fps,
            width=width if width not in (None, "") else None,
            quality=quality,
            overwrite=overwrite,
        )
    except ValidationError as exc:
        field = str(exc.errors()[0]["loc"][0])
        raise InvalidOption(_OPTION_MESSAGES.get(field, f"Invalid value for {field}")) from None


def prepare_output(options: ConversionOptions) -> Path:
    """Create the output directory and refuse to clobber an existing GIF."""
    output_path = options.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.exists() and not options.overwrite:
        raise OutputExists(
            f"Output file already exists: {output_path} (use --overwrite to replace it)"
        )
    return output_path


def run_conversion(
    options: ConversionOptions,
    config: PipelineConfig | None = None,
    on_plan: PlanCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> ConversionResult:
    """Execute one conversion from validated options.

    ``on_plan`` is called once the sampling plan is known and before ffmpeg
    starts; ``on_progress`` receives transcode percentages.
    """
    config = config or PipelineConfig()
    output_path = prepare_output(options)
    logger.info(f"Converting {options.input_path} -> {output_path}")

    probe_step = ProbeStep(config.probe)
    probed = probe_step.execute(ProbeInput(video_path=options.input_path))
    metadata = probed.metadata

    plan_step = SamplingPlanStep(config.sampling)
    planned = plan_step.execute(SamplingPlanInput(
        metadata=metadata,
        range_start=options.start,
        requested_duration=options.duration,
        output_fps=options.fps,
    ))

    graph_step = FilterGraphStep(config.filter_graph)
    graph = graph_step.execute(FilterGraphInput(
        plan=planned.plan,
        source_width=metadata.width,
        scale_width=options.width,
        quality=options.quality,
    ))

    if on_plan is not None:
        on_plan(metadata, planned.plan, planned.estimated_frames)

    transcode_step = TranscodeStep(config.transcode, on_progress=on_progress)
    rendered = transcode_step.execute(TranscodeInput(
        input_path=options.input_path,
        output_path=output_path,
        filter_graph=graph.filter_graph,
        overwrite=options.overwrite,
        expected_seconds=planned.plan.output_frame_count / planned.plan.output_fps,
    ))

    steps = [s.meta for s in (probe_step, plan_step, graph_step, transcode_step) if s.meta]
    logger.info("Conversion complete.")
    return ConversionResult(
        output_path=rendered.output_path,
        size_bytes=rendered.size_bytes,
        metadata=metadata,
        plan=planned.plan,
        estimated_frames=planned.estimated_frames,
        filter_graph=graph.filter_graph,
        steps=steps,
    )
