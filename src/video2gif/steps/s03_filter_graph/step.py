"""Step 03: Build the frame selection / retiming / palette filter graph."""

from __future__ import annotations

import logging
from typing import ClassVar

from video2gif.core.contracts import QualityPreset, SamplingPlan, get_preset_settings
from video2gif.core.step_base import BaseStep
from .config import FilterGraphConfig
from .contracts import (
    FilterGraphInput,
    FilterGraphOutput,
    FilterSpec,
    PaletteSpec,
    ScaleTarget,
    SelectionPredicate,
    TimestampReset,
)

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render a number for an ffmpeg expression: ``60`` rather than ``60.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_filter_spec(
    plan: SamplingPlan,
    scale_width: int | None,
    source_width: int,
    preset: QualityPreset | str,
    stats_mode: str = "full",
) -> FilterSpec:
    """Translate a sampling plan and quality preset into a ``FilterSpec``.

    Without ``scale_width`` the GIF keeps the source width; the scale stage is
    emitted anyway so every graph has the same shape.

    Raises:
        UnknownQualityPreset: ``preset`` is not a known preset name.
    """
    settings = get_preset_settings(preset)
    return FilterSpec(
        selection=SelectionPredicate(
            range_start=plan.range_start,
            range_end=plan.range_end,
            min_gap_seconds=plan.sample_interval_seconds,
        ),
        timestamp_reset=TimestampReset(output_fps=plan.output_fps),
        scale=ScaleTarget(
            width=scale_width or source_width,
            algorithm=settings.scale_algorithm,
        ),
        palette=PaletteSpec(stats_mode=stats_mode, dither_mode=settings.dither_mode),
    )


def to_ffmpeg_filter(spec: FilterSpec) -> str:
    """Serialize ``spec`` as an ffmpeg ``-filter_complex`` graph.

    The stream is split so palettegen and paletteuse both see every frame.
    """
    sel = spec.selection
    select = (
        f"select='gte(t\\,{format_number(sel.range_start)})"
        f"*lte(t\\,{format_number(sel.range_end)})"
        f"*(isnan(prev_selected_t)+gte(t-prev_selected_t\\,{format_number(sel.min_gap_seconds)}))'"
    )
    setpts = f"setpts=N/{format_number(spec.timestamp_reset.output_fps)}/TB"
    scale = f"scale={spec.scale.width}:-1:flags={spec.scale.algorithm}"
    palette = (
        f"split[s0][s1];[s0]palettegen=stats_mode={spec.palette.stats_mode}[p];"
        f"[s1][p]paletteuse=dither={spec.palette.dither_mode}"
    )
    return ",".join([select, setpts, scale, palette])


class FilterGraphStep(BaseStep[FilterGraphInput, FilterGraphOutput, FilterGraphConfig]):
    name: ClassVar[str] = "filter_graph"
    input_type: ClassVar = FilterGraphInput
    output_type: ClassVar = FilterGraphOutput
    config_type: ClassVar = FilterGraphConfig

    def validate_inputs(self, inputs: FilterGraphInput) -> bool:
        return True

    def run(self, inputs: FilterGraphInput) -> FilterGraphOutput:
        spec = build_filter_spec(
            plan=inputs.plan,
            scale_width=inputs.scale_width,
            source_width=inputs.source_width,
            preset=inputs.quality,
            stats_mode=self.config.stats_mode,
        )
        graph = to_ffmpeg_filter(spec)
        logger.debug(f"Filter graph: {graph}")
        return FilterGraphOutput(spec=spec, filter_graph=graph)
