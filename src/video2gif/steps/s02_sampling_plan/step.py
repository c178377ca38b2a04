"""Step 02: Decide which instants of the source become GIF frames."""

from __future__ import annotations

import logging
import math
from typing import ClassVar

from video2gif.core.contracts import SamplingPlan
from video2gif.core.errors import RangeExhausted
from video2gif.core.step_base import BaseStep
from .config import SamplingPlanConfig
from .contracts import SamplingPlanInput, SamplingPlanOutput

logger = logging.getLogger(__name__)

# Slack for products like 1.2 * 30 that land a hair off an exact grid index.
_GRID_EPS = 1e-9


def plan_sampling(
    source_duration: float,
    range_start: float,
    requested_output_duration: float,
    output_fps: float,
    max_output_duration: float = 5.0,
) -> SamplingPlan:
    """Spread ``ceil(gif_seconds * fps)`` samples over ``[range_start, source_duration]``.

    The GIF length is capped at ``max_output_duration`` whatever was requested.
    The last sample may land slightly before the end of the source; that
    rounding shortfall is not corrected.

    Raises:
        RangeExhausted: ``range_start`` is at or past the end of the source,
            or the plan would contain no frames.
    """
    output_duration = min(requested_output_duration, max_output_duration)
    range_duration = source_duration - range_start
    if range_duration <= 0:
        raise RangeExhausted(
            f"Start time ({range_start:g}s) is beyond video duration ({source_duration:.2f}s)"
        )

    frame_count = math.ceil(output_duration * output_fps)
    if frame_count <= 0:
        raise RangeExhausted(
            f"No frames to sample for a {output_duration:g}s GIF at {output_fps:g} fps"
        )

    return SamplingPlan(
        range_start=range_start,
        range_end=source_duration,
        output_fps=output_fps,
        output_duration_seconds=output_duration,
        output_frame_count=frame_count,
        sample_interval_seconds=range_duration / frame_count,
    )


def estimate_selected_frames(plan: SamplingPlan, native_fps: float) -> int:
    """Count the frames the selection filter keeps on a constant-rate source.

    Source frames sit at ``k / native_fps``. The first frame at or after
    ``range_start`` is kept, then every ``ceil(interval * native_fps)``-th
    frame up to ``range_end``, so the count is computed from frame indices
    without visiting each frame. It can differ slightly from
    ``plan.output_frame_count`` because selection snaps to the timestamps
    the source exposes.
    """
    first = math.ceil(plan.range_start * native_fps - _GRID_EPS)
    last = math.floor(plan.range_end * native_fps + _GRID_EPS)
    if last < first:
        return 0
    stride = max(1, math.ceil(plan.sample_interval_seconds * native_fps - _GRID_EPS))
    return (last - first) // stride + 1


class SamplingPlanStep(BaseStep[SamplingPlanInput, SamplingPlanOutput, SamplingPlanConfig]):
    name: ClassVar[str] = "sampling_plan"
    input_type: ClassVar = SamplingPlanInput
    output_type: ClassVar = SamplingPlanOutput
    config_type: ClassVar = SamplingPlanConfig

    def validate_inputs(self, inputs: SamplingPlanInput) -> bool:
        # Range exhaustion is reported by plan_sampling with its own message.
        return True

    def run(self, inputs: SamplingPlanInput) -> SamplingPlanOutput:
        plan = plan_sampling(
            source_duration=inputs.metadata.duration_seconds,
            range_start=inputs.range_start,
            requested_output_duration=inputs.requested_duration,
            output_fps=inputs.output_fps,
            max_output_duration=self.config.max_output_duration,
        )
        estimated = estimate_selected_frames(plan, inputs.metadata.native_fps)
        logger.info(
            f"Sampling {plan.range_duration:.2f}s into {plan.output_duration_seconds:g}s: "
            f"{plan.output_frame_count} frames, one every {plan.sample_interval_seconds:.3f}s "
            f"(~{estimated} expected at {inputs.metadata.native_fps:.3f} fps)"
        )
        return SamplingPlanOutput(plan=plan, estimated_frames=estimated)
