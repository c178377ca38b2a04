"""I/O contracts for Step 03: Filter graph.

A ``FilterSpec`` is the engine-neutral description of the frame selection,
retiming, scaling and palette stages. Serializing it for a particular engine
is a separate concern (see ``step.to_ffmpeg_filter``).
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from video2gif.core.contracts import QualityPreset, SamplingPlan


class SelectionPredicate(BaseModel):
    """Greedy forward scan keeping frames at least ``min_gap_seconds`` apart."""

    model_config = ConfigDict(frozen=True)

    range_start: float = Field(..., ge=0)
    range_end: float = Field(..., gt=0)
    min_gap_seconds: float = Field(..., gt=0)

    def apply(self, timestamps: Iterable[float]) -> list[float]:
        """Return the timestamps a decoder emitting ``timestamps`` in order would keep."""
        selected: list[float] = []
        previous: float | None = None
        for t in timestamps:
            t = float(t)
            if t < self.range_start or t > self.range_end:
                continue
            if previous is None or t - previous >= self.min_gap_seconds:
                selected.append(t)
                previous = t
        return selected


class TimestampReset(BaseModel):
    """Renumber selected frames to play back at a constant rate."""

    model_config = ConfigDict(frozen=True)

    output_fps: float = Field(..., gt=0)

    def presentation_time(self, index: int) -> float:
        return index / self.output_fps


class ScaleTarget(BaseModel):
    """Resize to ``width``; height follows the source aspect ratio."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    algorithm: str = "lanczos"


class PaletteSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    stats_mode: str = "full"
    dither_mode: str


class FilterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    selection: SelectionPredicate
    timestamp_reset: TimestampReset
    scale: ScaleTarget
    palette: PaletteSpec


class FilterGraphInput(BaseModel):
    plan: SamplingPlan
    source_width: int = Field(..., gt=0, description="Width of the probed video stream")
    scale_width: int | None = Field(None, gt=0, description="Requested GIF width (None = source width)")
    quality: QualityPreset = QualityPreset.HIGH


class FilterGraphOutput(BaseModel):
    spec: FilterSpec
    filter_graph: str = Field(..., description="ffmpeg -filter_complex argument")
