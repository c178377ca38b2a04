"""Common Pydantic models shared across conversion steps."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownQualityPreset

SUPPORTED_FORMATS: tuple[str, ...] = (".mp4", ".mov")


class QualityPreset(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PresetSettings(NamedTuple):
    scale_algorithm: str
    dither_mode: str


QUALITY_PRESETS: MappingProxyType[QualityPreset, PresetSettings] = MappingProxyType({
    QualityPreset.LOW: PresetSettings("lanczos", "none"),
    QualityPreset.MEDIUM: PresetSettings("lanczos", "bayer:bayer_scale=3"),
    QualityPreset.HIGH: PresetSettings("lanczos", "sierra2_4a"),
})


def get_preset_settings(preset: QualityPreset | str) -> PresetSettings:
    """Look up scale/dither settings for a preset name or member."""
    try:
        return QUALITY_PRESETS[QualityPreset(preset)]
    except ValueError:
        names = ", ".join(p.value for p in QualityPreset)
        raise UnknownQualityPreset(f'Invalid quality "{preset}". Use: {names}') from None


class StepMeta(BaseModel):
    """Timing and parameters recorded for every executed step."""

    step_name: str
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)


class VideoMetadata(BaseModel):
    """Properties of the first video stream, as reported by the prober."""

    model_config = ConfigDict(frozen=True)

    duration_seconds: float = Field(..., gt=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    native_fps: float = Field(30.0, gt=0, description="Source frame rate, 30 when unparseable")


class SamplingPlan(BaseModel):
    """Which span of the source is sampled and how densely.

    ``output_frame_count`` samples are spread over ``[range_start, range_end]``,
    one every ``sample_interval_seconds`` of source time.
    """

    model_config = ConfigDict(frozen=True)

    range_start: float = Field(..., ge=0)
    range_end: float = Field(..., gt=0)
    output_fps: float = Field(..., gt=0)
    output_duration_seconds: float = Field(..., gt=0)
    output_frame_count: int = Field(..., gt=0)
    sample_interval_seconds: float = Field(..., gt=0)

    @property
    def range_duration(self) -> float:
        return self.range_end - self.range_start


class ConversionOptions(BaseModel):
    """Validated user options for one conversion."""

    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_dir: Path
    name: str = Field(..., min_length=1)
    start: float = Field(0.0, ge=0, description="Range start in seconds")
    duration: float = Field(5.0, gt=0, allow_inf_nan=False, description="Requested GIF length")
    fps: int = Field(10, ge=1, le=60)
    width: int | None = Field(None, gt=0)
    quality: QualityPreset = QualityPreset.HIGH
    overwrite: bool = False

    @property
    def output_path(self) -> Path:
        return self.output_dir / f"{self.name}.gif"
