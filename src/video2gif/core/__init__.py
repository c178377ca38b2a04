"""video2gif core: shared contracts, errors, base step, logging."""

from .step_base import BaseStep
from .contracts import (
    QUALITY_PRESETS,
    SUPPORTED_FORMATS,
    ConversionOptions,
    QualityPreset,
    SamplingPlan,
    StepMeta,
    VideoMetadata,
)
from .errors import Video2GifError
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "QUALITY_PRESETS",
    "SUPPORTED_FORMATS",
    "ConversionOptions",
    "QualityPreset",
    "SamplingPlan",
    "StepMeta",
    "VideoMetadata",
    "Video2GifError",
    "setup_logging",
]
