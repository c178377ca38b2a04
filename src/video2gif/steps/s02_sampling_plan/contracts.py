"""I/O contracts for Step 02: Sampling plan."""

from pydantic import BaseModel, Field

from video2gif.core.contracts import SamplingPlan, VideoMetadata


class SamplingPlanInput(BaseModel):
    metadata: VideoMetadata = Field(..., description="Probed source properties")
    range_start: float = Field(0.0, ge=0, description="Sampling start offset in seconds")
    requested_duration: float = Field(5.0, gt=0, description="Requested GIF length in seconds")
    output_fps: float = Field(10.0, gt=0, le=60, description="GIF frame rate")


class SamplingPlanOutput(BaseModel):
    plan: SamplingPlan
    estimated_frames: int = Field(..., ge=0, description="Frames expected to pass the selection filter")
