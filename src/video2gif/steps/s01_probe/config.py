"""Configuration for Step 01: Media probe."""

from pydantic import BaseModel, Field


class ProbeConfig(BaseModel):
    ffprobe_bin: str = Field("ffprobe", description="ffprobe executable name or path")
    timeout: float = Field(60.0, gt=0, description="Seconds to wait for ffprobe")
    default_fps: float = Field(30.0, gt=0, description="Frame rate used when r_frame_rate is unparseable")
