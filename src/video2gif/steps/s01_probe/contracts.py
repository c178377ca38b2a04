"""I/O contracts for Step 01: Media probe."""

from pathlib import Path

from pydantic import BaseModel, Field

from video2gif.core.contracts import VideoMetadata


class ProbeInput(BaseModel):
    video_path: Path = Field(..., description="Path to input video file (.mp4 or .mov)")


class ProbeOutput(BaseModel):
    video_path: Path = Field(..., description="Probed video file")
    metadata: VideoMetadata = Field(..., description="First video stream properties")
