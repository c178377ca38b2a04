"""Configuration for Step 04: Transcode to GIF."""

from pydantic import BaseModel, Field


class TranscodeConfig(BaseModel):
    ffmpeg_bin: str = Field("ffmpeg", description="ffmpeg executable name or path")
    vsync: str = Field("vfr", description="Output frame sync mode; vfr keeps only selected frames")
    loglevel: str = Field("error", description="ffmpeg -loglevel value")
