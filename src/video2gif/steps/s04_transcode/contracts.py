"""I/O contracts for Step 04: Transcode to GIF."""

from pathlib import Path

from pydantic import BaseModel, Field


class TranscodeInput(BaseModel):
    input_path: Path = Field(..., description="Source video")
    output_path: Path = Field(..., description="GIF to write")
    filter_graph: str = Field(..., min_length=1, description="ffmpeg -filter_complex argument")
    overwrite: bool = Field(False, description="Replace an existing output file")
    expected_seconds: float = Field(5.0, gt=0, description="Expected GIF length, used for progress")


class TranscodeOutput(BaseModel):
    output_path: Path
    size_bytes: int = Field(..., ge=0)
