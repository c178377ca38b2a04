"""Configuration for Step 02: Sampling plan."""

from pydantic import BaseModel, Field


class SamplingPlanConfig(BaseModel):
    max_output_duration: float = Field(5.0, gt=0, description="Hard cap on GIF length in seconds")
