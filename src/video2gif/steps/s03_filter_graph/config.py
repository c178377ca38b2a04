"""Configuration for Step 03: Filter graph."""

from typing import Literal

from pydantic import BaseModel, Field


class FilterGraphConfig(BaseModel):
    stats_mode: Literal["full", "diff", "single"] = Field(
        "full", description="palettegen statistics mode"
    )
