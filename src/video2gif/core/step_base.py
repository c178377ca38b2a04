"""Base class for all conversion steps.

Every step declares typed Input, Output, Config via Pydantic models, so the
pipeline runner can chain probe -> plan -> filter graph -> transcode with
validated hand-offs between them.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

from .contracts import StepMeta
from .errors import InvalidOption

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for conversion steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: input_type, output_type, config_type
    3. Implement run() and validate_inputs()

    Example:
        class SamplingPlanStep(BaseStep[SamplingPlanInput, SamplingPlanOutput, SamplingPlanConfig]):
            input_type = SamplingPlanInput
            output_type = SamplingPlanOutput
            config_type = SamplingPlanConfig

            def run(self, inputs: SamplingPlanInput) -> SamplingPlanOutput: ...
            def validate_inputs(self, inputs: SamplingPlanInput) -> bool: ...
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT | None = None):
        self.config = config if config is not None else self.config_type()
        self.meta: StepMeta | None = None

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that the inputs can be processed by this step."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.name or self.__class__.__name__
        logger.info(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise InvalidOption(f"[{step_name}] Input validation failed")

        logger.info(f"[{step_name}] Starting...")
        t0 = time.time()
        result = self.run(inputs)
        elapsed = time.time() - t0
        logger.info(f"[{step_name}] Done in {elapsed:.1f}s")
        self.meta = StepMeta(
            step_name=step_name,
            elapsed_seconds=elapsed,
            params=self.config.model_dump(mode="json"),
        )
        return result
