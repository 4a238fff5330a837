import logging
from dataclasses import dataclass
from typing import List

import torch

from toneline.core.errors import EmptyBufferError, SpecGrammarError
from toneline.core.params import parse_kv_params
from toneline.params.schema import DEFAULT_LEVEL, PARAM_SCHEMA
from toneline.pipeline.parser import split_component_spec, split_params
from toneline.components.base import Processor

logger = logging.getLogger(__name__)


@dataclass
class VolumeParams:
    level: float = DEFAULT_LEVEL

    @classmethod
    def parse(cls, params: List[str]) -> "VolumeParams":
        values = parse_kv_params(params, PARAM_SCHEMA["volume"], "volume")
        return cls(level=values["level"])


class VolumeProcessor(Processor):
    """
    Linear gain. Negative levels invert phase; levels above 1 may push samples
    past full scale (clipping is left to the encoder).
    """
    tag = "volume"

    def __init__(self, volume: float = DEFAULT_LEVEL):
        self.volume = float(volume)
        logger.debug("Creating volume processor with level: %.2f", self.volume)

    @classmethod
    def from_spec(cls, spec: str) -> "VolumeProcessor":
        tag, section = split_component_spec(spec)
        if tag != cls.tag:
            raise SpecGrammarError(f"Not a volume spec: {spec}")
        params = VolumeParams.parse(split_params(section))
        logger.info("Volume processor created with level: %.2f", params.level)
        return cls(params.level)

    @property
    def name(self) -> str:
        return f"volume:level={self.volume:.2f}"

    def apply(self, samples: torch.Tensor) -> None:
        logger.debug("Applying volume %.2f to %d samples", self.volume, samples.shape[-1])
        samples.mul_(self.volume)

    def process(self, buffer: torch.Tensor, duration: float, sample_rate: float) -> torch.Tensor:
        if buffer.numel() == 0:
            raise EmptyBufferError("Processor requires input samples")
        self.apply(buffer)
        return buffer
