import logging
from typing import Optional

import torch

from toneline.core.errors import EmptyBufferError, SpecGrammarError
from toneline.pipeline.parser import split_component_spec
from toneline.components.base import Analyser

logger = logging.getLogger(__name__)


class PeakAnalyser(Analyser):
    """
    Reports the largest sample value, with the running maximum seeded at 0.0.
    A buffer of only negative samples therefore reports 0.0, not its true maximum.
    """
    tag = "peak"

    def __init__(self):
        self._last_peak: Optional[float] = None
        logger.debug("Creating new peak analyser")

    @classmethod
    def from_spec(cls, spec: str) -> "PeakAnalyser":
        tag, section = split_component_spec(spec)
        if tag != cls.tag:
            raise SpecGrammarError(f"Not a peak spec: {spec}")
        if section is not None:
            raise SpecGrammarError(f"peak takes no params: {spec}")
        return cls()

    def analyze(self, samples: torch.Tensor) -> float:
        peak = 0.0
        if samples.numel() > 0:
            peak = max(0.0, float(torch.max(samples)))
        self._last_peak = peak
        logger.info("Peak value found: %.6f", peak)
        return peak

    def get_result(self) -> Optional[float]:
        result, self._last_peak = self._last_peak, None
        return result

    def process(self, buffer: torch.Tensor, duration: float, sample_rate: float) -> torch.Tensor:
        if buffer.numel() == 0:
            raise EmptyBufferError("Analyser requires input samples")
        self.analyze(buffer)
        return buffer
