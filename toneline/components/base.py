"""
Component contract shared by every pipeline stage.

A component is created from its spec string, then driven by the pipeline via
process(buffer, duration, sample_rate), which returns the buffer the next stage
receives. Sources ignore the incoming buffer; processors and analysers require
a non-empty one.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import torch

from toneline.core.types import AnalysisResult
from toneline.qc.qc import stage_metrics


class Component(ABC):
    tag: str = ""
    component_type: str = "Component"

    @property
    def name(self) -> str:
        """Canonical spec string for this component."""
        return self.tag

    def is_source(self) -> bool:
        return False

    @abstractmethod
    def process(self, buffer: torch.Tensor, duration: float, sample_rate: float) -> torch.Tensor:
        """Run this stage; may mutate buffer in place or return a new one."""

    def get_samples(self, duration: float, sample_rate: float) -> Optional[torch.Tensor]:
        """Samples produced without an input buffer; None if this component cannot."""
        return None

    def take_result(self) -> Optional[AnalysisResult]:
        """Pending analysis result, cleared on retrieval. None for non-analysers."""
        return None

    def snapshot(
        self,
        input_samples: torch.Tensor,
        output_samples: torch.Tensor,
        index: int,
        total: int,
    ) -> Dict[str, Any]:
        """Diagnostic summary of one stage. The pipeline never interprets it."""
        return {
            "index": index,
            "total": total,
            "is_last": index == total,
            "name": self.name,
            "component_type": self.component_type,
            "input_samples": int(input_samples.shape[-1]),
            "output": stage_metrics(output_samples),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Source(Component):
    component_type = "Source"

    @abstractmethod
    def generate(self, duration: float, sample_rate: float) -> torch.Tensor:
        """Pure: produce int(duration * sample_rate) samples."""

    def is_source(self) -> bool:
        return True

    def get_samples(self, duration: float, sample_rate: float) -> Optional[torch.Tensor]:
        return self.generate(duration, sample_rate)

    def process(self, buffer: torch.Tensor, duration: float, sample_rate: float) -> torch.Tensor:
        return self.generate(duration, sample_rate)


class Processor(Component):
    component_type = "Processor"

    @abstractmethod
    def apply(self, samples: torch.Tensor) -> None:
        """Transform samples in place."""


class Analyser(Component):
    component_type = "Analyser"

    @abstractmethod
    def analyze(self, samples: torch.Tensor) -> Any:
        """Measure samples without mutating them; caches the result."""

    @abstractmethod
    def get_result(self) -> Optional[Any]:
        """Return the cached result and clear it."""

    def take_result(self) -> Optional[AnalysisResult]:
        value = self.get_result()
        if value is None:
            return None
        return AnalysisResult(analyser=self.name, value=value)
