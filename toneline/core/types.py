from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import torch

# Sample buffers are 1-D float64 tensors, nominally in [-1, 1] (never clamped here).
SAMPLE_DTYPE = torch.float64


def empty_buffer() -> torch.Tensor:
    """Buffer every pipeline run starts from."""
    return torch.empty(0, dtype=SAMPLE_DTYPE)


def num_samples(duration: float, sample_rate: float) -> int:
    """Sample count for a render: truncating cast, never negative."""
    return max(0, int(duration * sample_rate))


@dataclass
class AnalysisResult:
    analyser: str       # component name, e.g. "peak"
    value: float
    index: int = -1     # stage position in the pipeline, -1 when standalone

    def to_dict(self) -> Dict[str, Any]:
        return {"analyser": self.analyser, "value": self.value, "index": self.index}


@dataclass
class RunResult:
    samples: torch.Tensor
    results: List[AnalysisResult] = field(default_factory=list)
    stages: List[Dict[str, Any]] = field(default_factory=list)

    def result_for(self, analyser: str) -> Optional[AnalysisResult]:
        """First collected result from the named analyser, if any."""
        for result in self.results:
            if result.analyser == analyser:
                return result
        return None
