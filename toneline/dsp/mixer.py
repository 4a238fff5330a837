"""
Sum of parallel source outputs, normalised by the number of source children.
Layers shorter than the mix are zero-padded; longer ones are truncated.
"""
from typing import List

import torch

from toneline.core.types import SAMPLE_DTYPE


# -----------------------------------------------------------------------------
# Source mixer
# -----------------------------------------------------------------------------

class SourceMixer:
    """
    Mix independently produced buffers into one of fixed length.
    The divisor is supplied by the caller: the count of source children,
    not the count of layers added.
    """

    def __init__(self, length: int):
        self.length = length
        self._layers: List[torch.Tensor] = []

    def add(self, audio: torch.Tensor) -> None:
        """Register a layer, fitted to the mix length."""
        layer = audio.view(-1).to(SAMPLE_DTYPE)
        n = layer.shape[-1]
        if n < self.length:
            layer = torch.nn.functional.pad(layer, (0, self.length - n))
        elif n > self.length:
            layer = layer[: self.length]
        self._layers.append(layer)

    def __len__(self) -> int:
        return len(self._layers)

    def mix(self, num_sources: int) -> torch.Tensor:
        """
        Sum all layers element-wise and divide by num_sources.
        num_sources == 0 leaves the sum unnormalised (all zeros in practice).
        """
        master = torch.zeros(self.length, dtype=SAMPLE_DTYPE)
        for layer in self._layers:
            master = master + layer
        if num_sources > 0:
            master = master / num_sources
        return master
