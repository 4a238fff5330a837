"""
Sample-indexed oscillators.
Phase is computed from the integer sample index (i / sample_rate), so output
is deterministic and always starts at phase 0.
"""

import torch
import numpy as np

from toneline.core.types import SAMPLE_DTYPE, num_samples


class Oscillator:
    @staticmethod
    def sine(frequency: float, duration: float, sample_rate: float) -> torch.Tensor:
        """
        Generates a sine wave: sin(2*pi*f*i/sample_rate) for i in [0, count).

        Args:
            frequency: Frequency (Hz)
            duration: Duration in seconds
            sample_rate: Sample rate (Hz)

        Returns:
            float64 tensor of int(duration * sample_rate) samples
        """
        n = num_samples(duration, sample_rate)
        t = torch.arange(n, dtype=SAMPLE_DTYPE) / sample_rate
        return torch.sin(2.0 * np.pi * frequency * t)

    @staticmethod
    def square(frequency: float, duration: float, sample_rate: float) -> torch.Tensor:
        """
        Generates a square wave from an integer period.
        period = int(sample_rate / frequency); high for the first half of each period.
        A zero period (frequency 0, or |frequency| > sample_rate) holds phase at 0,
        giving a constant +1.0. Periods longer than 2*count are clamped to
        +-2*count, which leaves every phase on the same side of 0.5.
        """
        n = num_samples(duration, sample_rate)
        ratio = sample_rate / frequency if frequency != 0 else 0.0
        period = int(ratio) if np.isfinite(ratio) else 0
        if abs(period) > 2 * n:
            period = 2 * n if period > 0 else -2 * n
        if period == 0:
            return torch.ones(n, dtype=SAMPLE_DTYPE)
        i = torch.arange(n, dtype=torch.int64)
        phase = torch.remainder(i, period).to(SAMPLE_DTYPE) / period
        return torch.where(
            phase < 0.5,
            torch.ones(n, dtype=SAMPLE_DTYPE),
            -torch.ones(n, dtype=SAMPLE_DTYPE),
        )
