"""
Oscillator sources: sine and square.
Both ignore the incoming buffer and replace it with freshly generated samples.
"""
import logging
from dataclasses import dataclass
from typing import List

import torch

from toneline.core.errors import SpecGrammarError
from toneline.core.params import parse_kv_params
from toneline.dsp.oscillators import Oscillator
from toneline.params.schema import DEFAULT_FREQ_HZ, PARAM_SCHEMA
from toneline.pipeline.parser import split_component_spec, split_params
from toneline.components.base import Source

logger = logging.getLogger(__name__)


def _params_for(tag: str, spec: str) -> List[str]:
    spec_tag, section = split_component_spec(spec)
    if spec_tag != tag:
        raise SpecGrammarError(f"Not a {tag} spec: {spec}")
    return split_params(section)


# -----------------------------------------------------------------------------
# Sine
# -----------------------------------------------------------------------------

@dataclass
class SineParams:
    freq: float = DEFAULT_FREQ_HZ

    @classmethod
    def parse(cls, params: List[str]) -> "SineParams":
        values = parse_kv_params(params, PARAM_SCHEMA["sine"], "sine")
        return cls(freq=values["freq"])


class SineWaveSource(Source):
    tag = "sine"

    def __init__(self, frequency: float = DEFAULT_FREQ_HZ):
        self.frequency = float(frequency)
        logger.debug("Creating sine source at %.2f Hz", self.frequency)

    @classmethod
    def from_spec(cls, spec: str) -> "SineWaveSource":
        params = SineParams.parse(_params_for(cls.tag, spec))
        return cls(params.freq)

    @property
    def name(self) -> str:
        return f"sine:freq={self.frequency:g}"

    def generate(self, duration: float, sample_rate: float) -> torch.Tensor:
        return generate_sine_wave(self.frequency, duration, sample_rate)


def generate_sine_wave(frequency: float, duration: float, sample_rate: float) -> torch.Tensor:
    return Oscillator.sine(frequency, duration, sample_rate)


# -----------------------------------------------------------------------------
# Square
# -----------------------------------------------------------------------------

@dataclass
class SquareParams:
    freq: float = DEFAULT_FREQ_HZ

    @classmethod
    def parse(cls, params: List[str]) -> "SquareParams":
        values = parse_kv_params(params, PARAM_SCHEMA["square"], "square")
        return cls(freq=values["freq"])


class SquareWaveSource(Source):
    tag = "square"

    def __init__(self, frequency: float = DEFAULT_FREQ_HZ):
        self.frequency = float(frequency)
        logger.debug("Creating square source at %.2f Hz", self.frequency)

    @classmethod
    def from_spec(cls, spec: str) -> "SquareWaveSource":
        params = SquareParams.parse(_params_for(cls.tag, spec))
        return cls(params.freq)

    @property
    def name(self) -> str:
        return f"square:freq={self.frequency:g}"

    def generate(self, duration: float, sample_rate: float) -> torch.Tensor:
        return generate_square_wave(self.frequency, duration, sample_rate)


def generate_square_wave(frequency: float, duration: float, sample_rate: float) -> torch.Tensor:
    return Oscillator.square(frequency, duration, sample_rate)
