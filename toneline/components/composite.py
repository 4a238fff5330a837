"""
Parallel composite: runs child sources over the same duration/sample rate and
mixes them, dividing by the number of source children.
"""
import logging
from typing import List

import torch

from toneline.core.errors import SpecGrammarError
from toneline.core.types import num_samples
from toneline.dsp.mixer import SourceMixer
from toneline.pipeline.parser import parse_bracket_list, split_component_spec
from toneline.components.base import Component, Source

logger = logging.getLogger(__name__)


class Parallel(Source):
    component_type = "Composite"
    tag = "parallel"

    def __init__(self, components: List[Component]):
        self.components = list(components)

    @classmethod
    def from_spec(cls, spec: str) -> "Parallel":
        # Children are built through the factory, which in turn knows Parallel
        from toneline.pipeline.factory import create_component

        tag, section = split_component_spec(spec)
        if tag != cls.tag:
            raise SpecGrammarError(f"Not a parallel spec: {spec}")
        child_specs = parse_bracket_list(section, cls.tag)
        components = [create_component(child) for child in child_specs]
        logger.debug("Parallel composite built with %d children", len(components))
        return cls(components)

    @property
    def name(self) -> str:
        return "parallel:[" + ",".join(c.name for c in self.components) + "]"

    @property
    def num_sources(self) -> int:
        return sum(1 for c in self.components if c.is_source())

    def generate(self, duration: float, sample_rate: float) -> torch.Tensor:
        mixer = SourceMixer(num_samples(duration, sample_rate))
        for component in self.components:
            samples = component.get_samples(duration, sample_rate)
            if samples is not None:
                mixer.add(samples)
        return mixer.mix(self.num_sources)
