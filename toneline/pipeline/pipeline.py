"""
Pipeline engine: an ordered list of components that must start with a source,
run once per (duration, sample_rate) over a single buffer.
"""
import logging
from typing import Iterator, List

import torch

from toneline.core.errors import PipelineError, PipelineStructureError, SpecGrammarError
from toneline.core.types import RunResult, empty_buffer
from toneline.components.base import Component
from toneline.pipeline.factory import create_component
from toneline.pipeline.parser import parse_components

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(self):
        self.components: List[Component] = []
        logger.debug("Creating new pipeline")

    def add(self, component: Component) -> None:
        if not self.components and not component.is_source():
            raise PipelineStructureError(
                f"Pipeline must start with a Source (got {component.name})"
            )
        self.components.append(component)
        logger.debug("Adding component to pipeline (total: %d)", len(self.components))

    add_component = add

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[Component]:
        return iter(self.components)

    def names(self) -> List[str]:
        return [c.name for c in self.components]

    def run(self, duration: float, sample_rate: float) -> torch.Tensor:
        """Run every stage in order; the first error aborts the run."""
        return self._run(duration, sample_rate, collect=False, snapshots=False).samples

    def run_with_analysis(
        self,
        duration: float,
        sample_rate: float,
        snapshots: bool = False,
    ) -> RunResult:
        """
        Run like run(), also taking each stage's pending analysis result.
        With snapshots=True, each stage's snapshot() summary is recorded too.
        """
        return self._run(duration, sample_rate, collect=True, snapshots=snapshots)

    def _run(self, duration: float, sample_rate: float, collect: bool, snapshots: bool) -> RunResult:
        logger.info("Running pipeline with %d components", len(self.components))
        result = RunResult(samples=empty_buffer())
        buffer = result.samples
        total = len(self.components)

        for i, component in enumerate(self.components):
            logger.debug("Processing component %d (buffer has %d samples)", i, buffer.shape[-1])
            # In-place stages would otherwise alter the snapshot input
            before = buffer.clone() if snapshots else buffer

            buffer = component.process(buffer, duration, sample_rate)

            if collect:
                pending = component.take_result()
                if pending is not None:
                    pending.index = i
                    result.results.append(pending)
            if snapshots:
                result.stages.append(component.snapshot(before, buffer, i + 1, total))
            logger.debug("Component %d processed, buffer now has %d samples", i, buffer.shape[-1])

        result.samples = buffer
        logger.info("Pipeline completed with %d samples", buffer.shape[-1])
        return result


def build_pipeline(spec: str) -> Pipeline:
    """
    Tokenize a pipeline spec, create each component and add it in order.
    A failure is re-raised as-is with component_index and stage set on the error.
    """
    specs = parse_components(spec)
    if not specs:
        raise SpecGrammarError("Pipeline must have at least one component")

    pipeline = Pipeline()
    for i, component_spec in enumerate(specs):
        try:
            component = create_component(component_spec)
        except PipelineError as e:
            e.component_index, e.stage = i, "create"
            raise
        try:
            pipeline.add(component)
        except PipelineError as e:
            e.component_index, e.stage = i, "add"
            raise
    return pipeline
