import logging
from typing import Any, Dict, Type

from toneline.core.errors import UnknownComponentError
from toneline.params.schema import describe_components
from toneline.pipeline.parser import split_component_spec
from toneline.components.base import Component, Source
from toneline.components.sources import SineWaveSource, SquareWaveSource
from toneline.components.processors import VolumeProcessor
from toneline.components.analysers import PeakAnalyser
from toneline.components.composite import Parallel

logger = logging.getLogger(__name__)

COMPONENT_TYPES: Dict[str, Type[Component]] = {
    "sine": SineWaveSource,
    "square": SquareWaveSource,
    "parallel": Parallel,
    "volume": VolumeProcessor,
    "peak": PeakAnalyser,
}


def create_component(spec: str) -> Component:
    """
    Build one component from its spec string, dispatching on the tag.
    Parameter validation happens in the component's own from_spec.
    """
    tag, _ = split_component_spec(spec)
    cls = COMPONENT_TYPES.get(tag)
    if cls is None:
        raise UnknownComponentError(tag)
    component = cls.from_spec(spec)
    logger.debug("Created %s from spec %r", component.name, spec)
    return component


build = create_component


def available_components() -> Dict[str, Dict[str, Any]]:
    """Schema for every known tag, plus whether it is a source."""
    schema = describe_components()
    for tag, cls in COMPONENT_TYPES.items():
        schema[tag]["component_type"] = cls.component_type
        schema[tag]["is_source"] = issubclass(cls, Source)
    return schema
