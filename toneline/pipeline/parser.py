"""
Spec grammar: splitting pipeline and component specs.

    pipeline   := component (',' component)*
    component  := tag [':' params]
    params     := kv (',' kv)*        (sine/square/volume)
                | '[' pipeline ']'    (parallel)
"""
import logging
from typing import List, Optional, Tuple

from toneline.core.errors import SpecGrammarError

logger = logging.getLogger(__name__)


def parse_components(pipeline: str) -> List[str]:
    """
    Split a pipeline spec on top-level commas.
    Commas inside [...] do not split; pieces are trimmed and empty pieces dropped.
    Bracket balance is not checked here (parallel parsing reports it).
    """
    components: List[str] = []
    current: List[str] = []
    bracket_level = 0

    for ch in pipeline:
        if ch == "[":
            bracket_level += 1
        elif ch == "]":
            bracket_level -= 1
        elif ch == "," and bracket_level == 0:
            piece = "".join(current).strip()
            if piece:
                components.append(piece)
            current = []
            continue
        current.append(ch)

    piece = "".join(current).strip()
    if piece:
        components.append(piece)

    logger.debug("Parsed %d components from pipeline", len(components))
    for i, comp in enumerate(components):
        logger.debug("Component %d: %s", i, comp)
    return components


# Entry-point name used by callers that think in terms of "parse a spec"
parse = parse_components


def split_component_spec(spec: str) -> Tuple[str, Optional[str]]:
    """
    Split one component spec on the first ':' into (tag, params_section).
    params_section is None when there is no ':'.
    """
    spec = spec.strip()
    if ":" not in spec:
        return spec, None
    tag, section = spec.split(":", 1)
    return tag.strip(), section.strip()


def split_params(section: Optional[str]) -> List[str]:
    """Split a key=value parameter section on ','; empty pieces are dropped."""
    if section is None:
        return []
    return [p.strip() for p in section.split(",") if p.strip()]


def parse_bracket_list(section: Optional[str], tag: str = "parallel") -> List[str]:
    """
    Parse a '[spec, spec, ...]' section into child component specs.
    The section must be exactly one bracket pair with balanced nesting inside,
    and must contain at least one component.
    """
    if section is None or not section.startswith("[") or not section.endswith("]"):
        raise SpecGrammarError(f"{tag} specs must be enclosed in [ ]: {section!r}")

    depth = 0
    for pos, ch in enumerate(section):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        # The outer pair must close only at the last character
        if depth < 0 or (depth == 0 and pos != len(section) - 1):
            raise SpecGrammarError(f"Unbalanced brackets in {tag} spec: {section}")
    if depth != 0:
        raise SpecGrammarError(f"Unbalanced brackets in {tag} spec: {section}")

    children = parse_components(section[1:-1])
    if not children:
        raise SpecGrammarError(f"{tag} requires at least one component spec")
    return children
