"""
Param parsing utilities for component specs.
A component spec's parameter section is a comma list of key=value tokens;
values are floats. Definitions come from params.schema.PARAM_SCHEMA.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from toneline.core.errors import ParamValueError, SpecGrammarError, UnknownParameterError


# -----------------------------------------------------------------------------
# Param definition (for schema/documentation; bounds are not enforced)
# -----------------------------------------------------------------------------

@dataclass
class ParamDef:
    """Definition of a single parameter. Bounds/unit are optional."""
    name: str
    default: float
    min: Optional[float] = None
    max: Optional[float] = None
    unit: Optional[str] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "float",
            "default": self.default,
            "min": self.min,
            "max": self.max,
            "unit": self.unit,
            "description": self.description,
        }


# -----------------------------------------------------------------------------
# key=value parsing
# -----------------------------------------------------------------------------

def split_key_value(param: str) -> tuple:
    """
    Split one parameter token into (key, value).
    Exactly one '=' is required, e.g. "freq=440" -> ("freq", "440").
    """
    if param.count("=") != 1:
        raise SpecGrammarError(f"Invalid parameter format: {param}")
    key, value = param.split("=", 1)
    return key.strip(), value.strip()


def parse_float(component: str, key: str, raw: str) -> float:
    """Parse a parameter value as float, naming the component and key on failure."""
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ParamValueError(component, key, raw) from None


def parse_kv_params(
    params: Iterable[str],
    defs: Dict[str, ParamDef],
    component: str,
) -> Dict[str, float]:
    """
    Parse key=value tokens against a component's param definitions.
    Missing keys take their defaults; a repeated key keeps the last value.
    Unknown keys and non-numeric values raise.
    """
    result = {name: float(d.default) for name, d in defs.items()}
    for param in params:
        key, raw = split_key_value(param)
        if key not in defs:
            raise UnknownParameterError(component, key)
        result[key] = parse_float(component, key, raw)
    return result
