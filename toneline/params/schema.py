"""
Parameter schema per component tag.
Used both for parsing (defaults, known keys) and for the /components endpoint.
"""
from typing import Any, Dict

from toneline.core.params import ParamDef

DEFAULT_FREQ_HZ = 440.0
DEFAULT_LEVEL = 1.0


# -----------------------------------------------------------------------------
# PARAM_SCHEMA: tag -> {param name -> ParamDef}
# -----------------------------------------------------------------------------

PARAM_SCHEMA: Dict[str, Dict[str, ParamDef]] = {
    "sine": {
        "freq": ParamDef("freq", DEFAULT_FREQ_HZ, 0.0, None, "Hz", "Oscillator frequency"),
    },
    "square": {
        "freq": ParamDef("freq", DEFAULT_FREQ_HZ, 0.0, None, "Hz", "Oscillator frequency"),
    },
    "volume": {
        "level": ParamDef("level", DEFAULT_LEVEL, None, None, None,
                          "Linear gain; negative inverts phase, >1 is not clamped"),
    },
    "peak": {},
}

# Kinds that do not take key=value params
COMPONENT_NOTES: Dict[str, str] = {
    "peak": "Takes no params; reports max(0, max(samples)).",
    "parallel": "Takes a bracketed pipeline: parallel:[sine:freq=440,square:freq=220]",
}


def describe_components() -> Dict[str, Dict[str, Any]]:
    """JSON-able schema for every component tag."""
    out: Dict[str, Dict[str, Any]] = {}
    for tag in ("sine", "square", "volume", "peak", "parallel"):
        defs = PARAM_SCHEMA.get(tag, {})
        out[tag] = {
            "params": {name: d.to_dict() for name, d in defs.items()},
            "notes": COMPONENT_NOTES.get(tag, ""),
        }
    return out
