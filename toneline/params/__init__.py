"""
Parameter schema and defaults per component tag.
"""
from toneline.params.schema import PARAM_SCHEMA, describe_components

__all__ = ["PARAM_SCHEMA", "describe_components"]
