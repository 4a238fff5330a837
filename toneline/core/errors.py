"""
Error types raised while building and running pipelines.
Build-time errors (grammar, unknown names, bad values, structure) are ValueErrors;
run-time state errors are RuntimeErrors. All share PipelineError so callers
at the boundary can catch one type.
"""


class PipelineError(Exception):
    """Base for every error raised by the pipeline engine."""

    # Set by build_pipeline: top-level position of the failing component and
    # whether it failed in "create" or "add"
    component_index = None
    stage = None

    def describe(self) -> str:
        """Message prefixed with the failing component, when known."""
        if self.component_index is None:
            return str(self)
        return f"Failed to {self.stage} component {self.component_index}: {self}"


class SpecGrammarError(PipelineError, ValueError):
    """Malformed spec text: brackets, empty parallel body, bad key=value token."""


class UnknownComponentError(PipelineError, ValueError):
    """Component tag not in the known set."""

    def __init__(self, tag: str):
        super().__init__(f"Unknown component type: {tag}")
        self.tag = tag


class UnknownParameterError(PipelineError, ValueError):
    """Parameter key not accepted by the component."""

    def __init__(self, component: str, key: str):
        super().__init__(f"Unknown parameter for {component}: {key}")
        self.component = component
        self.key = key


class ParamValueError(PipelineError, ValueError):
    """Parameter value could not be parsed as a float."""

    def __init__(self, component: str, key: str, value: str):
        super().__init__(f"{component} requires a valid {key} (got {value!r})")
        self.component = component
        self.key = key
        self.value = value


class PipelineStructureError(PipelineError, ValueError):
    """Pipeline does not start with a source."""


class EmptyBufferError(PipelineError, RuntimeError):
    """Non-source component invoked against an empty buffer."""
