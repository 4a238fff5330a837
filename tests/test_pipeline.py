"""
Pipeline engine and factory invariants: source-first structure, fail-fast runs,
analysis collection, and end-to-end spec strings.
Run from project root: python -m pytest tests/test_pipeline.py -v
"""
import sys
import os
import hashlib

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch

from toneline.core.errors import (
    EmptyBufferError,
    ParamValueError,
    PipelineError,
    PipelineStructureError,
    SpecGrammarError,
    UnknownComponentError,
    UnknownParameterError,
)
from toneline.components.base import Component
from toneline.components.sources import SineWaveSource, generate_sine_wave
from toneline.components.processors import VolumeProcessor
from toneline.components.analysers import PeakAnalyser
from toneline.pipeline.factory import COMPONENT_TYPES, available_components, build, create_component
from toneline.pipeline.pipeline import Pipeline, build_pipeline

SR = 8000.0
DUR = 0.1


def _sha256(t: torch.Tensor) -> str:
    return hashlib.sha256(t.numpy().tobytes()).hexdigest()


# -----------------------------------------------------------------------------
# Factory
# -----------------------------------------------------------------------------

def test_factory_dispatches_on_tag():
    assert isinstance(create_component("sine:freq=1"), SineWaveSource)
    assert isinstance(create_component("volume:level=0.2"), VolumeProcessor)
    assert isinstance(create_component("peak"), PeakAnalyser)
    assert build is create_component
    assert set(COMPONENT_TYPES) == {"sine", "square", "volume", "peak", "parallel"}


def test_factory_unknown_tag():
    with pytest.raises(UnknownComponentError) as exc:
        create_component("reverb:mix=0.5")
    assert exc.value.tag == "reverb"
    assert "Unknown component type: reverb" in str(exc.value)


def test_factory_errors_attributed_to_kind():
    with pytest.raises(ParamValueError, match="volume requires a valid level"):
        create_component("volume:level=abc")
    with pytest.raises(UnknownParameterError, match="sine"):
        create_component("sine:level=1")
    with pytest.raises(SpecGrammarError, match="Invalid parameter format"):
        create_component("square:freq")


def test_available_components_flags_sources():
    schema = available_components()
    assert schema["parallel"]["is_source"] is True
    assert schema["peak"]["is_source"] is False
    assert schema["volume"]["component_type"] == "Processor"


# -----------------------------------------------------------------------------
# Structure
# -----------------------------------------------------------------------------

def test_pipeline_must_start_with_source():
    pipeline = Pipeline()
    with pytest.raises(PipelineStructureError, match="must start with a Source"):
        pipeline.add(VolumeProcessor(0.5))
    assert len(pipeline) == 0


def test_build_rejects_non_source_first():
    with pytest.raises(PipelineStructureError) as exc:
        build_pipeline("volume:level=0.5,sine")
    assert exc.value.component_index == 0
    assert exc.value.describe().startswith("Failed to add component 0")


def test_peak_only_rejected_at_build_time():
    with pytest.raises(PipelineStructureError):
        build_pipeline("peak")


def test_later_non_sources_allowed():
    pipeline = Pipeline()
    pipeline.add(SineWaveSource(440.0))
    pipeline.add(VolumeProcessor(0.5))
    pipeline.add(PeakAnalyser())
    pipeline.add(SineWaveSource(220.0))
    assert pipeline.names() == ["sine:freq=440", "volume:level=0.50", "peak", "sine:freq=220"]
    assert [c.tag for c in pipeline] == ["sine", "volume", "peak", "sine"]


def test_empty_spec_rejected():
    with pytest.raises(SpecGrammarError, match="at least one component"):
        build_pipeline(" , ")


def test_build_error_carries_index():
    with pytest.raises(UnknownComponentError) as exc:
        build_pipeline("sine,volume:level=0.5,bogus")
    assert exc.value.component_index == 2
    assert exc.value.describe() == "Failed to create component 2: Unknown component type: bogus"


# -----------------------------------------------------------------------------
# Run
# -----------------------------------------------------------------------------

def test_sample_count_is_floor_of_duration_times_rate():
    for freq in (55.0, 440.0, 3000.0):
        out = build_pipeline(f"sine:freq={freq}").run(DUR, SR)
        assert out.shape == (int(DUR * SR),)
    # Fractional boundary: 0.00999 * 1000 = 9.99 -> 9
    assert build_pipeline("sine").run(0.00999, 1000.0).shape == (9,)


def test_runs_are_deterministic_and_repeatable():
    pipeline = build_pipeline("sine:freq=440,volume:level=0.5")
    a = pipeline.run(DUR, SR)
    b = pipeline.run(DUR, SR)
    c = build_pipeline("sine:freq=440,volume:level=0.5").run(DUR, SR)
    assert _sha256(a) == _sha256(b) == _sha256(c)


def test_square_pipeline_only_unit_values():
    out = build_pipeline("square:freq=330").run(DUR, SR)
    assert torch.all((out == 1.0) | (out == -1.0))


def test_volume_pipeline_scales_source():
    base = generate_sine_wave(440.0, DUR, SR)
    out = build_pipeline("sine:freq=440,volume:level=-3").run(DUR, SR)
    torch.testing.assert_close(out, base * -3.0)


def test_parallel_then_volume():
    out = build_pipeline("parallel:[sine:freq=440,square:freq=220],volume:level=0.3").run(DUR, SR)
    assert out.shape == (int(DUR * SR),)
    assert float(torch.max(torch.abs(out))) <= 0.3 + 1e-12


def test_analysis_results_collected():
    pipeline = build_pipeline("sine:freq=440,volume:level=0.5,peak")
    result = pipeline.run_with_analysis(DUR, SR)
    assert len(result.results) == 1
    peak = result.result_for("peak")
    assert peak.index == 2
    assert peak.value == pytest.approx(float(torch.max(result.samples)))
    assert peak.value <= 0.5
    assert result.result_for("rms") is None


def test_results_taken_once_per_run():
    pipeline = build_pipeline("sine,peak")
    pipeline.run(DUR, SR)
    # run() does not collect, so the analyser still holds its value
    assert pipeline.components[1].get_result() is not None
    result = pipeline.run_with_analysis(DUR, SR)
    assert len(result.results) == 1
    assert pipeline.components[1].take_result() is None


def test_negative_signal_peak_reports_zero():
    class ConstantSource(SineWaveSource):
        def generate(self, duration, sample_rate):
            return torch.full((4,), -0.5, dtype=torch.float64)

    pipeline = Pipeline()
    pipeline.add(ConstantSource())
    pipeline.add(PeakAnalyser())
    assert pipeline.run_with_analysis(DUR, SR).results[0].value == 0.0


def test_zero_duration_fails_at_first_non_source():
    pipeline = build_pipeline("sine,volume:level=0.5,peak")
    with pytest.raises(EmptyBufferError, match="Processor requires input samples"):
        pipeline.run(0.0, SR)


def test_run_is_fail_fast():
    calls = []

    class Recorder(Component):
        tag = "recorder"

        def process(self, buffer, duration, sample_rate):
            calls.append(buffer.shape[-1])
            return buffer

    pipeline = Pipeline()
    pipeline.add(SineWaveSource(440.0))
    pipeline.add(VolumeProcessor(2.0))
    pipeline.add(Recorder())
    with pytest.raises(PipelineError):
        pipeline.run(0.0, SR)
    assert calls == []
    pipeline.run(DUR, SR)
    assert calls == [int(DUR * SR)]


def test_snapshots_recorded_per_stage():
    result = build_pipeline("sine:freq=440,volume:level=0.5,peak").run_with_analysis(DUR, SR, snapshots=True)
    assert [s["index"] for s in result.stages] == [1, 2, 3]
    assert result.stages[-1]["is_last"] is True
    volume_stage = result.stages[1]
    assert volume_stage["input_samples"] == int(DUR * SR)
    assert volume_stage["output"]["peak_linear"] == pytest.approx(result.stages[0]["output"]["peak_linear"] * 0.5)
