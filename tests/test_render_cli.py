"""
tools/render.py command line: writes a WAV, prints analysis, exits 1 on errors.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import soundfile as sf

from toneline.core.config import EngineConfig
from tools.render import main

CONFIG = EngineConfig(default_duration=0.1, default_sample_rate=8000.0)


def test_default_single_sine(tmp_path, capsys):
    out = tmp_path / "sine.wav"
    assert main(["--freq", "220", "--output", str(out)], config=CONFIG) == 0
    assert sf.info(str(out)).frames == 800
    assert "Saved 800 samples" in capsys.readouterr().out


def test_pipeline_with_analysis_stages_and_qc(tmp_path, capsys):
    out = tmp_path / "mix.wav"
    code = main([
        "--pipeline", "parallel:[sine:freq=440,square:freq=220],volume:level=0.3,peak",
        "--duration", "0.05",
        "--output", str(out),
        "--analysis",
        "--stages",
        "--qc",
    ], config=CONFIG)
    assert code == 0
    printed = capsys.readouterr().out
    assert "[2] peak:" in printed
    assert "stage 3/3 peak" in printed
    assert "QC Status: PASS" in printed
    assert sf.info(str(out)).frames == 400


def test_build_error_exits_nonzero(tmp_path, capsys):
    out = tmp_path / "bad.wav"
    assert main(["--pipeline", "peak", "--output", str(out)], config=CONFIG) == 1
    assert "must start with a Source" in capsys.readouterr().err
    assert not out.exists()


def test_analysis_printed_only_when_requested(tmp_path, capsys):
    out = tmp_path / "peak.wav"
    argv = ["--pipeline", "sine:freq=440,volume:level=0.5,peak", "--output", str(out)]

    assert main(argv, config=CONFIG) == 0
    printed = capsys.readouterr().out
    assert "[2] peak:" not in printed
    assert "stage " not in printed

    assert main(argv + ["--analysis"], config=CONFIG) == 0
    printed = capsys.readouterr().out
    assert "[2] peak: 0.5" in printed


def test_stages_lists_every_stage(tmp_path, capsys):
    out = tmp_path / "stages.wav"
    code = main(["--pipeline", "square:freq=100,volume:level=0.5", "--output", str(out), "--stages"],
                config=CONFIG)
    assert code == 0
    printed = capsys.readouterr().out
    assert "stage 1/2 square:freq=100: peak=1.0000" in printed
    assert "stage 2/2 volume:level=0.50: peak=0.5000" in printed


def test_non_finite_duration_exits_nonzero(tmp_path, capsys):
    out = tmp_path / "inf.wav"
    assert main(["--duration", "inf", "--output", str(out)], config=CONFIG) == 1
    assert "must be finite" in capsys.readouterr().err
    assert not out.exists()
