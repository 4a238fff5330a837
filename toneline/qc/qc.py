"""
Quality Control analysis for rendered buffers.
Reports peak/RMS metrics and flags renders the encoder would clip or that are silent.
"""
import torch
import numpy as np
from typing import Dict, Optional

from toneline.qc.thresholds import QC_THRESHOLDS


def _db(x: float) -> float:
    """Convert linear to dB."""
    if x <= 0:
        return -np.inf
    return 20.0 * np.log10(abs(x))


def _dbfs(x: float) -> Optional[float]:
    """Convert linear amplitude to dBFS (full scale). None for silence."""
    if x <= 0:
        return None
    return float(_db(x))


def stage_metrics(audio: torch.Tensor) -> Dict:
    """
    Peak/RMS summary of a buffer. Empty buffers report zeros.
    Peak here is absolute (max |x|), unlike the peak analyser component.
    """
    audio = audio.view(-1).to(torch.float64)
    n = int(audio.shape[-1])
    if n == 0:
        return {
            "num_samples": 0,
            "peak_linear": 0.0,
            "peak_dbfs": None,
            "rms_linear": 0.0,
            "rms_dbfs": None,
            "crest_factor": 0.0,
        }

    peak = float(torch.max(torch.abs(audio)))
    rms = float(torch.sqrt(torch.mean(audio ** 2)))
    crest_factor = peak / rms if rms > 0 else 0.0

    return {
        "num_samples": n,
        "peak_linear": peak,
        "peak_dbfs": _dbfs(peak),
        "rms_linear": rms,
        "rms_dbfs": _dbfs(rms),
        "crest_factor": crest_factor,
    }


def analyze(audio: torch.Tensor, thresholds: Optional[Dict] = None) -> Dict:
    """
    Analyze a rendered buffer for QC issues.

    Args:
        audio: Audio tensor (1D)
        thresholds: Overrides for QC_THRESHOLDS

    Returns:
        Dict with metrics, failures, warnings and PASS/WARN/FAIL status
    """
    limits = dict(QC_THRESHOLDS)
    if thresholds:
        limits.update(thresholds)

    metrics = stage_metrics(audio)
    failures = []
    warnings = []

    if metrics["num_samples"] == 0:
        failures.append("Empty render: no samples produced")
    else:
        peak = metrics["peak_linear"]
        if peak <= limits["silence_peak_max"]:
            warnings.append(f"Silent render: peak {peak:.3g}")
        elif peak > limits["peak_linear_max"]:
            warnings.append(
                f"Peak above full scale (encoder will clip): {peak:.4f} > {limits['peak_linear_max']:.4f}"
            )

    status = "PASS"
    if failures:
        status = "FAIL"
    elif warnings:
        status = "WARN"

    return {
        "status": status,
        "metrics": metrics,
        "failures": failures,
        "warnings": warnings,
    }
