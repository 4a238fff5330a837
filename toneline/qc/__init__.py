"""
Quality Control module for evaluating rendered buffers.
"""
from toneline.qc.qc import analyze, stage_metrics
from toneline.qc.thresholds import QC_THRESHOLDS

__all__ = ["analyze", "stage_metrics", "QC_THRESHOLDS"]
