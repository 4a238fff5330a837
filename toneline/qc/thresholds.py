"""
Default QC thresholds for rendered pipeline output.
"""
QC_THRESHOLDS = {
    "peak_linear_max": 1.0,      # encoder clamps above full scale
    "silence_peak_max": 1e-9,    # below this the render counts as silent
}
