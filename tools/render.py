#!/usr/bin/env python3
"""
Render a pipeline spec to a WAV file.

Usage:
    python tools/render.py --pipeline "sine:freq=440,volume:level=0.5,peak" --output tone.wav
    python tools/render.py --freq 220 --duration 2.0

Options:
    --pipeline <spec>     Pipeline spec (default: a single sine at --freq)
    --freq <hz>           Frequency for the default single-sine pipeline (default: 440)
    --duration <s>        Duration in seconds (default: from config, 1.0)
    --sample-rate <hz>    Sample rate (default: from config, 44100)
    --output <path>       Output WAV file (default: sine_wave.wav)
    --analysis            Print analyser results (e.g. peak)
    --qc                  Run QC analysis on the result
    --stages              Print per-stage summaries
"""
import sys
import os
import argparse
import logging
import math

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from toneline.core.config import EngineConfig
from toneline.core.errors import PipelineError
from toneline.core.io import AudioIO
from toneline.pipeline.pipeline import build_pipeline
from toneline.qc import analyze

logger = logging.getLogger("toneline")


def build_parser(config: EngineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate audio files from a pipeline spec")
    parser.add_argument("--pipeline", type=str, default=None,
                        help="Pipeline spec, e.g. 'sine:freq=440,volume:level=0.5,peak'")
    parser.add_argument("--freq", type=float, default=440.0,
                        help="Frequency in Hz when --pipeline is not given")
    parser.add_argument("--duration", type=float, default=config.default_duration,
                        help="Duration in seconds")
    parser.add_argument("--sample-rate", type=float, default=config.default_sample_rate,
                        help="Sample rate in Hz")
    parser.add_argument("--output", type=str, default="sine_wave.wav", help="Output WAV file")
    parser.add_argument("--analysis", action="store_true", help="Print analyser results")
    parser.add_argument("--qc", action="store_true", help="Run QC analysis")
    parser.add_argument("--stages", action="store_true", help="Print per-stage summaries")
    return parser


def main(argv=None, config: EngineConfig = None) -> int:
    config = config or EngineConfig.from_env()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    args = build_parser(config).parse_args(argv)

    spec = args.pipeline or f"sine:freq={args.freq}"
    if not (math.isfinite(args.duration) and math.isfinite(args.sample_rate)):
        print("Error generating audio: duration and sample rate must be finite", file=sys.stderr)
        return 1

    try:
        pipeline = build_pipeline(spec)
        result = pipeline.run_with_analysis(args.duration, args.sample_rate, snapshots=args.stages)
        AudioIO.save_wav(result.samples, args.sample_rate, args.output, config.bits_per_sample)
    except PipelineError as e:
        print(f"Error generating audio: {e.describe()}", file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as e:
        print(f"Error writing audio: {e}", file=sys.stderr)
        return 1

    print(f"Saved {result.samples.shape[-1]} samples to {args.output}")
    if args.analysis:
        for r in result.results:
            print(f"  [{r.index}] {r.analyser}: {r.value:.6f}")

    if args.stages:
        for stage in result.stages:
            out = stage["output"]
            print(f"  stage {stage['index']}/{stage['total']} {stage['name']}: "
                  f"peak={out['peak_linear']:.4f} rms={out['rms_linear']:.4f}")

    if args.qc:
        qc = analyze(result.samples)
        print(f"QC Status: {qc['status']}")
        for f in qc["failures"]:
            print(f"  FAILURE: {f}")
        for w in qc["warnings"]:
            print(f"  WARNING: {w}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
