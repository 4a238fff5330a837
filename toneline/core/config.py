"""
Process configuration, read once at startup and passed explicitly to the
HTTP app and CLI. Parser, factory, components and pipeline never read it.
"""
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("toneline")


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s=%r, using default %r", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    return _env_number(name, default, float)


def _env_int(name: str, default: int) -> int:
    return _env_number(name, default, int)


@dataclass(frozen=True)
class EngineConfig:
    default_duration: float = 1.0
    default_sample_rate: float = 44100.0
    max_samples: int = 10_000_000   # boundary guard; the engine itself has no limit
    bits_per_sample: int = 24
    host: str = "0.0.0.0"
    port: int = 42069
    log_level: str = "INFO"
    env: str = "development"

    @property
    def dev(self) -> bool:
        return self.env.lower() in ("development", "dev", "test")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build config from TONELINE_* environment variables (ENV for env)."""
        return cls(
            default_duration=_env_float("TONELINE_DEFAULT_DURATION", cls.default_duration),
            default_sample_rate=_env_float("TONELINE_DEFAULT_SAMPLE_RATE", cls.default_sample_rate),
            max_samples=_env_int("TONELINE_MAX_SAMPLES", cls.max_samples),
            bits_per_sample=_env_int("TONELINE_BITS_PER_SAMPLE", cls.bits_per_sample),
            host=os.environ.get("TONELINE_HOST", cls.host),
            port=_env_int("TONELINE_PORT", cls.port),
            log_level=os.environ.get("TONELINE_LOG_LEVEL", cls.log_level).upper(),
            env=os.environ.get("ENV", cls.env),
        )
