from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn
import logging
import math

from toneline.core.config import EngineConfig
from toneline.core.errors import PipelineError
from toneline.core.io import AudioIO
from toneline.core.types import num_samples
from toneline.pipeline.factory import available_components
from toneline.pipeline.pipeline import build_pipeline
from toneline.qc import analyze

logger = logging.getLogger("toneline")


class GenerateRequest(BaseModel):
    pipeline: str
    duration: Optional[float] = None
    sample_rate: Optional[float] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    """
    Build the HTTP app. Config is read once here and passed down;
    each request builds and runs its own Pipeline.
    """
    config = config or EngineConfig.from_env()

    app = FastAPI(
        title="Toneline Engine",
        version="1.0.0",
        description="Pipeline-spec audio generation engine"
    )
    app.state.config = config

    # CORS (Allow Frontend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _render(req: GenerateRequest):
        """Build and run the request's pipeline. Returns (result, duration, sample_rate) or an error response."""
        duration = config.default_duration if req.duration is None else req.duration
        sample_rate = config.default_sample_rate if req.sample_rate is None else req.sample_rate
        logger.info(
            "Generating audio: pipeline=%s, duration=%ss, sample_rate=%sHz",
            req.pipeline, duration, sample_rate,
        )

        if not (math.isfinite(duration) and math.isfinite(sample_rate)):
            return _error(400, "duration and sample_rate must be finite numbers"), None, None
        if num_samples(duration, sample_rate) > config.max_samples:
            return _error(400, f"Render too long: more than {config.max_samples} samples"), None, None

        try:
            pipeline = build_pipeline(req.pipeline)
        except PipelineError as e:
            return _error(400, e.describe()), None, None

        try:
            result = pipeline.run_with_analysis(duration, sample_rate)
        except PipelineError as e:
            return _error(500, f"Pipeline execution failed: {e}"), None, None

        logger.info("Generated %d samples", result.samples.shape[-1])
        return result, duration, sample_rate

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "toneline"}

    @app.get("/components")
    async def components():
        return available_components()

    @app.post("/generate")
    async def generate_audio(req: GenerateRequest):
        """
        Runs a pipeline and returns a summary: sample count, analysis results, QC.
        """
        result, duration, sample_rate = _render(req)
        if isinstance(result, Response):
            return result
        return {
            "samples": int(result.samples.shape[-1]),
            "duration": duration,
            "sample_rate": sample_rate,
            "pipeline": req.pipeline,
            "analysis": [r.to_dict() for r in result.results],
            "qc": analyze(result.samples),
        }

    @app.post("/generate/wav")
    async def generate_audio_wav(req: GenerateRequest):
        """
        Runs a pipeline and returns the buffer as a PCM WAV file.
        """
        result, duration, sample_rate = _render(req)
        if isinstance(result, Response):
            return result
        try:
            wav_bytes = AudioIO.to_bytes(result.samples, sample_rate, config.bits_per_sample)
        except (ValueError, RuntimeError) as e:
            return _error(500, f"WAV generation failed: {e}")
        logger.info("Generated WAV file with %d bytes", len(wav_bytes))
        return Response(content=wav_bytes, media_type="audio/wav")

    return app


def configure_logging(config: EngineConfig) -> None:
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))


_config = EngineConfig.from_env()
configure_logging(_config)
app = create_app(_config)

if __name__ == "__main__":
    uvicorn.run("toneline.main:app", host=_config.host, port=_config.port, reload=_config.dev)
