import soundfile as sf
import torch
import numpy as np
import io

# soundfile subtype per PCM bit depth
PCM_SUBTYPES = {16: "PCM_16", 24: "PCM_24", 32: "PCM_32"}


def _to_numpy(samples) -> np.ndarray:
    if isinstance(samples, torch.Tensor):
        return samples.detach().cpu().numpy().astype(np.float64)
    return np.asarray(samples, dtype=np.float64)


def _subtype(bits_per_sample: int) -> str:
    if bits_per_sample not in PCM_SUBTYPES:
        raise ValueError(f"Unsupported bits_per_sample: {bits_per_sample}")
    return PCM_SUBTYPES[bits_per_sample]


class AudioIO:
    @staticmethod
    def save_wav(samples: torch.Tensor, sample_rate: float, path: str, bits_per_sample: int = 24):
        """Saves a mono buffer to a PCM WAV file."""
        data = _to_numpy(samples)

        # Clamp to avoid wrap-around clipping
        data = np.clip(data, -1.0, 1.0)

        sf.write(path, data, int(sample_rate), subtype=_subtype(bits_per_sample), format="WAV")

    @staticmethod
    def to_bytes(samples: torch.Tensor, sample_rate: float, bits_per_sample: int = 24) -> bytes:
        """Returns a PCM WAV file as bytes (for API responses)."""
        buffer = io.BytesIO()
        data = np.clip(_to_numpy(samples), -1.0, 1.0)
        sf.write(buffer, data, int(sample_rate), subtype=_subtype(bits_per_sample), format="WAV")
        return buffer.getvalue()
