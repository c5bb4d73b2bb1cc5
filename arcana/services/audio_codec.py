"""Wrap 16-bit mono PCM in a RIFF/WAVE container."""

from __future__ import annotations

import io
import wave

import numpy as np

SAMPLE_WIDTH_BYTES = 2
CHANNELS = 1


class MalformedAudioError(ValueError):
    """Raised when a PCM payload cannot be a whole number of 16-bit samples."""


def _as_pcm16(samples: bytes | np.ndarray) -> np.ndarray:
    """Return little-endian int16 samples from raw bytes or a sample array.

    Float arrays are treated as normalised audio in ``[-1, 1]``.
    """

    if isinstance(samples, np.ndarray):
        if samples.size == 0:
            raise MalformedAudioError("PCM payload is empty.")
        if np.issubdtype(samples.dtype, np.floating):
            samples = np.clip(samples, -1.0, 1.0) * 32767.0
        return samples.astype("<i2", copy=False)

    if not samples:
        raise MalformedAudioError("PCM payload is empty.")
    if len(samples) % SAMPLE_WIDTH_BYTES:
        raise MalformedAudioError(
            f"PCM payload of {len(samples)} bytes is truncated mid-sample."
        )
    return np.frombuffer(samples, dtype="<i2")


def pcm_to_wav(raw_samples: bytes | np.ndarray, *, sample_rate: int) -> bytes:
    """Return WAV bytes for signed 16-bit mono PCM.

    ``raw_samples`` is either little-endian PCM bytes as Polly returns them or
    a numpy sample array of any byte order. The output depends only on the
    samples and the sample rate.
    """

    pcm16 = _as_pcm16(raw_samples)
    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wave_file:
            wave_file.setnchannels(CHANNELS)
            wave_file.setsampwidth(SAMPLE_WIDTH_BYTES)
            wave_file.setframerate(sample_rate)
            wave_file.writeframes(pcm16.tobytes())
        return buffer.getvalue()


__all__ = ["MalformedAudioError", "pcm_to_wav"]
