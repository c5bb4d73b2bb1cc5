"""PCM to WAV wrapping used for the reading narration."""

from __future__ import annotations

import io
import wave

import numpy as np
import pytest

from arcana.services.audio_codec import MalformedAudioError, pcm_to_wav

from conftest import SAMPLE_PCM


def test_wraps_pcm_in_mono_16bit_wave_container():
    wav_bytes = pcm_to_wav(SAMPLE_PCM, sample_rate=16000)

    assert wav_bytes[:4] == b"RIFF"
    assert wav_bytes[8:12] == b"WAVE"
    with wave.open(io.BytesIO(wav_bytes), "rb") as wave_file:
        assert wave_file.getnchannels() == 1
        assert wave_file.getsampwidth() == 2
        assert wave_file.getframerate() == 16000
        assert wave_file.getnframes() == len(SAMPLE_PCM) // 2
        assert wave_file.readframes(wave_file.getnframes()) == SAMPLE_PCM


def test_output_is_byte_identical_across_calls():
    assert pcm_to_wav(SAMPLE_PCM, sample_rate=16000) == pcm_to_wav(SAMPLE_PCM, sample_rate=16000)


def test_truncated_sample_is_rejected():
    with pytest.raises(MalformedAudioError):
        pcm_to_wav(SAMPLE_PCM[:-1], sample_rate=16000)


def test_empty_payload_is_rejected():
    with pytest.raises(MalformedAudioError):
        pcm_to_wav(b"", sample_rate=16000)


def test_big_endian_sample_array_is_written_little_endian():
    samples = np.array([1, -2, 300], dtype=">i2")

    wav_bytes = pcm_to_wav(samples, sample_rate=16000)

    with wave.open(io.BytesIO(wav_bytes), "rb") as wave_file:
        frames = wave_file.readframes(wave_file.getnframes())
    assert frames == np.array([1, -2, 300], dtype="<i2").tobytes()


def test_float_samples_are_clipped_and_scaled():
    wav_bytes = pcm_to_wav(np.array([0.0, 0.5, 2.0, -2.0]), sample_rate=16000)

    with wave.open(io.BytesIO(wav_bytes), "rb") as wave_file:
        frames = np.frombuffer(wave_file.readframes(wave_file.getnframes()), dtype="<i2")
    assert frames.tolist() == [0, 16383, 32767, -32767]


def test_empty_sample_array_is_rejected():
    with pytest.raises(MalformedAudioError):
        pcm_to_wav(np.array([], dtype="<i2"), sample_rate=16000)
