"""Amazon Transcribe streaming for spoken questions."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from arcana.config.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to controllers."""

    transcript: str
    language_code: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class TranscribeService:
    """Stream one recorded question to Amazon Transcribe and return its text."""

    def __init__(
        self,
        region: str,
        language_code: str = "zh-CN",
        media_sample_rate_hz: int = 16000,
        media_encoding: str = "pcm",
        enabled: bool = True,
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._media_sample_rate_hz = media_sample_rate_hz
        self._media_encoding = media_encoding
        self._enabled = enabled
        self._client: TranscribeStreamingClient | None = None

    @property
    def available(self) -> bool:
        """Voice input needs the service switched on and ffmpeg on PATH."""

        return self._enabled and shutil.which("ffmpeg") is not None

    def _get_client(self) -> TranscribeStreamingClient:
        if self._client is None:
            # The streaming SDK only reads credentials from the environment.
            if settings.aws.access_key:
                os.environ.setdefault("AWS_ACCESS_KEY_ID", settings.aws.access_key)
            if settings.aws.secret_key:
                os.environ.setdefault("AWS_SECRET_ACCESS_KEY", settings.aws.secret_key)
            self._client = TranscribeStreamingClient(region=self._region)
        return self._client

    async def transcribe_question(self, audio_bytes: bytes) -> TranscriptionResult:
        """Convert the upload to PCM, stream it and return the final transcript."""

        if not self.available:
            raise TranscriptionError("Voice input is not available.")
        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        try:
            pcm_data = await run_in_threadpool(self._convert_to_pcm_sync, audio_bytes)
        except TranscriptionError:
            raise
        except Exception as exc:
            raise TranscriptionError(f"Audio conversion failed: {exc}") from exc

        try:
            stream = await self._get_client().start_stream_transcription(
                language_code=self._language_code,
                media_sample_rate_hz=self._media_sample_rate_hz,
                media_encoding=self._media_encoding,
            )
        except Exception as exc:
            raise TranscriptionError(f"Could not start transcription: {exc}") from exc

        handler = _FinalTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            chunk_size = 8192
            sleep_time = chunk_size / (self._media_sample_rate_hz * 2)
            for i in range(0, len(pcm_data), chunk_size):
                await stream.input_stream.send_audio_event(audio_chunk=pcm_data[i : i + chunk_size])
                await asyncio.sleep(sleep_time)
            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        transcript = handler.transcript.strip()
        logger.info("Question transcribed chars=%s", len(transcript))
        return TranscriptionResult(transcript=transcript, language_code=self._language_code)

    def _convert_to_pcm_sync(self, audio_bytes: bytes) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        if not process.stdout:
            raise TranscriptionError("ffmpeg produced no audio samples.")
        return process.stdout


class _FinalTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if not result.is_partial and result.alternatives:
                # First alternative only: the question is one utterance.
                self.transcript += result.alternatives[0].transcript + " "


def get_transcribe_service() -> TranscribeService:
    """Return the process-wide transcribe service."""

    return _DEFAULT_SERVICE


_DEFAULT_SERVICE = TranscribeService(
    region=settings.transcribe.region,
    language_code=settings.transcribe.language_code,
    media_sample_rate_hz=settings.transcribe.media_sample_rate_hz,
    enabled=settings.transcribe.enabled,
)


__all__ = [
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
