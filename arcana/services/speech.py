"""Amazon Polly speech synthesis returning raw PCM for the reading narration."""

from __future__ import annotations

import logging
from html import escape as html_escape
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from arcana.config.settings import settings
from arcana.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class SpeechSynthesisError(RuntimeError):
    """Raised when Polly fails to produce audio for a reading."""


class SpeechSynthesisService:
    """Narrate reading text with a fixed Polly voice as 16-bit mono PCM."""

    def __init__(
        self,
        *,
        client: Any | None = None,
        voice_id: str = settings.polly.default_voice_id,
        engine: str = settings.polly.engine,
        sample_rate: int = settings.polly.sample_rate,
        rate: float = 0.95,
    ) -> None:
        self._client = client
        self._voice_id = voice_id
        self._engine = engine
        self._sample_rate = sample_rate
        self._rate = rate

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def voice_id(self) -> str:
        return self._voice_id

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = create_boto3_client("polly", region_name=settings.polly.region)
        return self._client

    def _build_ssml(self, text: str) -> str:
        rate_pct = max(60, min(140, int(round(self._rate * 100))))
        if rate_pct != 100:
            return f'<speak><prosody rate="{rate_pct}%">{html_escape(text)}</prosody></speak>'
        return f"<speak>{html_escape(text)}</speak>"

    async def synthesize_pcm(self, text: str) -> bytes:
        """Return little-endian 16-bit mono PCM at :attr:`sample_rate`."""

        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._get_client().synthesize_speech,
                TextType="ssml",
                Text=self._build_ssml(text),
                VoiceId=self._voice_id,
                Engine=self._engine,
                OutputFormat="pcm",
                SampleRate=str(self._sample_rate),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Polly synth failed for voice '%s': %s", self._voice_id, exc)
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")
        pcm_bytes = audio_stream.read()
        if not pcm_bytes:
            raise SpeechSynthesisError("Polly returned an empty audio stream.")
        return pcm_bytes


__all__ = ["SpeechSynthesisError", "SpeechSynthesisService"]
