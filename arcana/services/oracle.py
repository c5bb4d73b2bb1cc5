"""AI orchestration client: reading text via Bedrock, narration via Polly.

Both capabilities share one bounded retry policy: up to ``max_retries``
additional attempts with exponential backoff (``base * 2**attempt`` seconds).
Credential, quota and region failures are terminal and raise immediately with
their own :class:`OracleErrorKind`; everything else is retried and ends as
``TRANSIENT`` once the attempts run out.

Text generation raises :class:`OracleError` so the caller can pick a message
per kind. Speech synthesis never raises; any failure yields ``None``.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Sequence, TypeVar

from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
)

from arcana.config.settings import settings
from arcana.domain import CardInstance, Spread
from arcana.services.llm_client import BedrockLlmClient, LlmInvocationError
from arcana.services.prompt_builder import build_reading_prompt
from arcana.services.speech import SpeechSynthesisError, SpeechSynthesisService
from arcana.telemetry import record_oracle_attempt

logger = logging.getLogger("arcana.services.oracle_pipeline")

T = TypeVar("T")

NO_RESPONSE_TEXT = "星辰暂默..."


class OracleErrorKind(str, Enum):
    CREDENTIAL_MISSING = "credential_missing"
    CREDENTIAL_INVALID = "credential_invalid"
    QUOTA_EXCEEDED = "quota_exceeded"
    REGION_UNSUPPORTED = "region_unsupported"
    TRANSIENT = "transient"
    EMPTY = "empty"


TERMINAL_KINDS = frozenset(
    {
        OracleErrorKind.CREDENTIAL_MISSING,
        OracleErrorKind.CREDENTIAL_INVALID,
        OracleErrorKind.QUOTA_EXCEEDED,
        OracleErrorKind.REGION_UNSUPPORTED,
    }
)
_NOT_RETRIED = TERMINAL_KINDS | {OracleErrorKind.EMPTY}

_CREDENTIAL_INVALID_CODES = frozenset(
    {
        "UnrecognizedClientException",
        "InvalidSignatureException",
        "ExpiredTokenException",
        "AccessDeniedException",
        "InvalidClientTokenId",
        "IncompleteSignature",
    }
)
_QUOTA_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "ServiceQuotaExceededException",
        "TooManyRequestsException",
        "LimitExceededException",
    }
)
_REGION_HINTS = (
    "location is not supported",
    "not supported in this region",
    "not available in this region",
    "unsupported region",
)


class OracleError(RuntimeError):
    """A classified failure of one of the remote capabilities."""

    def __init__(self, kind: OracleErrorKind, message: str | None = None) -> None:
        super().__init__(message or kind.value)
        self.kind = kind


def classify_failure(exc: BaseException) -> OracleErrorKind:
    """Map an exception raised by a capability call onto the error taxonomy."""

    if isinstance(exc, OracleError):
        return exc.kind
    if isinstance(exc, SpeechSynthesisError) and exc.__cause__ is None:
        return OracleErrorKind.EMPTY

    cause = exc.__cause__ if isinstance(exc, (LlmInvocationError, SpeechSynthesisError)) else exc
    if cause is None:
        cause = exc

    if isinstance(cause, (NoCredentialsError, PartialCredentialsError)):
        return OracleErrorKind.CREDENTIAL_MISSING
    if isinstance(cause, NoRegionError):
        return OracleErrorKind.REGION_UNSUPPORTED

    message = str(cause).lower()
    if isinstance(cause, ClientError):
        error = cause.response.get("Error", {})
        code = error.get("Code", "")
        message = str(error.get("Message", message)).lower()
        if code in _CREDENTIAL_INVALID_CODES:
            return OracleErrorKind.CREDENTIAL_INVALID
        if code in _QUOTA_CODES:
            return OracleErrorKind.QUOTA_EXCEEDED
        status = cause.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status == 429:
            return OracleErrorKind.QUOTA_EXCEEDED

    if any(hint in message for hint in _REGION_HINTS):
        return OracleErrorKind.REGION_UNSUPPORTED
    return OracleErrorKind.TRANSIENT


class OracleClient:
    """Generate reading text and narration with bounded retries."""

    def __init__(
        self,
        *,
        llm: BedrockLlmClient | None = None,
        speech: SpeechSynthesisService | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._llm = llm or BedrockLlmClient()
        self._speech = speech or SpeechSynthesisService()
        self._max_retries = (
            max_retries if max_retries is not None else settings.oracle.max_retries
        )
        self._backoff_base = (
            backoff_base if backoff_base is not None else settings.oracle.backoff_base_seconds
        )
        self._sleep = sleep

    @property
    def speech_sample_rate(self) -> int:
        return self._speech.sample_rate

    async def generate_reading(
        self,
        question: str,
        spread: Spread,
        cards: Sequence[CardInstance],
    ) -> str:
        """Return the reading text, or a neutral placeholder when the model says nothing."""

        if not self._llm.configured:
            raise OracleError(
                OracleErrorKind.CREDENTIAL_MISSING,
                "Bedrock client is not configured.",
            )

        prompt = build_reading_prompt(question, spread, cards)
        raw = await self._call_with_retry(
            "reading",
            lambda: self._llm.invoke(
                system_prompt=prompt.system_prompt,
                user_prompt=prompt.user_prompt,
            ),
        )
        text = (raw or "").strip()
        if not text:
            logger.info("Reading came back empty spread=%s", spread.id)
            record_oracle_attempt("reading", OracleErrorKind.EMPTY.value)
            return NO_RESPONSE_TEXT
        return text

    async def synthesize_speech(self, text: str) -> bytes | None:
        """Return raw PCM for ``text``, or ``None`` when narration is unavailable."""

        if not text or not text.strip():
            return None
        try:
            return await self._call_with_retry(
                "speech",
                lambda: self._speech.synthesize_pcm(text),
            )
        except OracleError as exc:
            logger.warning("Narration unavailable kind=%s: %s", exc.kind.value, exc)
            return None

    async def _call_with_retry(
        self,
        capability: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        attempt = 0
        while True:
            try:
                result = await call()
            except Exception as exc:
                kind = classify_failure(exc)
                attempt += 1
                record_oracle_attempt(capability, kind.value)
                if kind in _NOT_RETRIED:
                    logger.warning(
                        "%s call failed with terminal error kind=%s attempt=%s",
                        capability,
                        kind.value,
                        attempt,
                    )
                    raise OracleError(kind, str(exc)) from exc
                if attempt > self._max_retries:
                    logger.warning(
                        "%s call failed after %s attempts: %s",
                        capability,
                        attempt,
                        exc,
                    )
                    raise OracleError(OracleErrorKind.TRANSIENT, str(exc)) from exc

                delay = self._backoff_base * (2 ** attempt)
                logger.info(
                    "%s call failed attempt=%s, retrying in %.1fs: %s",
                    capability,
                    attempt,
                    delay,
                    exc,
                )
                await self._sleep(delay)
                continue

            record_oracle_attempt(capability, "ok")
            return result


__all__ = [
    "NO_RESPONSE_TEXT",
    "OracleClient",
    "OracleError",
    "OracleErrorKind",
    "TERMINAL_KINDS",
    "classify_failure",
]
