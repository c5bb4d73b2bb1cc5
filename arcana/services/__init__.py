"""Service layer helpers for external integrations."""

from .audio_codec import MalformedAudioError, pcm_to_wav
from .llm_client import BedrockLlmClient, LlmInvocationError
from .oracle import (
    NO_RESPONSE_TEXT,
    OracleClient,
    OracleError,
    OracleErrorKind,
    classify_failure,
)
from .speech import SpeechSynthesisError, SpeechSynthesisService
from .transcribe import (
    TranscribeService,
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)

__all__ = [
    "BedrockLlmClient",
    "LlmInvocationError",
    "MalformedAudioError",
    "NO_RESPONSE_TEXT",
    "OracleClient",
    "OracleError",
    "OracleErrorKind",
    "SpeechSynthesisError",
    "SpeechSynthesisService",
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "classify_failure",
    "get_transcribe_service",
    "pcm_to_wav",
]
