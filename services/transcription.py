import logging
from typing import Optional

from openai import AsyncOpenAI

from core.constants.voice_constants import TRANSCRIPTION_LANGUAGE, TRANSCRIPTION_MODEL
from core.utils.audio_utils import get_audio_file_meta
from core.utils.openai_utils import api_error_message, get_openai_client

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    pass


class TranscriptionService:
    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        return self._client or get_openai_client()

    async def transcribe(
        self,
        audio: bytes,
        mime_type: Optional[str] = None,
        prompt: str = "",
        language: Optional[str] = None,
    ) -> str:
        """
        Transcribe audio with OpenAI's speech-to-text API.

        Args:
            audio (bytes): Raw audio bytes
            mime_type (Optional[str]): MIME type reported by the client
            prompt (str): Hint text that steers vocabulary and spelling
            language (Optional[str]): ISO-639-1 code, defaults to TRANSCRIPTION_LANGUAGE

        Returns:
            str: Transcript text, empty when nothing was recognized

        Raises:
            TranscriptionError: If the API call fails
        """
        meta = get_audio_file_meta(mime_type)
        language = language or TRANSCRIPTION_LANGUAGE

        params = {
            "model": TRANSCRIPTION_MODEL,
            "file": (meta.filename, audio, meta.content_type),
            "temperature": 0,
        }
        if language:
            params["language"] = language
        if prompt:
            params["prompt"] = prompt

        try:
            response = await self.client.audio.transcriptions.create(**params)
        except Exception as e:
            logger.error("Whisper API error: %s", api_error_message(e))
            raise TranscriptionError(f"Transcription failed: {api_error_message(e)}") from e

        return getattr(response, "text", None) or ""
