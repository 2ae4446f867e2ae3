import os
from typing import Optional

from openai import AsyncOpenAI

from core.constants.voice_constants import OPENAI_BASE_URL, OPENAI_TIMEOUT_SECONDS


class MissingAPIKeyError(RuntimeError):
    pass


_client: Optional[AsyncOpenAI] = None
_client_key: Optional[str] = None


def get_api_key() -> Optional[str]:
    key = (os.getenv("OPENAI_API_KEY") or "").strip()
    return key or None


def get_openai_client() -> AsyncOpenAI:
    """
    Lazily create and cache the OpenAI client.

    The key is read on every call so a rotated OPENAI_API_KEY takes effect
    without a restart.
    """
    global _client, _client_key

    api_key = get_api_key()
    if not api_key:
        raise MissingAPIKeyError("API key not configured")

    if _client is None or _client_key != api_key:
        _client = AsyncOpenAI(
            api_key=api_key,
            base_url=OPENAI_BASE_URL,
            timeout=OPENAI_TIMEOUT_SECONDS,
        )
        _client_key = api_key
    return _client


def api_error_message(error: Exception) -> str:
    """Prefer the message from the API's error body over the SDK's summary."""
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        message = body.get("message")
        if not message and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        if message:
            return str(message)
    return str(error)
