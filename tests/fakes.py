# tests/fakes.py

from __future__ import annotations

from types import SimpleNamespace
from typing import Any


class FakeAPIError(Exception):
    """Mimics openai.APIStatusError: the error body carries the message."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Error code: 400 - {message}")
        self.body = {"message": message}


class _FakeTranscriptions:
    def __init__(self, owner: "FakeOpenAIClient") -> None:
        self._owner = owner

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self._owner.transcription_calls.append(kwargs)
        if self._owner.error is not None:
            raise self._owner.error
        return SimpleNamespace(text=self._owner.transcript)


class _FakeCompletions:
    def __init__(self, owner: "FakeOpenAIClient") -> None:
        self._owner = owner

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self._owner.completion_calls.append(kwargs)
        if self._owner.error is not None:
            raise self._owner.error
        message = SimpleNamespace(content=self._owner.completion)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    """
    Deterministic stand-in for openai.AsyncOpenAI.

    - Captures request kwargs for assertions
    - Returns a predefined transcript / completion
    - Raises `error` from every call when set
    """

    def __init__(self, transcript: str | None = "", completion: str = "{}") -> None:
        self.transcript = transcript
        self.completion = completion
        self.error: Exception | None = None
        self.transcription_calls: list[dict[str, Any]] = []
        self.completion_calls: list[dict[str, Any]] = []
        self.audio = SimpleNamespace(transcriptions=_FakeTranscriptions(self))
        self.chat = SimpleNamespace(completions=_FakeCompletions(self))
