# tests/conftest.py

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

import main
from services.task_extraction import TaskExtractionService
from services.transcription import TranscriptionService

from .fakes import FakeOpenAIClient


@pytest.fixture()
def fake_client() -> FakeOpenAIClient:
    return FakeOpenAIClient(transcript="remind me to call Arjun", completion='{"tasks": []}')


@pytest.fixture()
def api(monkeypatch: pytest.MonkeyPatch, fake_client: FakeOpenAIClient) -> TestClient:
    """
    TestClient with both services wired to the fake OpenAI client.

    A dummy key is set because the routes refuse to run without one.
    """
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(main, "transcription_service", TranscriptionService(client=fake_client))
    monkeypatch.setattr(main, "task_extraction_service", TaskExtractionService(client=fake_client))
    return TestClient(main.app)


@pytest.fixture()
def audio_b64() -> str:
    return base64.b64encode(b"\x1aE\xdf\xa3" + b"\x00" * 1020).decode("ascii")
