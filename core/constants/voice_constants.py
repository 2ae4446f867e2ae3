import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))
APP_ENV = os.getenv("APP_ENV", "production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))

TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
TRANSCRIPTION_LANGUAGE = os.getenv("TRANSCRIPTION_LANGUAGE", "en").strip()
EXTRACTION_MODEL = os.getenv("EXTRACTION_MODEL", "gpt-4.1-mini")

ASSISTANT_USER_NAME = os.getenv("ASSISTANT_USER_NAME", "the user")

MIN_VOICE_BYTES = 512
MIN_NOTE_VOICE_BYTES = 128

DEFAULT_AUDIO_MIME_TYPE = "audio/webm"
AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/mp4": "mp4",
    "audio/x-m4a": "m4a",
    "audio/m4a": "m4a",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/ogg": "ogg",
}

PROCESS_TRANSCRIPTION_PROMPT = (
    "Transcribe clear spoken English for a personal productivity app."
)
NOTE_TRANSCRIPTION_PROMPT = (
    "Transcribe spoken English note text accurately. Prefer English words only."
)
