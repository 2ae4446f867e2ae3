import logging
import traceback
from typing import Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.constants.voice_constants import (
    APP_ENV,
    HOST,
    LOG_LEVEL,
    MIN_NOTE_VOICE_BYTES,
    MIN_VOICE_BYTES,
    NOTE_TRANSCRIPTION_PROMPT,
    PORT,
    PROCESS_TRANSCRIPTION_PROMPT,
)
from core.utils.audio_utils import InvalidAudioError, decode_audio
from core.utils.openai_utils import get_api_key
from schemas.voice import (
    TranscribeRequest,
    TranscribeResponse,
    VoiceProcessRequest,
    VoiceProcessResponse,
)
from services.task_extraction import TODO_CONTEXT, ExtractionError, TaskExtractionService
from services.transcription import TranscriptionError, TranscriptionService

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Voice Relay API",
    description="Relays recorded speech to transcription and extracts calendar events or tasks",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize the OpenAI-backed services
transcription_service = TranscriptionService()
task_extraction_service = TaskExtractionService()


def service_error(error: Exception, fallback: str) -> HTTPException:
    detail = str(error) or fallback
    if APP_ENV == "development":
        detail = {"error": detail, "details": traceback.format_exc()}
    return HTTPException(status_code=500, detail=detail)


def decode_or_reject(encoded: str, min_bytes: int, message: str) -> bytes:
    try:
        audio = decode_audio(encoded)
    except InvalidAudioError as e:
        logger.warning("Rejected audio payload: %s", str(e))
        raise HTTPException(status_code=400, detail=message)
    if len(audio) < min_bytes:
        raise HTTPException(status_code=400, detail=message)
    return audio


def log_startup() -> None:
    logger.info(
        "Voice relay running on http://%s:%d (POST /api/voice/process, POST /api/voice/transcribe, GET /health)",
        HOST, PORT,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unmatched paths and unsupported methods both render as not found.
    if (exc.status_code == 404 and exc.detail == "Not Found") or exc.status_code == 405:
        return JSONResponse(status_code=404, content={"error": "Not found", "path": request.url.path})
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root() -> Dict[str, str]:
    return {"message": "Welcome to Voice Relay API"}

@app.get("/health")
async def health_check() -> Dict[str, str]:
    return {"status": "ok", "message": "Voice relay backend is running"}

@app.post("/api/voice/process", response_model=VoiceProcessResponse)
async def process_voice(request: VoiceProcessRequest) -> VoiceProcessResponse:
    """
    Transcribe recorded audio and extract calendar events or tasks from it.
    """
    if not request.audio or not request.context:
        raise HTTPException(status_code=400, detail="Missing audio or context")

    if not get_api_key():
        raise HTTPException(status_code=500, detail="API key not configured")

    audio = decode_or_reject(
        request.audio,
        MIN_VOICE_BYTES,
        "No usable audio captured. Record for 1-2 seconds and try again.",
    )

    logger.info(
        "Transcribing audio... mime=%s bytes=%d clientBytes=%s",
        request.mimeType or "unknown", len(audio), request.byteLength or "n/a",
    )
    try:
        transcript = await transcription_service.transcribe(
            audio, request.mimeType, prompt=PROCESS_TRANSCRIPTION_PROMPT
        )
    except TranscriptionError as e:
        logger.error("Error: %s", str(e))
        raise service_error(e, "Processing failed")

    if not transcript.strip():
        raise HTTPException(status_code=400, detail="Could not transcribe audio")

    logger.info('Transcript: "%s"', transcript)
    logger.info("Parsing transcript (context: %s)...", request.context)
    try:
        parsed = await task_extraction_service.parse_transcript(transcript, request.context)
    except ExtractionError as e:
        logger.error("Error: %s", str(e))
        raise service_error(e, "Processing failed")

    if request.context == TODO_CONTEXT:
        parsed = task_extraction_service.ensure_tasks(parsed, transcript)

    logger.info("Processing complete")
    return VoiceProcessResponse(transcript=transcript, parsed=parsed, context=request.context)

@app.post("/api/voice/transcribe", response_model=TranscribeResponse)
async def transcribe_voice(request: TranscribeRequest) -> TranscribeResponse:
    """
    Transcribe recorded audio and return plain text only.
    """
    if not request.audio:
        raise HTTPException(status_code=400, detail="Missing audio")

    if not get_api_key():
        raise HTTPException(status_code=500, detail="API key not configured")

    audio = decode_or_reject(
        request.audio,
        MIN_NOTE_VOICE_BYTES,
        "Audio is too short. Try speaking for at least 1 second.",
    )

    logger.info(
        "Notes transcription... mime=%s bytes=%d clientBytes=%s",
        request.mimeType or "unknown", len(audio), request.byteLength or "n/a",
    )
    try:
        transcript = await transcription_service.transcribe(
            audio, request.mimeType, prompt=NOTE_TRANSCRIPTION_PROMPT
        )
    except TranscriptionError as e:
        logger.error("Notes transcription error: %s", str(e))
        raise service_error(e, "Transcription failed")

    if not transcript.strip():
        raise HTTPException(status_code=400, detail="Could not transcribe audio")

    return TranscribeResponse(transcript=transcript)

if __name__ == "__main__":
    import uvicorn
    log_startup()
    uvicorn.run(app, host=HOST, port=PORT)
