from pydantic import BaseModel
from typing import Any, Dict, Optional

class TranscribeRequest(BaseModel):
    audio: Optional[str] = None
    mimeType: Optional[str] = None
    byteLength: Optional[int] = None

class VoiceProcessRequest(TranscribeRequest):
    context: Optional[str] = None

class TranscribeResponse(BaseModel):
    transcript: str

class VoiceProcessResponse(BaseModel):
    transcript: str
    parsed: Dict[str, Any]
    context: str
