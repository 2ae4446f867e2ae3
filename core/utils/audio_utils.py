import base64
import binascii
from typing import NamedTuple, Optional

from core.constants.voice_constants import AUDIO_EXTENSIONS, DEFAULT_AUDIO_MIME_TYPE


_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


class InvalidAudioError(ValueError):
    pass


class AudioFileMeta(NamedTuple):
    filename: str
    content_type: str


def decode_audio(encoded: str) -> bytes:
    """
    Decode a base64 audio payload from the client.

    Browsers that send a data URL (``data:audio/webm;base64,...``) are
    accepted too; only the part after the comma is decoded. The URL-safe
    alphabet (``-`` and ``_``) decodes the same as the standard one.
    """
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]
    try:
        compact = "".join(encoded.split())
        compact = compact.translate(_URLSAFE_TO_STANDARD)
        compact += "=" * (-len(compact) % 4)
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidAudioError(f"Invalid base64 audio: {str(e)}")


def get_audio_file_meta(mime_type: Optional[str]) -> AudioFileMeta:
    normalized = (mime_type or DEFAULT_AUDIO_MIME_TYPE).split(";")[0].strip().lower()
    extension = AUDIO_EXTENSIONS.get(normalized, "webm")
    return AudioFileMeta(
        filename=f"audio.{extension}",
        content_type=normalized or DEFAULT_AUDIO_MIME_TYPE,
    )
