"""Speech endpoints: text-to-speech and transcription."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from maos_ai.api.deps import get_speech_router, get_transcriber
from maos_ai.api.ratelimit import RATE_LIMIT_AI, limiter
from maos_ai.api.schemas import TranscriptionResponseBody, TtsResponseBody, encode_data_uri
from maos_ai.domain.speech.router import SpeechRouter
from maos_ai.infrastructure.speech.transcription import WhisperTranscriber
from maos_ai.shared.concurrency import cancel_on_disconnect
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["speech"])


@router.post("/tts", response_model=TtsResponseBody)
@limiter.limit(RATE_LIMIT_AI)
async def text_to_speech(
    request: Request,
    speech_router: Annotated[SpeechRouter, Depends(get_speech_router)],
) -> TtsResponseBody | JSONResponse:
    """Synthesize ``{text}`` into a single ``data:audio/mp3;base64,...`` URI."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    text = payload.get("text") if isinstance(payload, dict) else None
    if not isinstance(text, str) or not text.strip():
        return JSONResponse(status_code=400, content={"error": "Texte manquant"})

    audio = await cancel_on_disconnect(request, speech_router.synthesize(text))
    logger.info("tts_generated", provider=audio.provider, size=len(audio.audio))
    return TtsResponseBody(audio_data_uri=encode_data_uri(audio))


@router.post("/transcribe", response_model=TranscriptionResponseBody)
@limiter.limit(RATE_LIMIT_AI)
async def transcribe(
    request: Request,
    transcriber: Annotated[WhisperTranscriber, Depends(get_transcriber)],
    audio: Annotated[UploadFile | None, File()] = None,
) -> TranscriptionResponseBody | JSONResponse:
    """Transcribe a recorded voice message (multipart field ``audio``)."""
    if audio is None:
        return JSONResponse(status_code=400, content={"error": "Fichier audio manquant"})

    data = await audio.read()
    if not data:
        return JSONResponse(status_code=400, content={"error": "Fichier audio vide"})

    text = await cancel_on_disconnect(
        request,
        transcriber.transcribe(
            data,
            filename=audio.filename or "audio.webm",
            content_type=audio.content_type,
        ),
    )
    return TranscriptionResponseBody(text=text)
