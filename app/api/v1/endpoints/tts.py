from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.api.deps import get_tts_service
from app.schemas.tts import TTSRequest
from app.services.tts_service import TTSService

router = APIRouter(prefix="", tags=["tts"])


@router.post("", response_class=Response)
async def text_to_speech(
    data: TTSRequest,
    tts: Annotated[TTSService, Depends(get_tts_service)],
) -> Response:
    """Speak a roast or verdict; returns MP3 audio."""
    audio = await tts.synthesize(data.text, data.voice_id, data.model_id)
    return Response(content=audio, media_type="audio/mpeg")
