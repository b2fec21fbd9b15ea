from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_llm_service
from app.schemas.translate import TranslateRequest, TranslateResponse
from app.services.llm_service import LLMService

router = APIRouter(prefix="", tags=["translate"])


@router.post("", response_model=TranslateResponse)
async def translate(
    data: TranslateRequest,
    llm: Annotated[LLMService, Depends(get_llm_service)],
) -> TranslateResponse:
    translated = await llm.translate(data.text, data.target_language)
    return TranslateResponse(
        translated_text=translated,
        target_language=data.target_language,
    )
