from pydantic import BaseModel, Field


class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    target_language: str = Field(..., min_length=2, max_length=5)  # ISO code


class TranslateResponse(BaseModel):
    translated_text: str
    source_language: str = "auto"
    target_language: str
