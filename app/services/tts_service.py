"""ElevenLabs text-to-speech."""

import logging

import httpx

from app.core.exceptions import ErrorCode, ServiceUnavailableError, UpstreamServiceError

logger = logging.getLogger(__name__)

ELEVENLABS_API_BASE = "https://api.elevenlabs.io/v1"


class TTSService:
    def __init__(
        self,
        api_key: str,
        default_model: str = "eleven_multilingual_v2",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def synthesize(self, text: str, voice_id: str, model_id: str | None = None) -> bytes:
        """Render ``text`` with the given voice; returns MP3 bytes."""
        if not self.api_key:
            raise ServiceUnavailableError("ELEVENLABS_API_KEY is not configured")

        try:
            response = await self._client.post(
                f"{ELEVENLABS_API_BASE}/text-to-speech/{voice_id}",
                json={"text": text, "model_id": model_id or self.default_model},
                headers={
                    "xi-api-key": self.api_key,
                    "Accept": "audio/mpeg",
                    "Content-Type": "application/json",
                },
            )
        except httpx.RequestError as e:
            logger.warning("Network error calling ElevenLabs: %s", e)
            raise UpstreamServiceError(
                f"Network error connecting to ElevenLabs: {e}", code=ErrorCode.TTS_ERROR
            ) from e

        if response.is_error:
            logger.warning(
                "ElevenLabs returned %d for voice %s", response.status_code, voice_id
            )
            raise UpstreamServiceError(
                f"ElevenLabs API error: {response.status_code}",
                code=ErrorCode.TTS_ERROR,
                metadata={"upstream_status": response.status_code},
            )
        return response.content
