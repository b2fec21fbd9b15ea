import httpx
import pytest
from httpx import AsyncClient

from app.core.exceptions import ErrorCode, ServiceUnavailableError, UpstreamServiceError
from app.services.tts_service import TTSService


@pytest.mark.asyncio
async def test_translate(client: AsyncClient):
    response = await client.post(
        "/api/v1/translate", json={"text": "Your repos are mostly forks.", "target_language": "es"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "translated_text": "[es] Your repos are mostly forks.",
        "source_language": "auto",
        "target_language": "es",
    }


@pytest.mark.asyncio
async def test_translate_rejects_empty_text(client: AsyncClient):
    response = await client.post("/api/v1/translate", json={"text": "", "target_language": "es"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_tts_returns_audio(client: AsyncClient, fake_tts):
    response = await client.post(
        "/api/v1/tts", json={"text": "Ship it.", "voice_id": "voice-1"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == b"ID3-fake-mp3"
    assert fake_tts.requests == [("Ship it.", "voice-1", None)]


@pytest.mark.asyncio
async def test_tts_service_posts_to_elevenlabs():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"mp3-bytes")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    tts = TTSService(api_key="xi-key", default_model="eleven_turbo", client=client)

    audio = await tts.synthesize("hello", "voice-9")
    await tts.aclose()

    assert audio == b"mp3-bytes"
    assert seen[0].url.path == "/v1/text-to-speech/voice-9"
    assert seen[0].headers["xi-api-key"] == "xi-key"
    assert b'"model_id":"eleven_turbo"' in seen[0].content.replace(b" ", b"")


@pytest.mark.asyncio
async def test_tts_service_upstream_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(401)))
    tts = TTSService(api_key="xi-key", client=client)

    with pytest.raises(UpstreamServiceError) as exc_info:
        await tts.synthesize("hello", "voice-9")
    await tts.aclose()

    assert exc_info.value.code == ErrorCode.TTS_ERROR
    assert exc_info.value.metadata["upstream_status"] == 401


@pytest.mark.asyncio
async def test_tts_service_requires_api_key():
    tts = TTSService(api_key="")

    with pytest.raises(ServiceUnavailableError):
        await tts.synthesize("hello", "voice-9")
    await tts.aclose()
