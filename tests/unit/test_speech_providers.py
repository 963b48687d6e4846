"""Unit tests for the Azure and OpenAI speech providers."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from maos_ai.infrastructure.speech.azure import (
    AZURE_MAX_INPUT_CHARS,
    AzureSpeechProvider,
    build_ssml,
    escape_ssml,
)
from maos_ai.infrastructure.speech.openai_tts import (
    OPENAI_TTS_MAX_INPUT_CHARS,
    OpenAISpeechProvider,
)
from maos_ai.infrastructure.speech.transcription import WhisperTranscriber
from maos_ai.shared.exceptions import (
    CredentialMissing,
    ProviderRejected,
    ProviderUnavailable,
    TranscriptionError,
)

from conftest import openai_over_transport, openai_request


def _azure(settings, handler) -> tuple[AzureSpeechProvider, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return AzureSpeechProvider(settings, client=client), seen


def _openai_tts(settings, side_effect=None) -> OpenAISpeechProvider:
    client = MagicMock()
    client.audio.speech.create = AsyncMock(
        return_value=MagicMock(content=b"ID3-openai"),
        side_effect=side_effect,
    )
    return OpenAISpeechProvider(settings, client=client)


class TestSsml:
    """Test SSML construction."""

    def test_escape_markup_characters(self):
        """Test that &, < and > are escaped."""
        assert escape_ssml("A & B <b>gras</b>") == "A &amp; B &lt;b&gt;gras&lt;/b&gt;"

    def test_build_ssml(self):
        """Test voice, locale and speaking rate of the document."""
        ssml = build_ssml("مرحبا", "ar-MA-MounaNeural", "ar-MA")

        assert "xml:lang='ar-MA'" in ssml
        assert "<voice name='ar-MA-MounaNeural'>" in ssml
        assert "rate='0.95'" in ssml
        assert "مرحبا" in ssml


class TestAzureSpeechProvider:
    """Test the script-optimized provider."""

    @pytest.mark.asyncio
    async def test_synthesize(self, test_settings):
        """Test the outbound request and the returned audio."""
        provider, seen = _azure(test_settings, lambda r: httpx.Response(200, content=b"ID3-azure"))

        audio = await provider.synthesize("السلام عليكم & مرحبا")

        assert audio.audio == b"ID3-azure"
        assert audio.provider == "azure_speech"
        assert audio.mime_type == "audio/mp3"
        request = seen[0]
        assert str(request.url) == (
            "https://westeurope.tts.speech.microsoft.com/cognitiveservices/v1"
        )
        assert request.headers["Ocp-Apim-Subscription-Key"] == "azure-test-key"
        assert request.headers["Content-Type"] == "application/ssml+xml"
        assert "&amp;" in request.content.decode("utf-8")

    @pytest.mark.asyncio
    async def test_long_text_is_truncated(self, test_settings):
        """Test that only the first 5000 characters are sent."""
        provider, seen = _azure(test_settings, lambda r: httpx.Response(200, content=b"ID3"))

        await provider.synthesize("ب" * 6000)

        body = seen[0].content.decode("utf-8")
        assert body.count("ب") == AZURE_MAX_INPUT_CHARS

    @pytest.mark.asyncio
    async def test_missing_key(self, test_settings):
        """Test that a missing key fails without a request."""
        settings = test_settings.model_copy(update={"azure_speech_key": ""})
        provider, seen = _azure(settings, lambda r: httpx.Response(200))

        with pytest.raises(CredentialMissing):
            await provider.synthesize("مرحبا")

        assert seen == []

    @pytest.mark.asyncio
    async def test_error_status_is_rejected(self, test_settings):
        """Test that a non-2xx status is a rejection."""
        provider, _ = _azure(test_settings, lambda r: httpx.Response(401, text="Unauthorized"))

        with pytest.raises(ProviderRejected) as exc_info:
            await provider.synthesize("مرحبا")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_error_is_unavailable(self, test_settings):
        """Test that a transport failure is an outage."""

        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable")

        provider, _ = _azure(test_settings, fail)

        with pytest.raises(ProviderUnavailable):
            await provider.synthesize("مرحبا")

    @pytest.mark.asyncio
    async def test_empty_audio_is_rejected(self, test_settings):
        """Test that a 200 without audio bytes is a rejection."""
        provider, _ = _azure(test_settings, lambda r: httpx.Response(200, content=b""))

        with pytest.raises(ProviderRejected) as exc_info:
            await provider.synthesize("مرحبا")

        assert exc_info.value.status_code == 200


class TestOpenAISpeechProvider:
    """Test the general-purpose provider."""

    @pytest.mark.asyncio
    async def test_synthesize(self, test_settings):
        """Test the SDK call parameters."""
        provider = _openai_tts(test_settings)

        audio = await provider.synthesize("Bonjour")

        assert audio.audio == b"ID3-openai"
        assert audio.provider == "openai_tts"
        provider.client.audio.speech.create.assert_awaited_once_with(
            model="tts-1-hd",
            voice="alloy",
            input="Bonjour",
            speed=0.92,
            response_format="mp3",
        )

    @pytest.mark.asyncio
    async def test_long_text_is_truncated(self, test_settings):
        """Test that only the first 4000 characters are sent."""
        provider = _openai_tts(test_settings)

        await provider.synthesize("a" * 6000)

        sent = provider.client.audio.speech.create.call_args.kwargs["input"]
        assert len(sent) == OPENAI_TTS_MAX_INPUT_CHARS

    @pytest.mark.asyncio
    async def test_missing_key(self, test_settings):
        """Test that a missing key fails without an SDK call."""
        provider = _openai_tts(test_settings.model_copy(update={"openai_api_key": ""}))

        with pytest.raises(CredentialMissing):
            await provider.synthesize("Bonjour")

        provider.client.audio.speech.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_status_error_is_rejected(self, test_settings):
        """Test that an API status error is a rejection."""
        error = openai.BadRequestError(
            "bad voice",
            response=httpx.Response(400, request=openai_request()),
            body=None,
        )
        provider = _openai_tts(test_settings, side_effect=error)

        with pytest.raises(ProviderRejected) as exc_info:
            await provider.synthesize("Bonjour")

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, test_settings):
        """Test that a connection failure is an outage."""
        provider = _openai_tts(
            test_settings, side_effect=openai.APIConnectionError(request=openai_request())
        )

        with pytest.raises(ProviderUnavailable):
            await provider.synthesize("Bonjour")

    @pytest.mark.asyncio
    async def test_empty_audio_is_rejected(self, test_settings):
        """Test that an empty audio body is a rejection."""
        provider = _openai_tts(test_settings)
        provider.client.audio.speech.create.return_value = MagicMock(content=b"")

        with pytest.raises(ProviderRejected):
            await provider.synthesize("Bonjour")


class TestWhisperTranscriber:
    """Test speech-to-text."""

    @pytest.mark.asyncio
    async def test_transcribe(self, test_settings):
        """Test that audio is sent without a forced language."""
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(return_value=MagicMock(text="azul"))
        transcriber = WhisperTranscriber(test_settings, client=client)

        text = await transcriber.transcribe(b"audio", filename="note.webm", content_type="audio/webm")

        assert text == "azul"
        kwargs = client.audio.transcriptions.create.call_args.kwargs
        assert kwargs["file"] == ("note.webm", b"audio", "audio/webm")
        assert "language" not in kwargs

    @pytest.mark.asyncio
    async def test_missing_key(self, test_settings):
        """Test that transcription needs the OpenAI key."""
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock()
        transcriber = WhisperTranscriber(
            test_settings.model_copy(update={"openai_api_key": ""}), client=client
        )

        with pytest.raises(TranscriptionError):
            await transcriber.transcribe(b"audio")

        client.audio.transcriptions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_error(self, test_settings):
        """Test that an unreachable API is reported as a transcription error."""
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=openai_request())
        )
        transcriber = WhisperTranscriber(test_settings, client=client)

        with pytest.raises(TranscriptionError):
            await transcriber.transcribe(b"audio")

    @pytest.mark.asyncio
    async def test_html_body_is_transcription_error(self, test_settings):
        """Test that a 200 page without a transcript is reported as an error."""
        sdk = openai_over_transport(
            lambda request: httpx.Response(
                200, text="<html>Bad gateway</html>", headers={"content-type": "text/html"}
            )
        )
        transcriber = WhisperTranscriber(test_settings, client=sdk)

        with pytest.raises(TranscriptionError):
            await transcriber.transcribe(b"audio", filename="note.webm", content_type="audio/webm")
