"""
Voice Service for speech-to-text and text-to-speech
Transcription uses OpenAI Whisper, synthesis uses the Eleven Labs HTTP API
"""
import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

from ..config.settings import settings
from ..utils.data_uri import DataURI, parse_data_uri, build_data_uri

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "You have exceeded the API quota for audio generation. Please check your plan and billing details."
BUSY_MESSAGE = "The audio service is currently busy. Please try again in a moment."
GENERIC_TTS_MESSAGE = "Failed to generate audio. Please try again."


class VoiceError(Exception):
    """Speech failure carrying a user-facing message and HTTP status"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def map_tts_error(status_code: Optional[int], detail: str = "") -> VoiceError:
    """Translate a provider failure into the notice shown to the user"""
    if status_code == 429 or "exceeded your current quota" in (detail or "").lower():
        return VoiceError(QUOTA_MESSAGE, 429)
    if status_code == 503:
        return VoiceError(BUSY_MESSAGE, 503)
    return VoiceError(GENERIC_TTS_MESSAGE, 502)


class VoiceService:
    """
    Voice service for audio transcription and synthesis
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.whisper_model = settings.VOICE_TRANSCRIPTION_MODEL
        self.max_file_size = settings.MAX_AUDIO_SIZE
        self.supported_formats = ['mp3', 'mp4', 'mpeg', 'mpga', 'm4a', 'wav', 'webm', 'ogg']
        self._http_client = http_client
        self._openai = None

    @property
    def openai_client(self) -> AsyncOpenAI:
        if self._openai is None:
            self._openai = AsyncOpenAI(api_key=settings.OPENAI_API_KEY or None)
        return self._openai

    # ==================== SPEECH TO TEXT ====================

    def _validate_audio(self, audio: DataURI):
        if not audio.is_audio:
            raise VoiceError("Only audio recordings can be transcribed.", 400)
        if not audio.data:
            raise VoiceError("The recording is empty.", 400)
        if len(audio.data) > self.max_file_size:
            raise VoiceError("The recording is too large to transcribe.", 413)
        if audio.extension not in self.supported_formats:
            raise VoiceError(f"Unsupported audio format: {audio.mime_type}", 400)

    async def transcribe(self, audio_data_uri: str) -> str:
        """
        Transcribe a recorded clip with Whisper

        Raises:
            VoiceError: invalid input or provider failure
            DataURIError: malformed data URI
        """
        audio = parse_data_uri(audio_data_uri)
        self._validate_audio(audio)

        filename = f"recording.{audio.extension}"
        logger.info(f"🎙️ Transcribing {len(audio.data)} bytes of {audio.mime_type}")
        try:
            result = await self.openai_client.audio.transcriptions.create(
                model=self.whisper_model,
                file=(filename, audio.data, audio.mime_type),
            )
        except Exception as e:
            logger.error(f"❌ Transcription failed: {str(e)}")
            raise VoiceError("Failed to transcribe audio. Please try again.", 502)

        transcription = (getattr(result, "text", "") or "").strip()
        logger.info(f"✅ Transcribed {len(transcription)} chars")
        return transcription

    # ==================== TEXT TO SPEECH ====================

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> str:
        """
        Synthesize speech and return it as an audio/mpeg data URI

        Raises:
            VoiceError: with the quota, busy or generic message
        """
        if not settings.ELEVEN_LABS_API_KEY:
            logger.error("❌ Eleven Labs API key not configured")
            raise VoiceError(GENERIC_TTS_MESSAGE, 500)

        voice_id = voice_id or settings.DEFAULT_VOICE_ID
        url = f"{settings.ELEVEN_LABS_BASE_URL}/text-to-speech/{voice_id}"
        headers = {
            "xi-api-key": settings.ELEVEN_LABS_API_KEY,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg"
        }
        payload = {
            "text": text,
            "model_id": settings.ELEVEN_LABS_MODEL_ID,
            "voice_settings": {
                "stability": settings.ELEVEN_LABS_STABILITY,
                "similarity_boost": settings.ELEVEN_LABS_SIMILARITY_BOOST
            }
        }

        logger.info(f"🔊 Requesting speech for {len(text)} chars with voice_id: {voice_id}")
        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.TTS_TIMEOUT_SECONDS) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ Eleven Labs request failed: {str(e)}")
            raise map_tts_error(None, str(e))

        if response.status_code != 200:
            logger.error(f"❌ Eleven Labs API error: {response.status_code} - {response.text[:500]}")
            raise map_tts_error(response.status_code, response.text)

        mime_type = response.headers.get("content-type", "audio/mpeg").split(";")[0].strip() or "audio/mpeg"
        logger.info(f"✅ Generated {len(response.content)} bytes of audio")
        return build_data_uri(response.content, mime_type)
