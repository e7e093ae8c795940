"""
Media routes: image generation, speech and document summaries
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.base import get_db
from ...models.user import User
from ...middleware.auth import require_auth
from ...schemas.media import (
    ImageRequest,
    ImageResponse,
    SpeechToTextRequest,
    SpeechToTextResponse,
    TextToSpeechRequest,
    TextToSpeechResponse,
    SummarizeRequest,
    SummarizeResponse
)
from ...services.generation_service import GenerationService
from ...services.image_service import ImageService, ImageGenerationError
from ...services.voice_service import VoiceService, VoiceError
from ...utils.data_uri import DataURIError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])

# Initialize services
image_service = ImageService()
voice_service = VoiceService()
generation_service = GenerationService()


@router.post("/image", response_model=ImageResponse)
async def generate_image(
    request: ImageRequest,
    current_user: Dict[str, Any] = Depends(require_auth)
):
    try:
        image_data_uri = await image_service.generate_image(request.prompt)
        return ImageResponse(image_data_uri=image_data_uri)
    except ImageGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/speech-to-text", response_model=SpeechToTextResponse)
async def speech_to_text(
    request: SpeechToTextRequest,
    current_user: Dict[str, Any] = Depends(require_auth)
):
    try:
        transcription = await voice_service.transcribe(request.audio_data_uri)
        return SpeechToTextResponse(transcription=transcription)
    except DataURIError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except VoiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/text-to-speech", response_model=TextToSpeechResponse)
async def text_to_speech(
    request: TextToSpeechRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Synthesize speech with the requested voice or the user's preferred one"""
    voice = request.voice
    if not voice:
        user = await db.get(User, current_user["id"])
        voice = user.voice if user else None

    try:
        audio_data_uri = await voice_service.synthesize(request.text, voice)
        return TextToSpeechResponse(audio_data_uri=audio_data_uri)
    except VoiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_document(
    request: SummarizeRequest,
    current_user: Dict[str, Any] = Depends(require_auth)
):
    try:
        summary = await generation_service.summarize_document(request.document_data_uri)
        return SummarizeResponse(summary=summary)
    except DataURIError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Document summary failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to summarize document. Please try again.")
