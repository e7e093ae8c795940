"""
Media schemas (images, speech, documents)
"""
from typing import Optional
from pydantic import BaseModel, Field


class ImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)


class ImageResponse(BaseModel):
    image_data_uri: str


class SpeechToTextRequest(BaseModel):
    audio_data_uri: str = Field(..., description="Recorded audio as a base64 data URI")


class SpeechToTextResponse(BaseModel):
    transcription: str


class TextToSpeechRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=10000)
    voice: Optional[str] = Field(None, description="Voice id; defaults to the user's preferred voice")


class TextToSpeechResponse(BaseModel):
    audio_data_uri: str


class SummarizeRequest(BaseModel):
    document_data_uri: str


class SummarizeResponse(BaseModel):
    summary: str
