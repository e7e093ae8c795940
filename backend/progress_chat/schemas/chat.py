"""
Chat-related schemas
"""
from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, model_validator

from ..config.settings import settings
from .conversation import MessageResponse

ChatMode = Literal["standard", "search", "thinkDeep"]


class ChatRequest(BaseModel):
    """Request schema for chat messages"""
    conversation_id: Optional[int] = Field(None, description="Existing conversation; a new one is created when omitted")
    message: str = Field(default="", max_length=settings.USER_MESSAGE_MAX_LENGTH, description="User message (can be empty if an image is attached)")
    attachment_data_uri: Optional[str] = Field(None, description="Image attachment as a base64 data URI")
    mode: ChatMode = Field(default="standard", description="Response mode: 'standard', 'search' or 'thinkDeep'")

    @model_validator(mode='after')
    def validate_message_or_attachment(self):
        self.message = (self.message or "").strip()
        if not self.message and not self.attachment_data_uri:
            raise ValueError('Either message or attachment must be provided')
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "conversation_id": None,
                "message": "Plan a three day trip to Lisbon",
                "attachment_data_uri": None,
                "mode": "standard"
            }
        }


class RegenerateRequest(BaseModel):
    """Request schema for regenerating the last reply"""
    conversation_id: int
    mode: ChatMode = "standard"


class ChatResponse(BaseModel):
    """Response schema for chat completion"""
    conversation_id: int
    title: str
    user_message: Optional[MessageResponse] = None
    message: MessageResponse

    class Config:
        json_schema_extra = {
            "example": {
                "conversation_id": 12,
                "title": "Lisbon Trip Planning",
                "user_message": {
                    "id": 40,
                    "conversation_id": 12,
                    "role": "user",
                    "content": "Plan a three day trip to Lisbon",
                    "created_at": "2025-10-06T10:30:00Z"
                },
                "message": {
                    "id": 41,
                    "conversation_id": 12,
                    "role": "assistant",
                    "content": "Here's a relaxed three day plan...",
                    "created_at": "2025-10-06T10:30:04Z"
                }
            }
        }


class StreamChunk(BaseModel):
    """Streaming response chunk"""
    type: str = Field(..., description="Chunk type: 'token', 'metadata', 'done', 'error'")
    content: Optional[str] = Field(None, description="Token content for type='token'")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Metadata for type='metadata' and type='done'")
    error: Optional[str] = Field(None, description="Error message for type='error'")

    class Config:
        json_schema_extra = {
            "example": {
                "type": "token",
                "content": "Hello",
                "metadata": None,
                "error": None
            }
        }
