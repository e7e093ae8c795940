"""
Conversation and message schemas
"""
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

from ..config.settings import settings


class ConversationResponse(BaseModel):
    """Response schema for conversation"""
    id: int
    user_id: int
    title: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class ConversationCreateRequest(BaseModel):
    """Schema for creating a new conversation"""
    title: str = "New Conversation"

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            return "New Conversation"
        return v.strip()


class ConversationUpdateRequest(BaseModel):
    """Schema for renaming a conversation"""
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class MessageResponse(BaseModel):
    """Response schema for a single message"""
    id: Optional[int] = None
    conversation_id: Optional[int] = None
    role: Literal["user", "assistant"]
    content: str
    attachment_data_uri: Optional[str] = None
    created_at: Optional[str] = None
    status: Optional[Literal["thinking"]] = Field(None, description="Transient client-side state")

    class Config:
        from_attributes = True


class MessageUpdateRequest(BaseModel):
    """Schema for editing a message"""
    content: str = Field(..., min_length=1, max_length=settings.USER_MESSAGE_MAX_LENGTH)
