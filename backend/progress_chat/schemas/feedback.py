"""
Feedback schemas
"""
from typing import Optional, Literal
from pydantic import BaseModel, Field


class FeedbackRequest(BaseModel):
    """Request schema for message feedback"""
    message_id: int
    rating: Literal["like", "dislike"]
    reason: Optional[str] = Field(None, max_length=2000)


class FeedbackResponse(BaseModel):
    """Response schema for feedback"""
    success: bool
    message: str
    feedback_id: Optional[int] = None


class FeedbackRecord(BaseModel):
    id: int
    user_id: int
    conversation_id: int
    message_id: int
    message_content: str
    rating: str
    reason: Optional[str] = None
    submitted_at: Optional[str] = None
