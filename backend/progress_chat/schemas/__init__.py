"""
Pydantic schemas for request/response validation
"""
from .auth import (
    SignupRequest, LoginRequest, ForgotPasswordRequest, ResetPasswordRequest,
    AuthResponse, StatusResponse
)
from .profile import Location, ProfileResponse, ProfileUpdateRequest, MemoryResponse, MemoryUpdateRequest
from .conversation import (
    ConversationResponse, ConversationCreateRequest, ConversationUpdateRequest,
    MessageResponse, MessageUpdateRequest
)
from .chat import ChatMode, ChatRequest, RegenerateRequest, ChatResponse, StreamChunk
from .feedback import FeedbackRequest, FeedbackResponse, FeedbackRecord
from .media import (
    ImageRequest, ImageResponse, SpeechToTextRequest, SpeechToTextResponse,
    TextToSpeechRequest, TextToSpeechResponse, SummarizeRequest, SummarizeResponse
)

__all__ = [
    "SignupRequest", "LoginRequest", "ForgotPasswordRequest", "ResetPasswordRequest",
    "AuthResponse", "StatusResponse",
    "Location", "ProfileResponse", "ProfileUpdateRequest", "MemoryResponse", "MemoryUpdateRequest",
    "ConversationResponse", "ConversationCreateRequest", "ConversationUpdateRequest",
    "MessageResponse", "MessageUpdateRequest",
    "ChatMode", "ChatRequest", "RegenerateRequest", "ChatResponse", "StreamChunk",
    "FeedbackRequest", "FeedbackResponse", "FeedbackRecord",
    "ImageRequest", "ImageResponse", "SpeechToTextRequest", "SpeechToTextResponse",
    "TextToSpeechRequest", "TextToSpeechResponse", "SummarizeRequest", "SummarizeResponse",
]
