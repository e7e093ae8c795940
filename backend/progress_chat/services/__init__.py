"""
Business logic services
"""
from .auth_service import AuthService
from .email_service import EmailService
from .bedrock_service import BedrockService
from .generation_service import GenerationService, FALLBACK_RESPONSE
from .conversation_service import ConversationService
from .chat_service import ChatService, ChatError
from .feedback_service import FeedbackService, FeedbackError
from .voice_service import VoiceService, VoiceError
from .image_service import ImageService, ImageGenerationError
from .streaming_service import StreamingService

__all__ = [
    "AuthService",
    "EmailService",
    "BedrockService",
    "GenerationService",
    "FALLBACK_RESPONSE",
    "ConversationService",
    "ChatService",
    "ChatError",
    "FeedbackService",
    "FeedbackError",
    "VoiceService",
    "VoiceError",
    "ImageService",
    "ImageGenerationError",
    "StreamingService",
]
