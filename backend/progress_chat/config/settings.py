"""
Configuration Settings for Progress Chat
"""
import os
from typing import Literal, List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings"""

    model_config = {"extra": "ignore"}  # Allow extra fields from .env to be ignored

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = os.getenv("ENVIRONMENT", "development")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./progress_chat.db")

    # Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRATION_HOURS: int = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))
    RESET_TOKEN_EXPIRATION_HOURS: int = 24
    ADMIN_EMAILS: List[str] = []

    # Frontend
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # AWS Configuration
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")
    AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID", "")
    AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")

    # Bedrock Configuration
    BEDROCK_MODEL_ID: str = os.getenv("BEDROCK_CLAUDE_MODEL_ID", "us.anthropic.claude-3-5-haiku-20241022-v1:0")
    BEDROCK_MAX_TOKENS: int = 4096
    BEDROCK_TEMPERATURE: float = 0.7
    TITLE_MAX_TOKENS: int = 50

    # OpenAI (speech-to-text, image generation)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    VOICE_TRANSCRIPTION_MODEL: str = "whisper-1"
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "dall-e-3")
    IMAGE_SIZE: str = "1024x1024"

    # Eleven Labs (text-to-speech)
    ELEVEN_LABS_API_KEY: str = os.getenv("ELEVEN_LABS_API_KEY", "")
    ELEVEN_LABS_MODEL_ID: str = os.getenv("ELEVEN_LABS_MODEL_ID", "eleven_multilingual_v2")
    ELEVEN_LABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
    DEFAULT_VOICE_ID: str = os.getenv("DEFAULT_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
    ELEVEN_LABS_STABILITY: float = 0.5
    ELEVEN_LABS_SIMILARITY_BOOST: float = 0.75
    TTS_TIMEOUT_SECONDS: float = 60.0

    # Email (password reset)
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SENDER_EMAIL: str = os.getenv("SENDER_EMAIL", "no-reply@progress.chat")

    # Attachments
    MAX_ATTACHMENT_SIZE: int = 10 * 1024 * 1024  # 10 MB decoded
    MAX_AUDIO_SIZE: int = 25 * 1024 * 1024  # Whisper limit

    # Streaming Configuration
    STREAM_TICK_SECONDS: float = 0.05

    # Feedback
    FEEDBACK_COOLDOWN_SECONDS: float = 1.0

    # Conversation Configuration
    DEFAULT_CONVERSATION_TITLE: str = "New Conversation"
    USER_MESSAGE_MAX_LENGTH: int = 10000
    HISTORY_MESSAGE_LIMIT: int = 20

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
