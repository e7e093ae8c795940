"""
Client-side conversation controller for the Progress Chat API
"""
from .api_client import ProgressClient, APIError
from .audio import AudioCoordinator, AudioState, NullAudioElement, audio_error_description
from .session import ChatSession

__all__ = [
    "ProgressClient",
    "APIError",
    "AudioCoordinator",
    "AudioState",
    "NullAudioElement",
    "audio_error_description",
    "ChatSession",
]
