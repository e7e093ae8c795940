"""
Audio playback coordination for spoken replies

At most one audio element is active. Starting another message pauses the
current element before the new one plays.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Tuple

from ..services.voice_service import QUOTA_MESSAGE, BUSY_MESSAGE, GENERIC_TTS_MESSAGE
from ..utils.data_uri import parse_data_uri

logger = logging.getLogger(__name__)

DOWNLOAD_BASENAME = "progress-reply"

NoticeCallback = Callable[[str, str, str], None]
FetchSpeech = Callable[[str, Optional[str]], Awaitable[str]]


class AudioState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


class AudioElement(Protocol):
    """A playable clip, in the manner of a browser audio element"""

    paused: bool

    def play(self) -> None: ...

    def pause(self) -> None: ...


AudioFactory = Callable[[str, Callable[[], None]], AudioElement]


class NullAudioElement:
    """
    Headless stand-in that "plays" for `duration` seconds

    With a running event loop the end of playback is scheduled with
    call_later; without one the clip never ends on its own.
    """

    def __init__(self, data_uri: str, on_ended: Callable[[], None], duration: float = 0.0):
        self.data_uri = data_uri
        self.on_ended = on_ended
        self.duration = duration
        self.paused = True
        self.ended = False
        self._handle: Optional[asyncio.TimerHandle] = None

    def play(self):
        if self.ended:
            return
        self.paused = False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(self.duration, self._finish)

    def pause(self):
        self.paused = True
        if self._handle:
            self._handle.cancel()
            self._handle = None

    def _finish(self):
        self._handle = None
        self.paused = True
        self.ended = True
        self.on_ended()


def audio_error_description(error: Exception) -> str:
    """Notice text for a failed speech request"""
    status = getattr(error, "status_code", None)
    text = str(error)
    if status == 429 or "429" in text or "exceeded your current quota" in text.lower():
        return QUOTA_MESSAGE
    if status == 503 or "503" in text:
        return BUSY_MESSAGE
    return GENERIC_TTS_MESSAGE


@dataclass
class ActiveAudio:
    message_id: object
    audio_data_uri: str


class AudioCoordinator:
    """
    Play/pause/download state for spoken replies

    `fetch_speech(text, voice)` returns an audio data URI; `audio_factory`
    builds the element that plays it.
    """

    def __init__(
        self,
        fetch_speech: FetchSpeech,
        audio_factory: AudioFactory = NullAudioElement,
        on_notice: Optional[NoticeCallback] = None,
        on_ended: Optional[Callable[[], None]] = None,
    ):
        self.fetch_speech = fetch_speech
        self.audio_factory = audio_factory
        self.on_notice = on_notice
        self.on_ended = on_ended
        self.state = AudioState.IDLE
        self.current_message_id = None
        self.active: Optional[ActiveAudio] = None
        self._element: Optional[AudioElement] = None

    def is_playing(self, message_id) -> bool:
        return self.state == AudioState.PLAYING and self.current_message_id == message_id

    def is_loading(self, message_id) -> bool:
        return self.state == AudioState.LOADING and self.current_message_id == message_id

    def play(self, message_id, audio_data_uri: str):
        """Make `message_id` the active clip and start it"""
        if self._element is not None and self.current_message_id == message_id \
                and self.active is not None and self.active.audio_data_uri == audio_data_uri:
            if self._element.paused:
                self._element.play()
                self.state = AudioState.PLAYING
            return

        if self._element is not None:
            self._element.pause()

        element = None

        def handle_ended():
            if self._element is element:
                self._ended()

        element = self.audio_factory(audio_data_uri, handle_ended)
        self._element = element
        self.active = ActiveAudio(message_id, audio_data_uri)
        self.current_message_id = message_id
        self.state = AudioState.PLAYING
        element.play()

    def pause(self):
        if self._element is not None and self.state == AudioState.PLAYING:
            self._element.pause()
            self.state = AudioState.PAUSED

    def resume(self):
        if self._element is not None and self.state == AudioState.PAUSED:
            self._element.play()
            self.state = AudioState.PLAYING

    def stop(self):
        """Pause and forget the active clip"""
        if self._element is not None:
            self._element.pause()
        self._element = None
        self.active = None
        self.current_message_id = None
        self.state = AudioState.IDLE

    def _ended(self):
        self._element = None
        self.active = None
        self.current_message_id = None
        self.state = AudioState.IDLE
        if self.on_ended:
            self.on_ended()

    async def fetch_and_play(self, message_id, text: str, voice: Optional[str] = None) -> Optional[str]:
        """Synthesize `text` and play it; returns the data URI or None on failure"""
        if self._element is not None:
            self._element.pause()
        self.state = AudioState.LOADING
        self.current_message_id = message_id
        try:
            audio_data_uri = await self.fetch_speech(text, voice)
        except Exception as e:
            logger.error(f"❌ Error generating audio: {str(e)}")
            if self.on_notice:
                self.on_notice("Audio Error", audio_error_description(e), "destructive")
            self._element = None
            self.active = None
            self.state = AudioState.IDLE
            self.current_message_id = None
            return None

        self.play(message_id, audio_data_uri)
        return audio_data_uri

    async def toggle(self, message_id, text: str, voice: Optional[str] = None):
        """Play/pause button for a message"""
        if self.current_message_id == message_id and self._element is not None:
            if self.state == AudioState.PLAYING:
                self.pause()
            elif self.state == AudioState.PAUSED:
                self.resume()
            return
        if self.is_loading(message_id):
            return
        await self.fetch_and_play(message_id, text, voice)

    async def download(self, message_id, text: str, voice: Optional[str] = None) -> Optional[Tuple[str, bytes]]:
        """
        Audio for a message as (filename, bytes)

        Reuses the active clip when it belongs to this message.
        """
        audio_data_uri = None
        if self.active is not None and self.active.message_id == message_id:
            audio_data_uri = self.active.audio_data_uri
        if not audio_data_uri:
            audio_data_uri = await self.fetch_and_play(message_id, text, voice)
        if not audio_data_uri:
            return None

        audio = parse_data_uri(audio_data_uri)
        return f"{DOWNLOAD_BASENAME}.{audio.extension}", audio.data
