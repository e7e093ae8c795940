"""
Chat session controller

Holds the local view of one conversation: the message list, the loading
gate, the thinking placeholder, feedback state and audio playback. A
polling task stands in for a real-time subscription and is owned by the
session (start/stop, or use it as an async context manager).
"""
import asyncio
import itertools
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..config.settings import settings
from .audio import AudioCoordinator, AudioFactory, NullAudioElement, NoticeCallback

logger = logging.getLogger(__name__)

FEEDBACK_RATINGS = ("like", "dislike")

_placeholder_ids = itertools.count(1)


def thinking_placeholder() -> Dict[str, Any]:
    return {
        "id": f"thinking-{next(_placeholder_ids)}",
        "role": "assistant",
        "content": "",
        "status": "thinking",
    }


def trailing_assistant_messages(messages: List[Dict[str, Any]]):
    """(last user message, assistant messages after it) or (None, [])"""
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].get("role") == "user":
            return messages[index], [m for m in messages[index + 1:] if m.get("role") == "assistant"]
    return None, []


class ChatSession:
    """
    Conversation controller on top of a `ProgressClient`-shaped api object

    Notices go to `on_notice(title, description, variant)`; `on_change`
    fires whenever the message list changes.
    """

    def __init__(
        self,
        api,
        conversation_id: Optional[int] = None,
        on_notice: Optional[NoticeCallback] = None,
        on_change: Optional[Callable[[List[Dict[str, Any]]], None]] = None,
        audio_factory: AudioFactory = NullAudioElement,
        poll_interval: float = 2.0,
        feedback_cooldown: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api = api
        self.conversation_id = conversation_id
        self.on_notice = on_notice
        self.on_change = on_change
        self.poll_interval = poll_interval
        self.feedback_cooldown = settings.FEEDBACK_COOLDOWN_SECONDS if feedback_cooldown is None else feedback_cooldown
        self._sleep = sleep

        self.messages: List[Dict[str, Any]] = []
        self.title: Optional[str] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.is_loading = False
        self.feedback_state = {rating: "idle" for rating in FEEDBACK_RATINGS}

        self.audio = AudioCoordinator(
            fetch_speech=self._fetch_speech,
            audio_factory=audio_factory,
            on_notice=on_notice,
        )
        self._poll_task: Optional[asyncio.Task] = None
        self._cooldown_tasks: List[asyncio.Task] = []

    # ==================== LIFECYCLE ====================

    async def __aenter__(self):
        await self.load_profile()
        self.start()
        return self

    async def __aexit__(self, *exc):
        await self.stop()

    def start(self):
        """Begin polling the conversation for new messages"""
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll())

    async def stop(self):
        """Cancel polling and pending cooldowns, and silence audio"""
        tasks = [t for t in [self._poll_task, *self._cooldown_tasks] if t is not None]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._poll_task = None
        self._cooldown_tasks = []
        self.audio.stop()

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def _poll(self):
        while True:
            if self.conversation_id is not None and not self.is_loading:
                try:
                    await self.refresh()
                except Exception as e:
                    logger.warning(f"⚠️ Message refresh failed: {str(e)}")
            await self._sleep(self.poll_interval)

    # ==================== STATE ====================

    def _notify(self, title: str, description: str, variant: str = "default"):
        if self.on_notice:
            self.on_notice(title, description, variant)

    def _set_messages(self, messages: List[Dict[str, Any]]):
        self.messages = messages
        if self.on_change:
            self.on_change(list(self.messages))

    async def load_profile(self) -> Optional[Dict[str, Any]]:
        try:
            self.profile = await self.api.get_profile()
        except Exception as e:
            logger.warning(f"⚠️ Could not load profile: {str(e)}")
        return self.profile

    async def refresh(self) -> List[Dict[str, Any]]:
        """Replace local messages with the server's, keeping any thinking placeholder"""
        if self.conversation_id is None:
            self._set_messages([])
            return self.messages
        server_messages = await self.api.get_messages(self.conversation_id)
        placeholders = [m for m in self.messages if m.get("status") == "thinking"]
        self._set_messages(list(server_messages) + placeholders)
        return self.messages

    def _drop_placeholders(self):
        self._set_messages([m for m in self.messages if m.get("status") != "thinking"])

    async def _fetch_speech(self, text: str, voice: Optional[str]) -> str:
        if voice is None and self.profile:
            voice = self.profile.get("voice")
        return await self.api.text_to_speech(text, voice)

    # ==================== CHAT ====================

    async def _run_generation(self, call: Callable[[], Awaitable[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
        """Shared loading gate, thinking placeholder and voice-mode playback"""
        self.is_loading = True
        self._set_messages(self.messages + [thinking_placeholder()])
        result = None
        try:
            result = await call()
            self.conversation_id = result["conversation_id"]
            self.title = result.get("title", self.title)
            try:
                await self.refresh()
            except Exception as e:
                logger.warning(f"⚠️ Message refresh failed: {str(e)}")
        except Exception as e:
            logger.error(f"❌ Error generating response: {str(e)}")
            self._notify("Error", "Sorry, I couldn't generate a response. Please try again.", "destructive")
        finally:
            self.is_loading = False
            self._drop_placeholders()

        if result and self.profile and self.profile.get("voice_mode_enabled"):
            reply = result.get("message") or {}
            if reply.get("content"):
                await self.audio.fetch_and_play(reply.get("id"), reply["content"], self.profile.get("voice"))
        return result

    async def send_message(
        self,
        text: str,
        attachment_data_uri: Optional[str] = None,
        mode: str = "standard"
    ) -> Optional[Dict[str, Any]]:
        """
        Send a user turn

        Rejected (returns None) while another generation is in flight.
        """
        if self.is_loading:
            return None
        if not (text or "").strip() and not attachment_data_uri:
            return None

        return await self._run_generation(
            lambda: self.api.send_message(
                text,
                conversation_id=self.conversation_id,
                attachment_data_uri=attachment_data_uri,
                mode=mode
            )
        )

    async def regenerate(self, mode: str = "standard") -> Optional[Dict[str, Any]]:
        """
        Drop the replies after the last user message and ask for a new one

        The local removal is optimistic; the server deletes the same
        messages and makes exactly one generation call.
        """
        if self.is_loading or self.conversation_id is None:
            return None

        last_user, stale = trailing_assistant_messages(self.messages)
        if last_user is None:
            return None

        stale_ids = {id(m) for m in stale}
        self._set_messages([m for m in self.messages if id(m) not in stale_ids])
        # Audio bound to a removed reply must not outlive it
        playing = self.audio.current_message_id
        if playing is not None and playing in {m.get("id") for m in stale}:
            self.audio.stop()

        return await self._run_generation(
            lambda: self.api.regenerate(self.conversation_id, mode=mode)
        )

    async def edit_message(self, message_id, content: str) -> bool:
        if self.conversation_id is None:
            return False
        try:
            await self.api.edit_message(self.conversation_id, message_id, content)
        except Exception as e:
            logger.error(f"❌ Error updating message: {str(e)}")
            self._notify("Update Failed", "There was an error updating your message.", "destructive")
            return False

        self._set_messages([
            {**m, "content": content} if m.get("id") == message_id else m
            for m in self.messages
        ])
        self._notify("Message Updated", "Your message has been successfully updated.")
        return True

    # ==================== FEEDBACK ====================

    @property
    def feedback_disabled(self) -> bool:
        return any(state == "loading" for state in self.feedback_state.values())

    async def submit_feedback(self, message_id, rating: str, reason: Optional[str] = None) -> bool:
        """
        Rate an assistant message

        Rejected while any rating is in flight; the in-flight state clears
        `feedback_cooldown` seconds after the request finishes.
        """
        if rating not in FEEDBACK_RATINGS:
            raise ValueError(f"Unknown rating: {rating}")
        if self.feedback_disabled:
            return False

        self.feedback_state[rating] = "loading"
        submitted = False
        try:
            await self.api.submit_feedback(message_id, rating, reason or None)
            submitted = True
            self._notify("Feedback Submitted", "Thank you for your feedback!")
        except Exception as e:
            logger.error(f"❌ Error submitting feedback: {str(e)}")
            self._notify("Feedback Error", "Failed to submit feedback. Please try again.", "destructive")
        finally:
            self._cooldown_tasks = [t for t in self._cooldown_tasks if not t.done()]
            self._cooldown_tasks.append(asyncio.create_task(self._reset_feedback(rating)))
        return submitted

    async def _reset_feedback(self, rating: str):
        await self._sleep(self.feedback_cooldown)
        self.feedback_state[rating] = "idle"

    # ==================== AUDIO ====================

    async def toggle_audio(self, message_id) -> None:
        message = next((m for m in self.messages if m.get("id") == message_id), None)
        if not message or not message.get("content"):
            return
        await self.audio.toggle(message_id, message["content"])

    async def download_audio(self, message_id):
        message = next((m for m in self.messages if m.get("id") == message_id), None)
        if not message or not message.get("content"):
            return None
        return await self.audio.download(message_id, message["content"])
