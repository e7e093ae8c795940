import asyncio
import base64

from progress_chat.client.session import ChatSession, trailing_assistant_messages


class FakeAPI:
    """In-memory stand-in for ProgressClient"""

    def __init__(self, profile=None):
        self.profile = profile or {"first_name": "Ada", "voice": "voice-1", "voice_mode_enabled": False}
        self.messages = []
        self.calls = []
        self.gate = None
        self.fail_feedback = False
        self._next_id = 1

    def _add(self, role, content):
        message = {"id": self._next_id, "role": role, "content": content}
        self._next_id += 1
        self.messages.append(message)
        return message

    async def get_profile(self):
        return self.profile

    async def get_messages(self, conversation_id):
        return [dict(m) for m in self.messages]

    async def send_message(self, message, conversation_id=None, attachment_data_uri=None, mode="standard"):
        self.calls.append(("send", message))
        if self.gate:
            await self.gate.wait()
        user = self._add("user", message)
        reply = self._add("assistant", f"Reply to {message}")
        return {"conversation_id": 1, "title": "Chat", "user_message": user, "message": reply}

    async def regenerate(self, conversation_id, mode="standard"):
        self.calls.append(("regenerate", conversation_id))
        last_user = max(i for i, m in enumerate(self.messages) if m["role"] == "user")
        self.messages = self.messages[:last_user + 1]
        reply = self._add("assistant", "Fresh reply")
        return {"conversation_id": conversation_id, "title": "Chat", "message": reply}

    async def edit_message(self, conversation_id, message_id, content):
        self.calls.append(("edit", message_id))
        return {"id": message_id, "content": content}

    async def submit_feedback(self, message_id, rating, reason=None):
        self.calls.append(("feedback", message_id, rating))
        if self.fail_feedback:
            raise RuntimeError("offline")
        return {"success": True}

    async def text_to_speech(self, text, voice=None):
        self.calls.append(("tts", text, voice))
        return "data:audio/mpeg;base64," + base64.b64encode(text.encode()).decode()


def make_session(api, **kwargs):
    notices = []
    session = ChatSession(api, on_notice=lambda *n: notices.append(n), **kwargs)
    return session, notices


def test_send_shows_placeholder_then_reply():
    api = FakeAPI()
    session, _ = make_session(api)
    snapshots = []
    session.on_change = snapshots.append

    result = asyncio.run(session.send_message("Hello"))

    assert result["message"]["content"] == "Reply to Hello"
    assert any(m.get("status") == "thinking" for m in snapshots[0])
    assert [m["role"] for m in session.messages] == ["user", "assistant"]
    assert not any(m.get("status") == "thinking" for m in session.messages)
    assert session.conversation_id == 1
    assert not session.is_loading


def test_second_send_is_rejected_while_loading():
    api = FakeAPI()
    session, _ = make_session(api)

    async def scenario():
        api.gate = asyncio.Event()
        first = asyncio.create_task(session.send_message("One"))
        await asyncio.sleep(0)
        assert session.is_loading
        second = await session.send_message("Two")
        api.gate.set()
        await first
        return second

    assert asyncio.run(scenario()) is None
    assert api.calls == [("send", "One")]


def test_blank_send_is_ignored():
    api = FakeAPI()
    session, _ = make_session(api)
    assert asyncio.run(session.send_message("   ")) is None
    assert api.calls == []


def test_regenerate_drops_trailing_replies_and_calls_once():
    api = FakeAPI()
    session, _ = make_session(api)

    async def scenario():
        await session.send_message("Question")
        # A second reply to the same question
        api._add("assistant", "Another reply")
        await session.refresh()
        return await session.regenerate()

    result = asyncio.run(scenario())

    assert result["message"]["content"] == "Fresh reply"
    assert [c for c in api.calls if c[0] == "regenerate"] == [("regenerate", 1)]
    assert [m["content"] for m in session.messages] == ["Question", "Fresh reply"]


def test_trailing_assistant_messages():
    messages = [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "b"},
        {"role": "user", "content": "c"},
        {"role": "assistant", "content": "d"},
        {"role": "assistant", "content": "e"},
    ]
    last_user, trailing = trailing_assistant_messages(messages)
    assert last_user["content"] == "c"
    assert [m["content"] for m in trailing] == ["d", "e"]
    assert trailing_assistant_messages([{"role": "assistant", "content": "x"}]) == (None, [])


def test_feedback_is_gated_until_cooldown():
    api = FakeAPI()
    session, notices = make_session(api, feedback_cooldown=0.01)

    async def scenario():
        first = await session.submit_feedback(2, "like")
        blocked = await session.submit_feedback(2, "dislike")
        await asyncio.sleep(0.05)
        after = await session.submit_feedback(2, "dislike")
        await session.stop()
        return first, blocked, after

    assert asyncio.run(scenario()) == (True, False, True)
    assert [c for c in api.calls if c[0] == "feedback"] == [("feedback", 2, "like"), ("feedback", 2, "dislike")]
    assert notices[0] == ("Feedback Submitted", "Thank you for your feedback!", "default")


def test_feedback_failure_notice():
    api = FakeAPI()
    api.fail_feedback = True
    session, notices = make_session(api, feedback_cooldown=0)

    async def scenario():
        submitted = await session.submit_feedback(2, "dislike")
        await session.stop()
        return submitted

    assert asyncio.run(scenario()) is False
    assert notices == [("Feedback Error", "Failed to submit feedback. Please try again.", "destructive")]


def test_edit_message_updates_locally():
    api = FakeAPI()
    session, notices = make_session(api)

    async def scenario():
        await session.send_message("Helo")
        return await session.edit_message(1, "Hello")

    assert asyncio.run(scenario()) is True
    assert session.messages[0]["content"] == "Hello"
    assert notices[-1] == ("Message Updated", "Your message has been successfully updated.", "default")


def test_voice_mode_plays_the_reply():
    api = FakeAPI(profile={"first_name": "Ada", "voice": "voice-9", "voice_mode_enabled": True})

    async def scenario():
        async with ChatSession(api, poll_interval=60) as session:
            await session.send_message("Speak to me")
            return session.audio.current_message_id, session.audio.state.value

    message_id, state = asyncio.run(scenario())

    assert ("tts", "Reply to Speak to me", "voice-9") in api.calls
    assert message_id == 2
    assert state == "playing"


def test_context_manager_owns_polling():
    api = FakeAPI()

    async def scenario():
        session = ChatSession(api, conversation_id=1, poll_interval=0.01)
        async with session:
            await asyncio.sleep(0)
            running = session.running
        return running, session.running

    assert asyncio.run(scenario()) == (True, False)


class HeldClip:
    """Plays until paused; never ends by itself"""

    def __init__(self, data_uri, on_ended):
        self.data_uri = data_uri
        self.paused = True

    def play(self):
        self.paused = False

    def pause(self):
        self.paused = True


def test_regenerate_silences_audio_of_removed_reply():
    api = FakeAPI()
    clips = []

    def factory(data_uri, on_ended):
        clips.append(HeldClip(data_uri, on_ended))
        return clips[-1]

    session, _ = make_session(api, audio_factory=factory)

    async def scenario():
        await session.send_message("Question")
        old_reply = session.messages[-1]
        await session.audio.fetch_and_play(old_reply["id"], old_reply["content"])
        playing_before = session.audio.is_playing(old_reply["id"])
        await session.regenerate()
        return playing_before

    assert asyncio.run(scenario()) is True
    assert session.audio.current_message_id is None
    assert session.audio.active is None
    assert session.audio.state.value == "idle"
    assert all(clip.paused for clip in clips)
