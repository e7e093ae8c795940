import asyncio
import base64

from progress_chat.client.audio import AudioCoordinator, AudioState, audio_error_description
from progress_chat.services.voice_service import VoiceError, QUOTA_MESSAGE, BUSY_MESSAGE, GENERIC_TTS_MESSAGE


class FakeElement:
    def __init__(self, data_uri, on_ended):
        self.data_uri = data_uri
        self.on_ended = on_ended
        self.paused = True

    def play(self):
        self.paused = False

    def pause(self):
        self.paused = True


class FakeElements:
    def __init__(self):
        self.created = []

    def __call__(self, data_uri, on_ended):
        element = FakeElement(data_uri, on_ended)
        self.created.append(element)
        return element

    @property
    def playing(self):
        return [e for e in self.created if not e.paused]


def clip(label):
    return "data:audio/mpeg;base64," + base64.b64encode(label.encode()).decode()


def make_coordinator(fail_with=None):
    elements = FakeElements()
    notices = []
    requests = []

    async def fetch_speech(text, voice):
        requests.append((text, voice))
        if fail_with:
            raise fail_with
        return clip(text)

    coordinator = AudioCoordinator(
        fetch_speech=fetch_speech,
        audio_factory=elements,
        on_notice=lambda *notice: notices.append(notice),
    )
    return coordinator, elements, notices, requests


def test_starting_a_clip_pauses_the_previous_one():
    coordinator, elements, _, _ = make_coordinator()

    coordinator.play(1, clip("first"))
    coordinator.play(2, clip("second"))

    assert len(elements.playing) == 1
    assert elements.playing[0].data_uri == clip("second")
    assert coordinator.is_playing(2)
    assert not coordinator.is_playing(1)


def test_replaying_the_same_clip_resumes_it():
    coordinator, elements, _, _ = make_coordinator()

    coordinator.play(1, clip("first"))
    coordinator.pause()
    assert coordinator.state == AudioState.PAUSED
    coordinator.play(1, clip("first"))

    assert len(elements.created) == 1
    assert coordinator.state == AudioState.PLAYING


def test_toggle_fetches_then_pauses_and_resumes():
    coordinator, elements, _, requests = make_coordinator()

    async def scenario():
        await coordinator.toggle(7, "Hello", "voice-1")
        playing = coordinator.state
        await coordinator.toggle(7, "Hello", "voice-1")
        paused = coordinator.state
        await coordinator.toggle(7, "Hello", "voice-1")
        return playing, paused, coordinator.state

    assert asyncio.run(scenario()) == (AudioState.PLAYING, AudioState.PAUSED, AudioState.PLAYING)
    assert requests == [("Hello", "voice-1")]
    assert len(elements.created) == 1


def test_fetch_failure_shows_notice_and_resets():
    coordinator, elements, notices, _ = make_coordinator(fail_with=VoiceError(QUOTA_MESSAGE, 429))

    result = asyncio.run(coordinator.fetch_and_play(3, "Hello"))

    assert result is None
    assert coordinator.state == AudioState.IDLE
    assert coordinator.current_message_id is None
    assert elements.created == []
    assert notices == [("Audio Error", QUOTA_MESSAGE, "destructive")]


def test_error_descriptions():
    assert audio_error_description(VoiceError("x", 429)) == QUOTA_MESSAGE
    assert audio_error_description(Exception("You exceeded your current quota")) == QUOTA_MESSAGE
    assert audio_error_description(VoiceError("x", 503)) == BUSY_MESSAGE
    assert audio_error_description(Exception("HTTP 503 Service Unavailable")) == BUSY_MESSAGE
    assert audio_error_description(RuntimeError("socket closed")) == GENERIC_TTS_MESSAGE


def test_ended_clip_returns_to_idle():
    ended = []
    elements = FakeElements()
    coordinator = AudioCoordinator(fetch_speech=None, audio_factory=elements, on_ended=lambda: ended.append(True))

    coordinator.play(1, clip("first"))
    elements.created[0].on_ended()

    assert coordinator.state == AudioState.IDLE
    assert ended == [True]


def test_stale_element_end_is_ignored():
    coordinator, elements, _, _ = make_coordinator()

    coordinator.play(1, clip("first"))
    coordinator.play(2, clip("second"))
    elements.created[0].on_ended()

    assert coordinator.is_playing(2)


def test_download_reuses_active_clip():
    coordinator, _, _, requests = make_coordinator()

    async def scenario():
        await coordinator.fetch_and_play(5, "Spoken reply")
        return await coordinator.download(5, "Spoken reply")

    filename, data = asyncio.run(scenario())

    assert filename == "progress-reply.mp3"
    assert data == b"Spoken reply"
    assert len(requests) == 1


def test_download_fetches_when_nothing_is_active():
    coordinator, _, _, requests = make_coordinator()

    filename, data = asyncio.run(coordinator.download(9, "Other reply"))

    assert filename == "progress-reply.mp3"
    assert data == b"Other reply"
    assert requests == [("Other reply", None)]
