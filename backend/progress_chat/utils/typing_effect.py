"""
Simulated streaming for already-complete replies

A finished reply is revealed one character at a time at a rate derived
from its length. Short replies, fast rates and any message that is not
the most recent one are shown in full immediately.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)

CURSOR = "▋"
CHARS_PER_WORD = 5
MIN_ANIMATED_LENGTH = 20
SKIP_WPM_THRESHOLD = 10000

# (exclusive upper bound on length, words per minute)
_WPM_BY_LENGTH = [
    (100, 25000),
    (300, 20000),
    (800, 10000),
    (1500, 5000),
]
_WPM_LONG = 3000


def wpm_for_text(text: str) -> int:
    """Words per minute used to reveal `text`"""
    length = len(text)
    for bound, wpm in _WPM_BY_LENGTH:
        if length < bound:
            return wpm
    return _WPM_LONG


def chars_per_second(wpm: int) -> float:
    return wpm * CHARS_PER_WORD / 60


def should_animate(text: str, is_last_message: bool) -> bool:
    if not text or not is_last_message:
        return False
    if len(text) < MIN_ANIMATED_LENGTH:
        return False
    return wpm_for_text(text) < SKIP_WPM_THRESHOLD


def render(text: str, revealed: int) -> str:
    """Visible text after `revealed` characters, with the cursor while typing"""
    shown = text[:revealed]
    return shown + CURSOR if len(shown) < len(text) else shown


def chunk_sizes(text: str, tick_seconds: float) -> List[int]:
    """
    Split the reveal of `text` into per-tick chunk lengths

    Used by the SSE stream, which sends deltas on a fixed tick instead of
    one event per character. A skipped effect is a single chunk.
    """
    if not text:
        return []
    if len(text) < MIN_ANIMATED_LENGTH or wpm_for_text(text) >= SKIP_WPM_THRESHOLD:
        return [len(text)]

    per_tick = max(1, int(chars_per_second(wpm_for_text(text)) * tick_seconds))
    sizes = [per_tick] * (len(text) // per_tick)
    if len(text) % per_tick:
        sizes.append(len(text) % per_tick)
    return sizes


class TypingEffect:
    """
    Drives the character-by-character reveal of one message

    `on_frame` receives every rendered frame; `on_complete` fires exactly
    once, when the full text is shown. `cancel()` stops a running reveal
    without completing it.
    """

    def __init__(
        self,
        text: str,
        is_last_message: bool = True,
        on_frame: Optional[Callable[[str], None]] = None,
        on_complete: Optional[Callable[[str], None]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.text = text or ""
        self.is_last_message = is_last_message
        self.on_frame = on_frame
        self.on_complete = on_complete
        self._sleep = sleep
        self.wpm = wpm_for_text(self.text)
        self.interval = 1 / chars_per_second(self.wpm)
        self.displayed = ""
        self.completed = False
        self.cancelled = False

    @property
    def animated(self) -> bool:
        return should_animate(self.text, self.is_last_message)

    @property
    def is_typing(self) -> bool:
        return len(self.displayed) < len(self.text)

    def _reveal_counts(self) -> Iterator[int]:
        if not self.text:
            return
        if not self.animated:
            yield len(self.text)
            return
        yield from range(1, len(self.text) + 1)

    def frames(self) -> Iterator[str]:
        """Every frame the reveal shows, ending with the full text"""
        for count in self._reveal_counts():
            yield render(self.text, count)

    async def run(self) -> str:
        """Reveal the text on the event loop and return the final frame"""
        for count in self._reveal_counts():
            if self.cancelled:
                logger.debug("Typing effect cancelled")
                return self.displayed
            self.displayed = self.text[:count]
            if self.on_frame:
                self.on_frame(render(self.text, count))
            if self.is_typing:
                await self._sleep(self.interval)

        self._complete()
        return self.displayed

    def cancel(self):
        self.cancelled = True

    def _complete(self):
        if self.completed or self.cancelled or not self.text:
            return
        self.completed = True
        if self.on_complete:
            self.on_complete(self.text)
