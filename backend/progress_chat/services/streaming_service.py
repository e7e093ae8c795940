"""
Streaming response service using Server-Sent Events (SSE)

Replies are generated in full, then paced out as token chunks at the
typing-effect rate so clients see a progressive reveal.
"""
import asyncio
import logging
from typing import AsyncGenerator, Awaitable, Callable, Dict, Any, Optional

from ..config.settings import settings
from ..schemas.chat import StreamChunk
from ..utils.typing_effect import chunk_sizes, wpm_for_text

logger = logging.getLogger(__name__)


class StreamingService:
    """Service for pacing complete replies over SSE"""

    def __init__(
        self,
        tick_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.tick_seconds = settings.STREAM_TICK_SECONDS if tick_seconds is None else tick_seconds
        self._sleep = sleep

    def format_chunk(self, chunk: StreamChunk) -> str:
        return f"data: {chunk.model_dump_json()}\n\n"

    async def stream_reply(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
        done_metadata: Optional[Dict[str, Any]] = None
    ) -> AsyncGenerator[str, None]:
        """
        Stream a finished reply

        Args:
            content: Complete reply text
            metadata: Sent first as a 'metadata' chunk
            done_metadata: Attached to the final 'done' chunk

        Yields:
            SSE formatted strings with chunks
        """
        try:
            if metadata:
                yield self.format_chunk(StreamChunk(type="metadata", metadata=metadata))

            position = 0
            sizes = chunk_sizes(content, self.tick_seconds)
            for index, size in enumerate(sizes):
                yield self.format_chunk(StreamChunk(type="token", content=content[position:position + size]))
                position += size
                if index < len(sizes) - 1:
                    await self._sleep(self.tick_seconds)

            done = {"wpm": wpm_for_text(content), "length": len(content)}
            done.update(done_metadata or {})
            yield self.format_chunk(StreamChunk(type="done", content=content, metadata=done))

        except asyncio.CancelledError:
            logger.info("⚠️ Client disconnected during stream")
            raise
        except Exception as e:
            logger.error(f"❌ Streaming failed: {str(e)}")
            yield self.format_chunk(StreamChunk(type="error", error="Streaming failed. Please try again."))
