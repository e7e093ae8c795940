"""
Image generation through the OpenAI Images API
"""
import base64
import logging
from typing import Optional

from openai import AsyncOpenAI

from ..config.settings import settings
from ..utils.data_uri import build_data_uri

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    pass


class ImageService:
    """Turns a text prompt into a PNG data URI"""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self.model = settings.IMAGE_MODEL
        self.size = settings.IMAGE_SIZE
        self._client = client

    @property
    def openai_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY or None)
        return self._client

    async def generate_image(self, prompt: str) -> str:
        logger.info(f"🖼️ Generating image ({self.model}, {self.size})")
        try:
            result = await self.openai_client.images.generate(
                model=self.model,
                prompt=prompt,
                size=self.size,
                n=1,
                response_format="b64_json",
            )
        except Exception as e:
            logger.error(f"❌ Image generation failed: {str(e)}")
            raise ImageGenerationError("Failed to generate image. Please try again.")

        if not result.data or not result.data[0].b64_json:
            raise ImageGenerationError("Image generation failed to return an image.")

        image_bytes = base64.b64decode(result.data[0].b64_json)
        logger.info(f"✅ Generated image ({len(image_bytes)} bytes)")
        return build_data_uri(image_bytes, "image/png")
