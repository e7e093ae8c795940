"""
Generation Service
Builds prompts and calls Bedrock for replies, titles and document summaries
"""
import logging
from typing import List, Dict, Any, Optional

from ..config.settings import settings
from ..utils.data_uri import DataURI, parse_data_uri
from .bedrock_service import BedrockService
from .prompts import build_system_prompt, build_title_prompt, SUMMARY_PROMPT

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "Sorry, I couldn't generate a response. Please try again."

# Media types Claude accepts as image blocks
VISION_MEDIA_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def image_block(attachment: DataURI) -> Dict[str, Any]:
    media_type = attachment.mime_type if attachment.mime_type in VISION_MEDIA_TYPES else "image/jpeg"
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": media_type,
            "data": attachment.base64_payload
        }
    }


def build_messages(
    message: str,
    history: Optional[List[Dict[str, str]]] = None,
    attachment: Optional[DataURI] = None
) -> List[Dict[str, Any]]:
    """
    Anthropic message list: prior turns, then the current user turn

    Prior turns must alternate and start with the user, so consecutive
    same-role turns are merged and a leading assistant turn is dropped.
    """
    turns: List[Dict[str, Any]] = []
    for item in (history or [])[-settings.HISTORY_MESSAGE_LIMIT:]:
        content = (item.get("content") or "").strip()
        if not content:
            continue
        if turns and turns[-1]["role"] == item["role"]:
            turns[-1]["content"] += f"\n\n{content}"
        else:
            turns.append({"role": item["role"], "content": content})

    if turns and turns[0]["role"] == "assistant":
        turns.pop(0)
    text = message or "Describe this attachment."
    if turns and turns[-1]["role"] == "user":
        # An unanswered user turn is folded into the current one
        text = f"{turns.pop()['content']}\n\n{text}"

    current: List[Dict[str, Any]] = []
    if attachment is not None:
        current.append(image_block(attachment))
    current.append({"type": "text", "text": text})
    turns.append({"role": "user", "content": current})
    return turns


class GenerationService:
    """Service for model-backed text generation"""

    def __init__(self, bedrock: Optional[BedrockService] = None):
        self.bedrock = bedrock or BedrockService()

    async def generate_response(
        self,
        message: str,
        profile: Optional[Dict[str, Any]] = None,
        history: Optional[List[Dict[str, str]]] = None,
        attachment_data_uri: Optional[str] = None,
        mode: str = "standard"
    ) -> str:
        """
        Generate the assistant reply

        Failures and empty output are replaced by the fallback apology.
        """
        try:
            attachment = parse_data_uri(attachment_data_uri) if attachment_data_uri else None
            system_prompt = build_system_prompt(profile, has_attachment=attachment is not None, mode=mode)
            messages = build_messages(message, history, attachment)

            response = await self.bedrock.generate(messages, system_prompt=system_prompt)
            if not response or not response.strip():
                logger.warning("⚠️ Model returned an empty response, using fallback")
                return FALLBACK_RESPONSE
            return response.strip()

        except Exception as e:
            logger.error(f"❌ Response generation failed: {str(e)}")
            return FALLBACK_RESPONSE

    async def summarize_title(self, message: str) -> str:
        """Short 3-5 word conversation title from the first message"""
        default = settings.DEFAULT_CONVERSATION_TITLE
        if not message or not message.strip():
            return default
        try:
            title = await self.bedrock.generate(
                [{"role": "user", "content": build_title_prompt(message.strip())}],
                max_tokens=settings.TITLE_MAX_TOKENS,
                temperature=0.3
            )
            title = title.strip().splitlines()[0] if title and title.strip() else ""
            title = title.strip().strip('"\'“”‘’').strip()
            if title.lower().startswith("title:"):
                title = title[len("title:"):].strip()
            return title[:255] or default
        except Exception as e:
            logger.error(f"❌ Title generation failed: {str(e)}")
            return default

    async def summarize_document(self, document_data_uri: str) -> str:
        """
        Summarize an uploaded document

        Raises:
            DataURIError: malformed data URI
            ValueError: unsupported document type
        """
        document = parse_data_uri(document_data_uri)

        if document.mime_type in VISION_MEDIA_TYPES:
            content = [image_block(document), {"type": "text", "text": SUMMARY_PROMPT}]
        elif document.mime_type == "application/pdf":
            content = [
                {
                    "type": "document",
                    "source": {
                        "type": "base64",
                        "media_type": "application/pdf",
                        "data": document.base64_payload
                    }
                },
                {"type": "text", "text": SUMMARY_PROMPT}
            ]
        elif document.mime_type.startswith("text/") or document.mime_type in ("application/json", "application/xml"):
            text = document.data.decode("utf-8", errors="replace")
            content = [{"type": "text", "text": f"{SUMMARY_PROMPT}\n\nDocument:\n{text}"}]
        else:
            raise ValueError(f"Unsupported document type: {document.mime_type}")

        summary = await self.bedrock.generate([{"role": "user", "content": content}])
        logger.info(f"✅ Summarized {document.mime_type} document ({len(document.data)} bytes)")
        return summary.strip()
