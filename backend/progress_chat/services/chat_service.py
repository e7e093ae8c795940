"""
Chat Service
Send, regenerate and edit flows on top of generation and persistence
"""
import logging
from typing import Dict, Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..config.settings import settings
from ..models.conversation import Conversation, Message
from ..models.user import User
from ..utils.data_uri import DataURIError, parse_data_uri
from .conversation_service import ConversationService
from .generation_service import GenerationService

logger = logging.getLogger(__name__)

IMAGES_ONLY_MESSAGE = "Currently, only image files are supported."


class ChatError(Exception):
    """Chat failure with a user-facing message and HTTP status"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def history_of(messages: List[Message]) -> List[Dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


def assistant_messages_after_last_user(messages: List[Message]) -> Tuple[Optional[Message], List[Message]]:
    """
    Locate the most recent user message and the assistant replies after it

    Returns (None, []) when the list holds no user message.
    """
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == "user":
            trailing = [m for m in messages[index + 1:] if m.role == "assistant"]
            return messages[index], trailing
    return None, []


class ChatService:
    """Service for chat turns"""

    def __init__(
        self,
        generation: Optional[GenerationService] = None,
        conversations: Optional[ConversationService] = None
    ):
        self.generation = generation or GenerationService()
        self.conversations = conversations or ConversationService()

    def validate_attachment(self, attachment_data_uri: Optional[str]):
        """Only image attachments within the size limit are accepted"""
        if not attachment_data_uri:
            return
        try:
            attachment = parse_data_uri(attachment_data_uri)
        except DataURIError:
            raise ChatError(IMAGES_ONLY_MESSAGE, 400)
        if not attachment.is_image:
            raise ChatError(IMAGES_ONLY_MESSAGE, 400)
        if len(attachment.data) > settings.MAX_ATTACHMENT_SIZE:
            raise ChatError("The attachment is too large.", 413)

    async def _resolve_conversation(
        self,
        db: AsyncSession,
        user: User,
        conversation_id: Optional[int],
        message: str
    ) -> Conversation:
        """Existing conversation, or a new one titled from the first message"""
        if conversation_id is None:
            title = await self.generation.summarize_title(message)
            return await self.conversations.create_conversation(db, user.id, title)

        conversation = await self.conversations.get_conversation(db, user.id, conversation_id)
        if not conversation:
            raise ChatError("Conversation not found", 404)

        # An empty conversation created up front gets its title from the first message
        if (conversation.title == settings.DEFAULT_CONVERSATION_TITLE
                and await self.conversations.count_messages(db, conversation.id) == 0):
            title = await self.generation.summarize_title(message)
            if title != conversation.title:
                conversation = await self.conversations.rename_conversation(db, conversation, title)
        return conversation

    async def send_message(
        self,
        db: AsyncSession,
        user: User,
        message: str,
        conversation_id: Optional[int] = None,
        attachment_data_uri: Optional[str] = None,
        mode: str = "standard"
    ) -> Dict[str, Any]:
        """
        Store the user turn, generate and store the reply

        Returns:
            dict with conversation, user_message and message (the reply)
        """
        self.validate_attachment(attachment_data_uri)

        conversation = await self._resolve_conversation(db, user, conversation_id, message)
        history = history_of(await self.conversations.get_messages(db, conversation.id))

        user_message = await self.conversations.add_message(
            db, conversation.id, "user", message, attachment_data_uri
        )
        logger.info(f"💬 User {user.id} sent message {user_message.id} in conversation {conversation.id} ({mode})")

        reply = await self.generation.generate_response(
            message,
            profile=user.to_profile(),
            history=history,
            attachment_data_uri=attachment_data_uri,
            mode=mode
        )
        assistant_message = await self.conversations.add_message(db, conversation.id, "assistant", reply)
        await self.conversations.remember_recent(db, user.id, conversation.id)

        logger.info(f"✅ Stored reply {assistant_message.id} ({len(reply)} chars)")
        return {
            "conversation": conversation,
            "user_message": user_message,
            "message": assistant_message,
        }

    async def regenerate(
        self,
        db: AsyncSession,
        user: User,
        conversation_id: int,
        mode: str = "standard"
    ) -> Dict[str, Any]:
        """
        Replace the replies to the most recent user message

        Deletes every assistant message after the last user message and
        issues exactly one generation call for that user message.
        """
        conversation = await self.conversations.get_conversation(db, user.id, conversation_id)
        if not conversation:
            raise ChatError("Conversation not found", 404)

        messages = await self.conversations.get_messages(db, conversation.id)
        last_user, stale = assistant_messages_after_last_user(messages)
        if last_user is None:
            raise ChatError("There is no message to regenerate a response for.", 400)

        await self.conversations.delete_messages(db, [m.id for m in stale])
        history = history_of(messages[:messages.index(last_user)])

        reply = await self.generation.generate_response(
            last_user.content,
            profile=user.to_profile(),
            history=history,
            attachment_data_uri=last_user.attachment_data_uri,
            mode=mode
        )
        assistant_message = await self.conversations.add_message(db, conversation.id, "assistant", reply)
        await self.conversations.remember_recent(db, user.id, conversation.id)

        logger.info(
            f"🔄 Regenerated reply for message {last_user.id}: removed {len(stale)}, stored {assistant_message.id}"
        )
        return {
            "conversation": conversation,
            "user_message": last_user,
            "message": assistant_message,
        }

    async def edit_message(
        self,
        db: AsyncSession,
        user: User,
        conversation_id: int,
        message_id: int,
        content: str
    ) -> Message:
        conversation = await self.conversations.get_conversation(db, user.id, conversation_id)
        if not conversation:
            raise ChatError("Conversation not found", 404)

        message = await self.conversations.get_message(db, conversation.id, message_id)
        if not message:
            raise ChatError("Message not found", 404)

        return await self.conversations.update_message_content(db, message, content)
