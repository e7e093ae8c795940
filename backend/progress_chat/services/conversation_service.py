"""
Conversation Service
Ownership-checked CRUD for conversations and their messages
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from ..config.settings import settings
from ..models.conversation import Conversation, Message
from ..models.feedback import Feedback
from ..models.user import User

logger = logging.getLogger(__name__)


class ConversationService:
    """Service for conversation and message persistence"""

    async def list_conversations(self, db: AsyncSession, user_id: int) -> List[Conversation]:
        """User's conversations, newest first"""
        result = await db.execute(
            select(Conversation)
            .where(Conversation.user_id == user_id)
            .order_by(Conversation.created_at.desc(), Conversation.id.desc())
        )
        return list(result.scalars().all())

    async def get_conversation(self, db: AsyncSession, user_id: int, conversation_id: int) -> Optional[Conversation]:
        """Conversation if it exists and belongs to the user"""
        result = await db.execute(
            select(Conversation).where(
                Conversation.id == conversation_id,
                Conversation.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def create_conversation(self, db: AsyncSession, user_id: int, title: Optional[str] = None) -> Conversation:
        conversation = Conversation(
            user_id=user_id,
            title=(title or "").strip() or settings.DEFAULT_CONVERSATION_TITLE
        )
        db.add(conversation)
        await db.commit()
        await db.refresh(conversation)
        logger.info(f"✅ Created conversation {conversation.id} for user {user_id}")
        return conversation

    async def rename_conversation(self, db: AsyncSession, conversation: Conversation, title: str) -> Conversation:
        conversation.title = title
        await db.commit()
        await db.refresh(conversation)
        return conversation

    async def delete_conversation(self, db: AsyncSession, conversation: Conversation):
        """Delete a conversation with its messages and their feedback"""
        conversation_id = conversation.id
        await db.execute(delete(Feedback).where(Feedback.conversation_id == conversation_id))
        await db.execute(delete(Message).where(Message.conversation_id == conversation_id))
        await db.execute(
            update(User)
            .where(User.last_conversation_id == conversation_id)
            .values(last_conversation_id=None)
        )
        await db.execute(delete(Conversation).where(Conversation.id == conversation_id))
        await db.commit()
        logger.info(f"🗑️ Deleted conversation {conversation_id}")

    async def touch(self, db: AsyncSession, conversation_id: int):
        await db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(updated_at=datetime.now(timezone.utc))
        )

    # ==================== MESSAGES ====================

    async def get_messages(self, db: AsyncSession, conversation_id: int) -> List[Message]:
        """Messages in creation order"""
        result = await db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return list(result.scalars().all())

    async def count_messages(self, db: AsyncSession, conversation_id: int) -> int:
        result = await db.execute(
            select(func.count(Message.id)).where(Message.conversation_id == conversation_id)
        )
        return result.scalar_one()

    async def add_message(
        self,
        db: AsyncSession,
        conversation_id: int,
        role: str,
        content: str,
        attachment_data_uri: Optional[str] = None
    ) -> Message:
        message = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            attachment_data_uri=attachment_data_uri
        )
        db.add(message)
        await self.touch(db, conversation_id)
        await db.commit()
        await db.refresh(message)
        return message

    async def get_message(self, db: AsyncSession, conversation_id: int, message_id: int) -> Optional[Message]:
        result = await db.execute(
            select(Message).where(
                Message.id == message_id,
                Message.conversation_id == conversation_id
            )
        )
        return result.scalar_one_or_none()

    async def update_message_content(self, db: AsyncSession, message: Message, content: str) -> Message:
        message.content = content
        await db.commit()
        await db.refresh(message)
        logger.info(f"✅ Updated content of message {message.id}")
        return message

    async def delete_messages(self, db: AsyncSession, message_ids: List[int]):
        if not message_ids:
            return
        await db.execute(delete(Feedback).where(Feedback.message_id.in_(message_ids)))
        await db.execute(delete(Message).where(Message.id.in_(message_ids)))
        await db.commit()
        logger.info(f"🗑️ Deleted {len(message_ids)} message(s)")

    async def remember_recent(self, db: AsyncSession, user_id: int, conversation_id: int) -> bool:
        """
        Record the conversation the user most recently interacted with

        Returns False without writing when it is already the recorded one.
        """
        user = await db.get(User, user_id)
        if not user or user.last_conversation_id == conversation_id:
            return False
        user.last_conversation_id = conversation_id
        await db.commit()
        return True
