"""
Feedback Service
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from ..models.conversation import Conversation, Message
from ..models.feedback import Feedback

logger = logging.getLogger(__name__)


class FeedbackError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FeedbackService:
    """Like/dislike ratings on assistant messages"""

    async def submit(
        self,
        db: AsyncSession,
        user_id: int,
        message_id: int,
        rating: str,
        reason: Optional[str] = None
    ) -> Tuple[Feedback, bool]:
        """
        Create or overwrite the user's feedback on a message

        Returns:
            (feedback, created)
        """
        result = await db.execute(
            select(Message, Conversation)
            .join(Conversation, Message.conversation_id == Conversation.id)
            .where(Message.id == message_id, Message.role == "assistant")
        )
        row = result.first()
        if not row:
            raise FeedbackError("Message not found or is not an assistant message", 404)

        message, conversation = row
        if conversation.user_id != user_id:
            raise FeedbackError("You don't have access to this conversation", 403)

        existing = await self.get_for_message(db, user_id, message_id)
        reason = (reason or "").strip() or None

        if existing:
            existing.rating = rating
            existing.reason = reason
            existing.message_content = message.content
            existing.submitted_at = func.now()
            await db.commit()
            await db.refresh(existing)
            logger.info(f"✅ Updated feedback {existing.id} for message {message_id}")
            return existing, False

        feedback = Feedback(
            user_id=user_id,
            conversation_id=conversation.id,
            message_id=message_id,
            message_content=message.content,
            rating=rating,
            reason=reason
        )
        db.add(feedback)
        await db.commit()
        await db.refresh(feedback)
        logger.info(f"✅ Created feedback {feedback.id} for message {message_id}")
        return feedback, True

    async def get_for_message(self, db: AsyncSession, user_id: int, message_id: int) -> Optional[Feedback]:
        result = await db.execute(
            select(Feedback).where(
                Feedback.message_id == message_id,
                Feedback.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self, db: AsyncSession) -> List[Feedback]:
        """All feedback, newest first (admin view)"""
        result = await db.execute(
            select(Feedback).order_by(Feedback.submitted_at.desc(), Feedback.id.desc())
        )
        return list(result.scalars().all())
