"""
Feedback model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class Feedback(Base):
    """Like/dislike rating on an assistant message"""
    __tablename__ = "pc_feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("pc_users.id", ondelete="CASCADE"), nullable=False, index=True)
    conversation_id = Column(Integer, ForeignKey("pc_conversations.id", ondelete="CASCADE"), nullable=False)
    message_id = Column(Integer, ForeignKey("pc_messages.id", ondelete="CASCADE"), nullable=False)

    # Snapshot of the rated text, kept even if the message is later edited
    message_content = Column(Text, nullable=False, default="")

    rating = Column(String(20), nullable=False)  # 'like', 'dislike'
    reason = Column(Text)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now())

    # Constraints
    __table_args__ = (
        CheckConstraint("rating IN ('like', 'dislike')", name="pc_feedback_rating_check"),
        UniqueConstraint('message_id', 'user_id', name='unique_pc_message_feedback'),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Feedback(id={self.id}, message_id={self.message_id}, rating='{self.rating}')>"

    def to_dict(self):
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "conversation_id": self.conversation_id,
            "message_id": self.message_id,
            "message_content": self.message_content,
            "rating": self.rating,
            "reason": self.reason,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }
