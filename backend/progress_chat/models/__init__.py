"""
SQLAlchemy Models for Progress Chat
"""
from .base import Base, AsyncSessionLocal, get_db, init_db
from .user import User
from .conversation import Conversation, Message
from .feedback import Feedback

__all__ = [
    "Base",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "User",
    "Conversation",
    "Message",
    "Feedback",
]
