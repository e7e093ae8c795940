"""
User account and profile model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float
from sqlalchemy.sql import func

from .base import Base


class User(Base):
    """Registered user with profile, voice preference and personal memory"""
    __tablename__ = "pc_users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    age = Column(Integer)
    latitude = Column(Float)
    longitude = Column(Float)

    # Voice
    voice = Column(String(100))
    voice_mode_enabled = Column(Boolean, default=False, nullable=False)

    # Free-text memory the assistant should keep in mind
    memory = Column(Text, default="", nullable=False)

    # Most recently opened conversation
    last_conversation_id = Column(Integer)

    # Password reset
    reset_token = Column(String(128), index=True)
    reset_token_expires = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def location(self):
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

    def to_profile(self):
        """Profile fields handed to the prompt builder"""
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "age": self.age,
            "location": self.location,
            "memory": self.memory or "",
        }
