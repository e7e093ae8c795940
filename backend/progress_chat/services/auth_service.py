"""
Authentication Service
Handles password hashing, JWT tokens, signup/login and password resets
"""
import jwt
import logging
import secrets
from typing import Dict, Any, Optional, Tuple
from datetime import datetime, timezone, timedelta

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config.settings import settings
from ..models.user import User
from ..schemas.auth import SignupRequest
from .email_service import EmailService

logger = logging.getLogger(__name__)

DEV_SECRET = "dev-secret-key-change-in-production"

INVALID_CREDENTIALS = "Invalid email or password."
RESET_REQUESTED = "If an account exists for that email, a password reset link has been sent."


def is_admin_email(email: Optional[str]) -> bool:
    admins = {e.strip().lower() for e in settings.ADMIN_EMAILS}
    return bool(email) and email.lower() in admins


def user_to_dict(user: User) -> Dict[str, Any]:
    """Public view of a user row"""
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "age": user.age,
        "location": user.location,
        "voice": user.voice,
        "voice_mode_enabled": bool(user.voice_mode_enabled),
        "memory": user.memory or "",
        "last_conversation_id": user.last_conversation_id,
        "is_admin": is_admin_email(user.email),
    }


class AuthService:
    """
    Authentication service
    Methods return (success, data, error) tuples
    """

    def __init__(self, email_service: Optional[EmailService] = None):
        self.jwt_secret = settings.SECRET_KEY
        if not self.jwt_secret:
            logger.warning("⚠️ SECRET_KEY not found, using default (INSECURE for production!)")
            self.jwt_secret = DEV_SECRET
        self.jwt_algorithm = settings.JWT_ALGORITHM
        self.jwt_expiration_hours = settings.JWT_EXPIRATION_HOURS
        self.email_service = email_service or EmailService()

    # ==================== JWT TOKEN MANAGEMENT ====================

    def create_access_token(self, user: User) -> str:
        """Create JWT access token for user"""
        now = datetime.now(timezone.utc)
        payload = {
            "id": user.id,
            "email": user.email,
            "exp": now + timedelta(hours=self.jwt_expiration_hours),
            "iat": now
        }
        token = jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
        logger.info(f"✅ Created access token for user {user.id}")
        return token

    def verify_access_token(self, token: str) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        """Verify JWT access token"""
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
            if payload.get("id") is None:
                return False, None, "Invalid token payload"
            return True, payload, None
        except jwt.ExpiredSignatureError:
            return False, None, "Token has expired"
        except jwt.InvalidTokenError as e:
            return False, None, f"Invalid token: {str(e)}"

    # ==================== USER AUTHENTICATION ====================

    async def signup(
        self,
        db: AsyncSession,
        request: SignupRequest
    ) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        """Create a new account with default voice and empty memory"""
        try:
            existing = await db.execute(select(User).where(User.email == request.email))
            if existing.scalar_one_or_none():
                return False, None, "An account with this email already exists."

            user = User(
                email=request.email,
                password_hash=self._hash_password(request.password),
                first_name=request.first_name,
                last_name=request.last_name,
                age=request.age,
                latitude=request.location.latitude if request.location else None,
                longitude=request.location.longitude if request.location else None,
                voice=settings.DEFAULT_VOICE_ID,
                voice_mode_enabled=False,
                memory="",
            )
            db.add(user)
            await db.commit()
            await db.refresh(user)

            logger.info(f"✅ Created new user: {user.email}")
            return True, {"user": user_to_dict(user), "token": self.create_access_token(user)}, None

        except Exception as e:
            logger.error(f"❌ Create user error: {str(e)}")
            await db.rollback()
            return False, None, "Could not create your account. Please try again."

    async def authenticate_user(
        self,
        db: AsyncSession,
        email: str,
        password: str
    ) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        """Authenticate user with email and password"""
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

            if not user or not self._verify_password(password, user.password_hash):
                logger.warning(f"⚠️ Failed login attempt for {email}")
                return False, None, INVALID_CREDENTIALS

            logger.info(f"✅ User {email} authenticated successfully")
            return True, {"user": user_to_dict(user), "token": self.create_access_token(user)}, None

        except Exception as e:
            logger.error(f"❌ Authentication error: {str(e)}")
            return False, None, INVALID_CREDENTIALS

    # ==================== PASSWORD RESET ====================

    async def request_password_reset(self, db: AsyncSession, email: str) -> Tuple[bool, str, Optional[str]]:
        """
        Issue a reset token and email the link

        The returned message is identical whether or not the account exists.
        """
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

            if user:
                user.reset_token = secrets.token_urlsafe(32)
                user.reset_token_expires = datetime.now(timezone.utc) + timedelta(
                    hours=settings.RESET_TOKEN_EXPIRATION_HOURS
                )
                await db.commit()

                reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={user.reset_token}"
                await self.email_service.send_password_reset(user.email, user.first_name, reset_link)
            else:
                logger.info(f"🔍 Password reset requested for unknown email {email}")

            return True, RESET_REQUESTED, None

        except Exception as e:
            logger.error(f"❌ Password reset request error: {str(e)}")
            await db.rollback()
            return False, RESET_REQUESTED, str(e)

    async def reset_password(
        self,
        db: AsyncSession,
        token: str,
        new_password: str
    ) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        """Set a new password from a valid, unexpired reset token"""
        try:
            result = await db.execute(select(User).where(User.reset_token == token))
            user = result.scalar_one_or_none()
            if not user or not user.reset_token_expires:
                return False, None, "This reset link is invalid or has expired."

            expires = user.reset_token_expires
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            if expires < datetime.now(timezone.utc):
                return False, None, "This reset link is invalid or has expired."

            user.password_hash = self._hash_password(new_password)
            user.reset_token = None
            user.reset_token_expires = None
            await db.commit()

            logger.info(f"✅ Password reset for user {user.id}")
            return True, {"user_id": user.id}, None

        except Exception as e:
            logger.error(f"❌ Password reset error: {str(e)}")
            await db.rollback()
            return False, None, "Could not reset your password. Please try again."

    # ==================== PASSWORD UTILITIES ====================

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt()
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def _verify_password(self, password: str, password_hash: str) -> bool:
        """Verify password against hash"""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        except Exception as e:
            logger.error(f"❌ Password verification error: {str(e)}")
            return False
