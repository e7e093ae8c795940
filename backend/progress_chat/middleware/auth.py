"""
Authentication Middleware for Progress Chat
Handles JWT authentication and user verification
"""
import logging
from typing import Dict, Any, Optional

from fastapi import HTTPException, Request, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import get_db
from ..models.user import User
from ..services.auth_service import AuthService, is_admin_email

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

auth_service = AuthService()


async def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Authentication dependency - extracts user from JWT token
    Use this on all protected routes
    """
    try:
        # Authorization header first, then the browser cookie
        token = credentials.credentials if credentials else request.cookies.get("token")
        if not token:
            raise HTTPException(status_code=401, detail="Not authenticated")

        is_valid, payload, error = auth_service.verify_access_token(token)
        if not is_valid:
            raise HTTPException(status_code=401, detail=error)

        # Verify user exists in database
        user = await db.get(User, payload["id"])
        if not user:
            raise HTTPException(status_code=401, detail="User not found")

        return {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "is_admin": is_admin_email(user.email),
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Authentication error: {str(e)}")
        raise HTTPException(status_code=401, detail="Authentication failed")


async def require_admin(
    current_user: Dict[str, Any] = Depends(require_auth)
) -> Dict[str, Any]:
    """
    Admin requirement dependency
    Use this on admin-only routes
    """
    if not current_user.get("is_admin", False):
        raise HTTPException(status_code=403, detail="Admin access required")

    return current_user
