"""
Profile and memory routes
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.base import get_db
from ...models.user import User
from ...middleware.auth import require_auth
from ...schemas.profile import ProfileResponse, ProfileUpdateRequest, MemoryResponse, MemoryUpdateRequest
from ...services.auth_service import user_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


async def _load_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    user = await _load_user(db, current_user["id"])
    return ProfileResponse(**user_to_dict(user))


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Update only the fields present in the request"""
    try:
        user = await _load_user(db, current_user["id"])
        changes = request.model_dump(exclude_unset=True)

        if "location" in changes:
            location = request.location
            user.latitude = location.latitude if location else None
            user.longitude = location.longitude if location else None
            changes.pop("location")

        for field, value in changes.items():
            if value is None and field in ("first_name", "last_name", "age", "voice_mode_enabled"):
                continue
            setattr(user, field, value.strip() if isinstance(value, str) else value)

        await db.commit()
        await db.refresh(user)
        logger.info(f"✅ Updated profile for user {user.id}: {sorted(request.model_fields_set)}")
        return ProfileResponse(**user_to_dict(user))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error updating profile: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.get("/memory", response_model=MemoryResponse)
async def get_memory(
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    user = await _load_user(db, current_user["id"])
    return MemoryResponse(memory=user.memory or "")


@router.put("/memory", response_model=MemoryResponse)
async def update_memory(
    request: MemoryUpdateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Replace the user's memory notes"""
    try:
        user = await _load_user(db, current_user["id"])
        user.memory = request.memory
        await db.commit()
        logger.info(f"✅ Saved memory for user {user.id} ({len(request.memory)} chars)")
        return MemoryResponse(memory=user.memory)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error saving memory: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save memory")
