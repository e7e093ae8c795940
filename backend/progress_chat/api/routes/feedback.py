"""
Message feedback routes for like/dislike functionality
"""
import logging
from typing import Dict, Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.base import get_db
from ...middleware.auth import require_auth, require_admin
from ...schemas.feedback import FeedbackRequest, FeedbackResponse, FeedbackRecord
from ...services.feedback_service import FeedbackService, FeedbackError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])

feedback_service = FeedbackService()


@router.post("", response_model=FeedbackResponse)
async def submit_feedback(
    request: FeedbackRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit or update feedback for a message

    - If feedback already exists, updates it
    - If not, creates new feedback
    """
    try:
        feedback, created = await feedback_service.submit(
            db, current_user["id"], request.message_id, request.rating, request.reason
        )
        return FeedbackResponse(
            success=True,
            message="Feedback submitted" if created else f"Feedback updated to '{request.rating}'",
            feedback_id=feedback.id
        )

    except FeedbackError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"❌ Error submitting feedback: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to submit feedback")


@router.get("/message/{message_id}")
async def get_message_feedback(
    message_id: int,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Get the caller's feedback for a message"""
    feedback = await feedback_service.get_for_message(db, current_user["id"], message_id)
    if not feedback:
        return {"has_feedback": False, "rating": None, "reason": None}
    return {"has_feedback": True, "rating": feedback.rating, "reason": feedback.reason}


@router.get("", response_model=List[FeedbackRecord])
async def list_feedback(
    current_user: Dict[str, Any] = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All feedback, newest first (admins only)"""
    feedback = await feedback_service.list_all(db)
    logger.info(f"📊 Admin {current_user['id']} fetched {len(feedback)} feedback entries")
    return [FeedbackRecord(**f.to_dict()) for f in feedback]
