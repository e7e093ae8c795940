"""
Chat API Routes
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.base import get_db
from ...models.user import User
from ...middleware.auth import require_auth
from ...schemas.chat import ChatRequest, ChatResponse, RegenerateRequest
from ...schemas.conversation import MessageResponse
from ...services.chat_service import ChatService, ChatError
from ...services.streaming_service import StreamingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

# Initialize services
chat_service = ChatService()
streaming_service = StreamingService()


def _to_response(result: Dict[str, Any]) -> ChatResponse:
    conversation = result["conversation"]
    return ChatResponse(
        conversation_id=conversation.id,
        title=conversation.title,
        user_message=MessageResponse(**result["user_message"].to_dict()) if result.get("user_message") else None,
        message=MessageResponse(**result["message"].to_dict())
    )


async def _current_user(db: AsyncSession, current_user: Dict[str, Any]) -> User:
    user = await db.get(User, current_user["id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/send", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a message and get the assistant's reply

    Creates the conversation (titled from this message) when no id is given.
    """
    try:
        user = await _current_user(db, current_user)
        result = await chat_service.send_message(
            db,
            user,
            request.message,
            conversation_id=request.conversation_id,
            attachment_data_uri=request.attachment_data_uri,
            mode=request.mode
        )
        return _to_response(result)

    except HTTPException:
        raise
    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"❌ Send message failed: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to send message")


@router.post("/stream")
async def stream_message(
    request: ChatRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a message and receive the reply as Server-Sent Events

    The reply is stored before the stream starts; the stream paces it out
    as token chunks and ends with a done chunk carrying the stored message.
    """
    try:
        user = await _current_user(db, current_user)
        result = await chat_service.send_message(
            db,
            user,
            request.message,
            conversation_id=request.conversation_id,
            attachment_data_uri=request.attachment_data_uri,
            mode=request.mode
        )
        response = _to_response(result)

        metadata = {
            "conversation_id": response.conversation_id,
            "title": response.title,
            "user_message": response.user_message.model_dump() if response.user_message else None,
        }
        return StreamingResponse(
            streaming_service.stream_reply(
                response.message.content,
                metadata=metadata,
                done_metadata={"message": response.message.model_dump()}
            ),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no"  # Disable nginx buffering
            }
        )

    except HTTPException:
        raise
    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"❌ Stream message failed: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to send message")


@router.post("/regenerate", response_model=ChatResponse)
async def regenerate(
    request: RegenerateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Drop the replies to the last user message and generate a new one"""
    try:
        user = await _current_user(db, current_user)
        result = await chat_service.regenerate(db, user, request.conversation_id, mode=request.mode)
        return _to_response(result)

    except HTTPException:
        raise
    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"❌ Regenerate failed: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to regenerate response")
