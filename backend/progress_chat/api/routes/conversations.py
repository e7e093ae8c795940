"""
Conversation API Routes
"""
import logging
from typing import Dict, Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.base import get_db
from ...models.user import User
from ...middleware.auth import require_auth
from ...schemas.conversation import (
    ConversationResponse,
    ConversationCreateRequest,
    ConversationUpdateRequest,
    MessageResponse,
    MessageUpdateRequest
)
from ...services.chat_service import ChatService, ChatError
from ...services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])

# Initialize services
conversation_service = ConversationService()
chat_service = ChatService(conversations=conversation_service)


async def _owned_conversation(db: AsyncSession, user_id: int, conversation_id: int):
    conversation = await conversation_service.get_conversation(db, user_id, conversation_id)
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """List the user's conversations, newest first"""
    conversations = await conversation_service.list_conversations(db, current_user["id"])
    return [ConversationResponse(**c.to_dict()) for c in conversations]


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    request: ConversationCreateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    try:
        conversation = await conversation_service.create_conversation(db, current_user["id"], request.title)
        return ConversationResponse(**conversation.to_dict())
    except Exception as e:
        logger.error(f"❌ Error creating conversation: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create conversation")


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: int,
    request: ConversationUpdateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    conversation = await _owned_conversation(db, current_user["id"], conversation_id)
    conversation = await conversation_service.rename_conversation(db, conversation, request.title)
    return ConversationResponse(**conversation.to_dict())


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: int,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Delete a conversation together with its messages"""
    try:
        conversation = await _owned_conversation(db, current_user["id"], conversation_id)
        await conversation_service.delete_conversation(db, conversation)
        return {"success": True, "message": "Conversation deleted"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error deleting conversation: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete conversation")


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_messages(
    conversation_id: int,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    """Messages in order; also marks the conversation as the user's most recent"""
    conversation = await _owned_conversation(db, current_user["id"], conversation_id)
    messages = await conversation_service.get_messages(db, conversation.id)
    await conversation_service.remember_recent(db, current_user["id"], conversation.id)
    return [MessageResponse(**m.to_dict()) for m in messages]


@router.patch("/{conversation_id}/messages/{message_id}", response_model=MessageResponse)
async def edit_message(
    conversation_id: int,
    message_id: int,
    request: MessageUpdateRequest,
    current_user: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db)
):
    try:
        user = await db.get(User, current_user["id"])
        message = await chat_service.edit_message(db, user, conversation_id, message_id, request.content)
        return MessageResponse(**message.to_dict())

    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"❌ Error editing message: {str(e)}")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update message")
