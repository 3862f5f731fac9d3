import logging
from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends, Query
from starlette.concurrency import run_in_threadpool
from typing import List
from notifications import notify_chat_message
from permissions import require, can_delete_chat_message
from realtime import ConnectionRegistry, chat_message_event
from schemas import ChatMessageCreate, ChatMessageResponse
from storage import chat as chat_store
from routes.deps import get_current_user, get_registry
from routes.posts import normalize_attachments

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

@router.get("", response_model=List[ChatMessageResponse])
def list_chat_messages(limit: int = Query(100, ge=1, le=500), current_user: dict = Depends(get_current_user)):
    return chat_store.get_chat_messages(limit)

@router.post("", response_model=ChatMessageResponse)
async def send_chat_message(
    data: ChatMessageCreate,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
    registry: ConnectionRegistry = Depends(get_registry),
):
    attachments = await run_in_threadpool(normalize_attachments, data.file_attachment_ids)
    message = await run_in_threadpool(chat_store.create_chat_message, current_user["id"], data.content, attachments)
    # Only broadcast what has been committed
    payload = ChatMessageResponse.model_validate(message).model_dump(by_alias=True, mode="json")
    await registry.broadcast(chat_message_event(payload))
    background_tasks.add_task(notify_chat_message, message, current_user)
    return message

@router.delete("/{message_id}")
def delete_chat_message(message_id: int, current_user: dict = Depends(get_current_user)):
    require(can_delete_chat_message(current_user), "Admin access required")
    if not chat_store.delete_chat_message(message_id):
        raise HTTPException(status_code=404, detail="Message not found")
    logger.info("Chat message %s deleted by %s", message_id, current_user["id"])
    return {"success": True}
