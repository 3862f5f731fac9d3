from fastapi import APIRouter, HTTPException, Depends
from typing import List
from permissions import require, can_delete_direct_message
from schemas import DirectMessageCreate, DirectMessageResponse
from storage import direct_messages as dm_store
from storage.users import get_user
from routes.deps import get_current_user

router = APIRouter(prefix="/api/dm", tags=["dm"])

@router.get("/{user_id}", response_model=List[DirectMessageResponse])
def get_conversation(user_id: str, current_user: dict = Depends(get_current_user)):
    if not get_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return dm_store.get_conversation(current_user["id"], user_id)

@router.post("/{user_id}", response_model=DirectMessageResponse)
def send_direct_message(user_id: str, data: DirectMessageCreate, current_user: dict = Depends(get_current_user)):
    if user_id == current_user["id"]:
        raise HTTPException(status_code=400, detail="Cannot message yourself")
    if not get_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return dm_store.create_direct_message(current_user["id"], user_id, data.content)

@router.delete("/messages/{message_id}")
def delete_direct_message(message_id: int, current_user: dict = Depends(get_current_user)):
    message = dm_store.get_direct_message(message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    require(can_delete_direct_message(current_user, message), "You can only delete messages you sent.")
    dm_store.delete_direct_message(message_id)
    return {"success": True}
