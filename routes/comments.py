from fastapi import APIRouter, HTTPException, Depends
from permissions import require, can_delete_comment
from storage.posts import get_comment, delete_comment as delete_comment_row
from routes.deps import get_current_user

router = APIRouter(prefix="/api/comments", tags=["comments"])

@router.delete("/{comment_id}")
def delete_comment(comment_id: int, current_user: dict = Depends(get_current_user)):
    comment = get_comment(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    require(can_delete_comment(current_user, comment), "You do not have permission to delete this comment.")
    delete_comment_row(comment_id)
    return {"success": True}
