import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from config import settings
from database import to_db_timestamp
from file_utils import decode_base64_payload, clean_filename, get_file_url, DEFAULT_MIME_TYPE
from permissions import require, can_delete_file
from schemas import FileUpload, FileResponse
from storage import files as file_store
from routes.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])

def to_file_response(record: dict) -> dict:
    return {**record, "url": get_file_url(record["id"])}

def get_live_file_or_404(file_id: int) -> dict:
    record = file_store.get_file(file_id)
    if not record or record["expires_at"] <= to_db_timestamp(datetime.now(timezone.utc)):
        raise HTTPException(status_code=404, detail="File not found")
    return record

@router.post("", response_model=FileResponse)
def upload_file(data: FileUpload, current_user: dict = Depends(get_current_user)):
    # Check the declared size before decoding anything
    if data.size > settings.max_upload_bytes:
        raise HTTPException(status_code=400, detail="File exceeds 25MB limit.")
    content = decode_base64_payload(data.data)
    if content is None:
        raise HTTPException(status_code=400, detail="File data is not valid base64.")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=400, detail="File exceeds 25MB limit.")
    record = file_store.create_file(
        clean_filename(data.filename),
        data.mime_type or DEFAULT_MIME_TYPE,
        content,
        current_user["id"],
        timedelta(hours=settings.file_expiry_hours),
    )
    return to_file_response(record)

@router.get("/{file_id}")
def download_file(file_id: int, current_user: dict = Depends(get_current_user)):
    record = get_live_file_or_404(file_id)
    content = file_store.get_file_data(file_id)
    if content is None:
        raise HTTPException(status_code=404, detail="File not found")
    headers = {"Content-Disposition": f"inline; filename*=UTF-8''{quote(record['filename'])}"}
    return Response(content=content, media_type=record["mime_type"], headers=headers)

@router.delete("/{file_id}")
def delete_file(file_id: int, current_user: dict = Depends(get_current_user)):
    record = file_store.get_file(file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    require(can_delete_file(current_user, record), "You do not have permission to delete this file.")
    file_store.delete_file(file_id)
    logger.info("File %s deleted by %s", file_id, current_user["id"])
    return {"success": True}
