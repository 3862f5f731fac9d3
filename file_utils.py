import base64
import binascii
from pathlib import Path
from typing import Iterable, List, Optional

MAX_FILENAME_LENGTH = 255
DEFAULT_MIME_TYPE = "application/octet-stream"

def decode_base64_payload(data: str) -> Optional[bytes]:
    """Decode an uploaded base64 body, tolerating a data: URL prefix. None if malformed."""
    if "," in data and data.lstrip().startswith("data:"):
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return None

def clean_filename(original_filename: str) -> str:
    """Strip any directory part and clamp the length, keeping the extension"""
    name = Path(original_filename.replace("\\", "/")).name.strip() or "file"
    if len(name) > MAX_FILENAME_LENGTH:
        ext = Path(name).suffix[:16]
        name = name[:MAX_FILENAME_LENGTH - len(ext)] + ext
    return name

def parse_attachment_ids(value: Optional[str]) -> List[int]:
    """Parse a comma-joined id list ("3,7, 9"), dropping blanks and duplicates."""
    if not value:
        return []
    ids = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise ValueError(f"Invalid file attachment id: {part!r}")
        file_id = int(part)
        if file_id not in ids:
            ids.append(file_id)
    return ids

def join_attachment_ids(ids: Iterable[int]) -> Optional[str]:
    joined = ",".join(str(i) for i in ids)
    return joined or None

def get_file_url(file_id: int) -> str:
    return f"/api/files/{file_id}"
