from pydantic import field_validator
from datetime import datetime
from schemas.shared import CamelModel

class FileUpload(CamelModel):
    filename: str
    mime_type: str
    size: int
    data: str  # base64

    @field_validator('size')
    @classmethod
    def validate_size(cls, v):
        if v < 0:
            raise ValueError('Size must not be negative')
        return v

class FileResponse(CamelModel):
    id: int
    filename: str
    mime_type: str
    size: int
    uploaded_by: str
    expires_at: datetime
    created_at: datetime
    url: str
