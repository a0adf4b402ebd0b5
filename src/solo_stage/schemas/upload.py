"""Upload-related Pydantic schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    filename: str
