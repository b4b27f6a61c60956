from pydantic import BaseModel
from typing import Optional


class UploadResponse(BaseModel):
    message: str
    url: str
    path: str
    bucket: str


class UploadDeleteRequest(BaseModel):
    bucket: Optional[str] = None
    path: Optional[str] = None
