# Filename: mediavault/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class StoredFileOut(BaseModel):
    filename: str
    original_name: str = Field(alias="originalName")
    size: int
    upload_date: datetime = Field(alias="uploadDate")
    url: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    model_config = ConfigDict(populate_by_name=True)


class UploadOut(BaseModel):
    message: str
    filename: str
    original_name: str = Field(alias="originalName")
    size: int
    url: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
