# jrdriving/schemas/base.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire; snake_case field names are accepted too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageOut(CamelModel):
    message: str


class AttachmentIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: Optional[str] = Field(None, max_length=150)
    size: int = Field(..., ge=0)
    data: str = Field(..., min_length=1)       # base64 content


class AttachmentOut(CamelModel):
    id: int
    file_name: str
    mime_type: Optional[str]
    file_size: int
    created_at: datetime
