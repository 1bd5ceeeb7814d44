"""
Pydantic schemas for achievement endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from infraworks.schemas.common import CamelModel


class AchievementCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    image_url: str = Field(default="", max_length=1024)
    date: str = Field(default="", max_length=64)


class AchievementUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    date: Optional[str] = Field(default=None, max_length=64)


class AchievementResponse(CamelModel):
    id: str
    title: str
    description: str = ""
    image_url: str = ""
    date: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
