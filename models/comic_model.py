from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ComicPanel(BaseModel):
    prompt: str = Field(..., description="Image generation prompt for this panel")
    caption: str = Field(..., description="Caption text shown under the panel image")


class ComicStory(BaseModel):
    comics: List[ComicPanel] = Field(..., description="Panels in reading order")

    @field_validator("comics")
    def check_panel_count(cls, v):
        if not v:
            raise ValueError("Story must have at least one panel")
        return v


class HistoryEntry(BaseModel):
    prompt: str
    image_url: str
    created_at: str = ""

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value):
        if value is None:
            return ""
        return str(value)

    def created_date(self) -> Optional[date]:
        raw = self.created_at.strip()
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            return None
