from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.comic_model import ComicStory, HistoryEntry


class PromptRequest(BaseModel):
    prompt: Optional[str] = None

    def normalized_prompt(self) -> str:
        return (self.prompt or "").strip()


class StoryResponse(BaseModel):
    result: ComicStory


class ImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: Optional[dict] = None


HistoryResponse = list[HistoryEntry]
