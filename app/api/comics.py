from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.core.config import get_settings
from app.core.errors import build_error
from app.schemas.comic import (
    ErrorResponse,
    HistoryResponse,
    ImageResponse,
    PromptRequest,
    StoryResponse,
)
from app.services.image_service import ImageService
from app.services.persistence import PersistenceClient, PersistenceError
from app.services.request_context import log_event
from app.services.story_service import StoryService
from generators.errors import EmptyModelResponseError, MalformedModelResponseError

router = APIRouter(prefix="/api", tags=["comics"])


def _require_prompt(request: PromptRequest) -> str:
    if not request.normalized_prompt():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=build_error(code="PROMPT_REQUIRED", message="Prompt is required"),
        )

    prompt = request.prompt or ""
    max_len = get_settings().prompt_max_len
    if max_len and len(prompt) > max_len:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=build_error(
                code="PROMPT_TOO_LONG",
                message=f"Prompt must be <= {max_len} characters",
                detail={"max_len": max_len},
            ),
        )
    return prompt


@router.post(
    "/generate-story",
    response_model=StoryResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_story(request: PromptRequest) -> StoryResponse:
    prompt = _require_prompt(request)
    log_event(event="story.start", prompt_len=len(prompt))

    try:
        story = StoryService.generate_story(prompt)
    except EmptyModelResponseError as error:
        log_event(event="story.failed", reason=str(error), level=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(code="NO_PROMPTS_GENERATED", message="No prompts generated"),
        ) from None
    except MalformedModelResponseError as error:
        log_event(event="story.failed", reason=str(error), level=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(code="INVALID_STORY_FORMAT", message="Failed to generate story"),
        ) from None
    except Exception as error:
        log_event(event="story.failed", reason=str(error), level=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                code="STORY_GENERATION_FAILED",
                message="Failed to generate story",
            ),
        ) from None

    log_event(event="story.completed", panel_count=len(story.comics))
    return StoryResponse(result=story)


@router.post(
    "/generate-img",
    response_model=ImageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_img(request: PromptRequest) -> ImageResponse:
    prompt = _require_prompt(request)
    log_event(event="image.start", prompt_len=len(prompt))

    try:
        image_url = ImageService.generate_image(prompt)
    except Exception as error:
        log_event(event="image.failed", reason=str(error), level=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error(
                code="IMAGE_GENERATION_FAILED",
                message="Failed to generate image",
            ),
        ) from None

    log_event(event="image.completed", image_url=image_url)
    return ImageResponse(image_url=image_url)


@router.get(
    "/history",
    response_model=HistoryResponse,
    responses={502: {"model": ErrorResponse}},
)
def get_history() -> HistoryResponse:
    try:
        entries = PersistenceClient.from_settings().fetch_history()
    except PersistenceError as error:
        log_event(event="history.failed", reason=str(error), level=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=build_error(code="HISTORY_FETCH_FAILED", message="Failed to fetch history"),
        ) from None

    return entries
