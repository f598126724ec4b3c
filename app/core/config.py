from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from generators.constants import DEFAULT_IMAGE_MODEL

DEFAULT_BACKEND_URL = "https://sundai-backend-176750765325.us-east4.run.app"


def _parse_int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value < 1:
        return default
    return value


def _parse_str_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


@dataclass(frozen=True)
class Settings:
    project_root: Path
    static_dir: Path
    backend_url: str = DEFAULT_BACKEND_URL
    backend_timeout_sec: int = 30
    story_model: str = "gemini-2.5-flash"
    image_model: str = DEFAULT_IMAGE_MODEL
    image_model_variant: str = "schnell"
    image_inference_steps: int = 8
    # 0 disables the length check
    prompt_max_len: int = 0

    @property
    def save_url(self) -> str:
        return f"{self.backend_url}/save"

    @property
    def history_url(self) -> str:
        return f"{self.backend_url}/history"


def get_settings() -> Settings:
    project_root = Path(__file__).resolve().parents[2]
    return Settings(
        project_root=project_root,
        static_dir=Path(__file__).resolve().parents[1] / "static",
        backend_url=_parse_str_env("COMIC_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
        backend_timeout_sec=_parse_int_env("COMIC_BACKEND_TIMEOUT_SEC", default=30),
        story_model=_parse_str_env("COMIC_STORY_MODEL", "gemini-2.5-flash"),
        image_model=_parse_str_env("COMIC_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        image_model_variant=_parse_str_env("COMIC_IMAGE_MODEL_VARIANT", "schnell"),
        image_inference_steps=_parse_int_env("COMIC_IMAGE_INFERENCE_STEPS", default=8),
        prompt_max_len=_parse_int_env("COMIC_PROMPT_MAX_LEN", default=0),
    )
