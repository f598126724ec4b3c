from __future__ import annotations

from typing import Any

import requests

DEFAULT_API_BASE = "http://127.0.0.1:8000"


class ComicApiError(RuntimeError):
    pass


class ComicApiClient:
    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout_sec: float = 300,
        session: requests.Session | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()

    def _post(self, path: str, prompt: str) -> tuple[bool, dict[str, Any]]:
        try:
            response = self.session.post(
                f"{self.api_base}{path}",
                json={"prompt": prompt},
                timeout=self.timeout_sec,
            )
        except requests.RequestException as error:
            raise ComicApiError(str(error)) from error

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return response.ok, data

    def generate_story(self, prompt: str) -> list[dict[str, Any]]:
        ok, data = self._post("/api/generate-story", prompt)
        if not ok:
            raise ComicApiError(data.get("error") or "Failed to generate story")

        result = data.get("result")
        comics = result.get("comics") if isinstance(result, dict) else None
        if not isinstance(comics, list):
            raise ComicApiError("Invalid story format received")
        return comics

    def generate_image(self, prompt: str) -> str:
        ok, data = self._post("/api/generate-img", prompt)
        image_url = data.get("imageUrl")
        if not ok or not isinstance(image_url, str) or not image_url:
            raise ComicApiError(data.get("error") or "Failed to generate image")
        return image_url
