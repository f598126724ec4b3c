from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from app.core.config import Settings, get_settings
from models.comic_model import HistoryEntry

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    pass


class PersistenceClient:
    """HTTP client for the external service that stores generated images."""

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.session = session

    @property
    def _http(self):
        return self.session if self.session is not None else requests

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PersistenceClient":
        settings = settings or get_settings()
        return cls(base_url=settings.backend_url, timeout_sec=settings.backend_timeout_sec)

    def save(self, prompt: str, image_url: str) -> None:
        url = f"{self.base_url}/save"
        try:
            response = self._http.post(
                url,
                json={"prompt": prompt, "image_url": image_url},
                timeout=self.timeout_sec,
            )
        except requests.RequestException as error:
            raise PersistenceError(f"Failed to save image: {error}") from error

        if not response.ok:
            raise PersistenceError(
                f"Failed to save image: status={response.status_code} body={response.text[:500]}"
            )
        logger.info("Saved image to history url=%s", image_url)

    def fetch_history(self) -> list[HistoryEntry]:
        url = f"{self.base_url}/history"
        try:
            response = self._http.get(url, timeout=self.timeout_sec)
        except requests.RequestException as error:
            raise PersistenceError(f"Failed to fetch history: {error}") from error

        if not response.ok:
            raise PersistenceError(f"Failed to fetch history: status={response.status_code}")

        try:
            payload: Any = response.json()
        except ValueError as error:
            raise PersistenceError("History response is not valid JSON") from error

        if not isinstance(payload, list):
            raise PersistenceError("History response must be a list")

        entries: list[HistoryEntry] = []
        for index, item in enumerate(payload):
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as error:
                logger.warning("Skipping invalid history entry index=%d: %s", index, error)
        return entries
