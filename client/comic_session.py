from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from app.services.persistence import PersistenceClient, PersistenceError
from models.comic_model import HistoryEntry

from client.api_client import ComicApiClient, ComicApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanelSlot:
    index: int
    prompt: str
    caption: str
    image_url: Optional[str] = None
    error: Optional[str] = None


class ComicSession:
    """
    Client-side state for one comic creator page.

    Each call to ``generate`` starts a new generation. Story and image results
    are only written back while their generation is still the current one, so
    a superseded or cancelled run can never overwrite the panels of a newer run.
    Panels are addressed by index and each slot has a single writer.
    """

    def __init__(
        self,
        api: ComicApiClient,
        history_client: PersistenceClient | None = None,
        on_change: Callable[["ComicSession"], None] | None = None,
    ) -> None:
        self.api = api
        self.history_client = history_client
        self.on_change = on_change
        self.panels: list[PanelSlot] = []
        self.history: list[HistoryEntry] = []
        self.error: str | None = None
        self.loading = False
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation_id(self) -> int:
        return self._generation

    def snapshot(self) -> list[PanelSlot]:
        with self._lock:
            return list(self.panels)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _is_current(self, generation_id: int) -> bool:
        return generation_id == self._generation

    def load_history(self) -> list[HistoryEntry]:
        if self.history_client is None:
            return self.history
        try:
            entries = self.history_client.fetch_history()
        except PersistenceError as error:
            logger.error("Error fetching history: %s", error)
            return self.history

        self.history = entries
        self._notify()
        return entries

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self.loading = False
        self._notify()

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            self.panels = []
            self.error = None
            self.loading = True
            return self._generation

    def _set_panels(self, generation_id: int, comics: list[Any]) -> bool:
        slots = []
        for index, panel in enumerate(comics):
            panel = panel if isinstance(panel, dict) else {}
            slots.append(
                PanelSlot(
                    index=index,
                    prompt=str(panel.get("prompt", "")),
                    caption=str(panel.get("caption", "")),
                )
            )
        with self._lock:
            if not self._is_current(generation_id):
                return False
            self.panels = slots
        self._notify()
        return True

    def _update_slot(self, generation_id: int, index: int, **changes: Any) -> bool:
        with self._lock:
            if not self._is_current(generation_id):
                return False
            self.panels[index] = replace(self.panels[index], **changes)
        self._notify()
        return True

    def _finish(self, generation_id: int, error: str | None = None) -> None:
        with self._lock:
            if not self._is_current(generation_id):
                return
            self.loading = False
            if error is not None:
                self.error = error
        self._notify()

    def generate(self, prompt: str) -> list[PanelSlot]:
        generation_id = self._begin()
        self._notify()

        try:
            comics = self.api.generate_story(prompt)
        except ComicApiError as error:
            logger.error("Error generating story: %s", error)
            self._finish(generation_id, error=str(error) or "Failed to generate comic")
            return []

        if not self._set_panels(generation_id, comics):
            return []

        for index, panel in enumerate(self.snapshot()):
            if not self._is_current(generation_id):
                return []
            try:
                image_url = self.api.generate_image(panel.prompt)
            except ComicApiError as error:
                logger.error("Error generating image for panel %d: %s", index, error)
                if not self._update_slot(generation_id, index, error=str(error)):
                    return []
                continue

            if not self._update_slot(generation_id, index, image_url=image_url):
                return []

        self._finish(generation_id)
        return self.snapshot() if self._is_current(generation_id) else []
