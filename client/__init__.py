from .api_client import ComicApiClient, ComicApiError
from .comic_session import ComicSession, PanelSlot

__all__ = ["ComicApiClient", "ComicApiError", "ComicSession", "PanelSlot"]
