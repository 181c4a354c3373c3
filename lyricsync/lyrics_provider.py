"""Looks up synced lyrics for a track from LRCLIB."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from .exceptions import LyricsProviderError
from .models import LyricsResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://lrclib.net"
DEFAULT_USER_AGENT = "lyricsync/0.1 (+https://lrclib.net)"

class LyricsProvider(ABC):
    """Abstract base class for lyrics sources."""

    @abstractmethod
    def lookup(
        self,
        track_name: str,
        artist_name: str,
        album_name: Optional[str] = None,
        duration_s: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        """
        Finds lyrics for a track.

        Returns:
            A LyricsResult, or None when the provider knows nothing about the track.

        Raises:
            LyricsProviderError: If the provider cannot be reached.
        """
        pass

def _clean(value) -> Optional[str]:
    return (value or "").strip() or None

def _to_result(data: dict, source: str) -> LyricsResult:
    synced = _clean(data.get("syncedLyrics"))
    return LyricsResult(
        track_name=data.get("trackName") or data.get("name") or "",
        artist_name=data.get("artistName") or "",
        album_name=data.get("albumName"),
        duration_s=data.get("duration"),
        synced_lyrics=synced,
        plain_lyrics=_clean(data.get("plainLyrics")),
        instrumental=bool(data.get("instrumental", False)) or synced == "[au: instrumental]",
        source=source,
    )

class LrcLibClient(LyricsProvider):
    """
    LRCLIB client.

    Tries the exact-metadata endpoint first and falls back to a free-text
    search when the exact match is missing or carries no synced lyrics.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _get(self, path: str, params: dict):
        url = f"{self.base_url}{path}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            if r.status_code == 404:
                return None
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.error(f"LRCLIB request to {path} failed: {e}")
            raise LyricsProviderError(f"LRCLIB request to {path} failed: {e}") from e
        except ValueError as e:
            # JSON decoding
            logger.error(f"LRCLIB returned a malformed response for {path}: {e}")
            raise LyricsProviderError(f"Malformed LRCLIB response for {path}: {e}") from e

    def get_by_metadata(
        self,
        track_name: str,
        artist_name: str,
        album_name: Optional[str] = None,
        duration_s: Optional[float] = None,
    ) -> Optional[dict]:
        # GET /api/get?track_name=&artist_name=&album_name=&duration=
        params = {"track_name": track_name, "artist_name": artist_name}
        if album_name:
            params["album_name"] = album_name
        if duration_s and duration_s > 0:
            params["duration"] = int(round(duration_s))
        data = self._get("/api/get", params)
        return data if isinstance(data, dict) else None

    def search(self, query: str) -> list:
        # GET /api/search?q=
        data = self._get("/api/search", {"q": query})
        if not isinstance(data, list):
            return []
        if not all(isinstance(item, dict) for item in data):
            logger.error(f"LRCLIB search for '{query}' returned malformed entries.")
            raise LyricsProviderError(f"Malformed LRCLIB search results for '{query}'")
        return data

    def lookup(
        self,
        track_name: str,
        artist_name: str,
        album_name: Optional[str] = None,
        duration_s: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        logger.info(f"Looking up lyrics for '{track_name}' by {artist_name}")
        exact = self.get_by_metadata(track_name, artist_name, album_name, duration_s)
        if exact and _clean(exact.get("syncedLyrics")):
            logger.info("LRCLIB: found synced lyrics by exact match.")
            return _to_result(exact, "get")

        items = self.search(f"{artist_name} {track_name}")
        if items:
            best = next((item for item in items if _clean(item.get("syncedLyrics"))), items[0])
            logger.info("LRCLIB: using best match from search results.")
            return _to_result(best, "search")

        if exact:
            logger.info("LRCLIB: only plain lyrics available.")
            return _to_result(exact, "get")

        logger.info(f"LRCLIB: no lyrics found for '{track_name}' by {artist_name}.")
        return None
