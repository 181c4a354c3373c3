"""Reads the listener's current playback state from Spotify."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import spotipy
from spotipy.oauth2 import SpotifyOAuth

from .exceptions import ConfigurationError, PlaybackError
from .models import PlaybackSnapshot, TrackIdentity

logger = logging.getLogger(__name__)

SPOTIFY_SCOPES = "user-read-currently-playing user-read-playback-state"

class PlaybackSource(ABC):
    """Abstract base class for playback position sources."""

    @abstractmethod
    def get_snapshot(self) -> Optional[PlaybackSnapshot]:
        """
        Reports the active track and how far into it playback is.

        Returns:
            A PlaybackSnapshot, or None when nothing is playing.

        Raises:
            PlaybackError: If the source cannot be queried.
        """
        pass

def snapshot_from_payload(payload: Optional[dict]) -> Optional[PlaybackSnapshot]:
    """Maps a currently-playing response to a PlaybackSnapshot."""
    if not payload or not payload.get("item"):
        return None
    item = payload["item"]
    artists = [a.get("name", "") for a in item.get("artists") or []]
    album = item.get("album") or {}
    track = TrackIdentity(
        title=item.get("name", ""),
        artist=artists[0] if artists else "",
        album=album.get("name"),
        duration_ms=item.get("duration_ms"),
        track_id=item.get("id"),
    )
    return PlaybackSnapshot(
        track=track,
        position_ms=int(payload.get("progress_ms") or 0),
        is_playing=bool(payload.get("is_playing")),
    )

class SpotifyPlaybackSource(PlaybackSource):
    """Polls Spotify's currently-playing endpoint through spotipy."""

    def __init__(self, client: spotipy.Spotify):
        self.client = client

    @classmethod
    def from_config(cls, config: dict) -> "SpotifyPlaybackSource":
        """
        Builds a source whose OAuth flow is run by spotipy's SpotifyOAuth.

        Raises:
            ConfigurationError: If Spotify credentials are missing.
        """
        client_id = config.get("spotify_client_id")
        client_secret = config.get("spotify_client_secret")
        redirect_uri = config.get("spotify_redirect_uri")
        if not client_id or not client_secret or not redirect_uri:
            raise ConfigurationError(
                "Spotify credentials missing. Set spotify_client_id, spotify_client_secret and "
                "spotify_redirect_uri in the config file or the SPOTIFY_* environment variables."
            )
        auth_manager = SpotifyOAuth(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            scope=SPOTIFY_SCOPES,
            cache_path=config.get("spotify_token_cache"),
        )
        return cls(spotipy.Spotify(auth_manager=auth_manager, requests_timeout=config.get("request_timeout_seconds", 15)))

    def get_snapshot(self) -> Optional[PlaybackSnapshot]:
        try:
            payload = self.client.current_user_playing_track()
        except spotipy.SpotifyException as e:
            if e.http_status == 401:
                raise PlaybackError("Spotify access token expired or invalid.") from e
            raise PlaybackError(f"Failed to get current track from Spotify: {e}") from e
        except Exception as e:
            raise PlaybackError(f"Failed to get current track from Spotify: {e}") from e
        return snapshot_from_payload(payload)
