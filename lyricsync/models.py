"""Data models for LyricSync."""

from dataclasses import dataclass
from typing import List, Optional

@dataclass(frozen=True)
class TimedLine:
    """A single lyric line and the playback offset at which it becomes active."""
    offset_ms: int
    text: str

# Sorted ascending by offset_ms, ties kept in input order.
Timeline = List[TimedLine]

@dataclass(frozen=True)
class MatchResult:
    """The active line at a playback position and the line right after it."""
    current: Optional[TimedLine] = None
    next: Optional[TimedLine] = None

@dataclass
class CacheEntry:
    """A stored translation and the clock reading at which it was stored."""
    translation: str
    created_at: float

@dataclass(frozen=True)
class TrackIdentity:
    """Identifies the track a playback snapshot refers to."""
    title: str
    artist: str
    album: Optional[str] = None
    duration_ms: Optional[int] = None
    track_id: Optional[str] = None # Provider-assigned id, when known

    def is_same_track(self, other: Optional["TrackIdentity"]) -> bool:
        """
        Compares two identities the way the session decides on a track change.

        The provider id wins when both sides carry one; otherwise the
        title/artist/album/duration tuple is compared.
        """
        if other is None:
            return False
        if self.track_id and other.track_id:
            return self.track_id == other.track_id
        return (
            (self.title, self.artist, self.album, self.duration_ms)
            == (other.title, other.artist, other.album, other.duration_ms)
        )

    @property
    def duration_s(self) -> Optional[float]:
        if self.duration_ms is None:
            return None
        return self.duration_ms / 1000.0

    def describe(self) -> str:
        return f"'{self.title}' by {self.artist}"

@dataclass(frozen=True)
class PlaybackSnapshot:
    """What the playback source reports on one poll."""
    track: TrackIdentity
    position_ms: int
    is_playing: bool = True

@dataclass(frozen=True)
class LyricsResult:
    """Lyrics returned by a lyrics provider for one track."""
    track_name: str
    artist_name: str
    album_name: Optional[str] = None
    duration_s: Optional[float] = None
    synced_lyrics: Optional[str] = None
    plain_lyrics: Optional[str] = None
    instrumental: bool = False
    source: str = "get" # "get" | "search"

@dataclass
class SessionFrame:
    """Everything the display layer needs after one poll tick."""
    track: TrackIdentity
    position_ms: int
    is_playing: bool
    current: Optional[TimedLine] = None
    next: Optional[TimedLine] = None
    current_translation: Optional[str] = None
    next_translation: Optional[str] = None
    has_lyrics: bool = False
    plain_lyrics: Optional[str] = None
    line_changed: bool = False
