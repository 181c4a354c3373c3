"""Joins playback snapshots, timed lyrics and translations for one listener."""

import logging
from typing import Optional

from .exceptions import LyricsProviderError
from .lrc_parser import parse_lrc
from .lyrics_provider import LyricsProvider
from .matcher import current_index, match_position
from .models import PlaybackSnapshot, SessionFrame, Timeline, TrackIdentity
from .translation_cache import TranslationCache

logger = logging.getLogger(__name__)

class LyricsSession:
    """
    Holds the state of one listening session: the active track, its timeline
    and the translation cache.

    tick() is meant to be called once per poll. The lyrics provider and the
    parser only run when the track changes; the timeline is swapped in whole
    before the matcher sees it.
    """

    def __init__(
        self,
        lyrics_provider: LyricsProvider,
        translation_cache: TranslationCache,
        language: str = "Turkish",
    ):
        """
        Initializes the LyricsSession.

        Args:
            lyrics_provider: Source of synced lyrics.
            translation_cache: Cache owned by this session.
            language: Target language display name (e.g. "Turkish").
        """
        self.lyrics_provider = lyrics_provider
        self.translation_cache = translation_cache
        self.language = language
        self.track: Optional[TrackIdentity] = None
        self.timeline: Timeline = []
        self.plain_lyrics: Optional[str] = None
        self._last_index = -1

    def load_track(self, track: TrackIdentity) -> Timeline:
        """
        Fetches and parses lyrics for track, replacing the current timeline.

        A provider failure leaves the track without lyrics; the lookup is not
        retried until the next track change.
        """
        logger.info(f"Track changed to {track.describe()}")
        timeline: Timeline = []
        plain = None
        try:
            result = self.lyrics_provider.lookup(track.title, track.artist, track.album, track.duration_s)
        except LyricsProviderError as e:
            logger.warning(f"Lyrics lookup failed for {track.describe()}: {e}")
            result = None

        if result is not None:
            timeline = parse_lrc(result.synced_lyrics)
            plain = result.plain_lyrics
            if not timeline:
                logger.info(f"No synced lyrics for {track.describe()}.")
            else:
                logger.info(f"Loaded {len(timeline)} timed lines for {track.describe()}.")

        self.track = track
        self.timeline = timeline
        self.plain_lyrics = plain
        self._last_index = -1
        return timeline

    def tick(self, snapshot: PlaybackSnapshot) -> SessionFrame:
        """Advances the session to a new playback snapshot."""
        track_changed = not snapshot.track.is_same_track(self.track)
        if track_changed:
            self.load_track(snapshot.track)

        frame = SessionFrame(
            track=snapshot.track,
            position_ms=snapshot.position_ms,
            is_playing=snapshot.is_playing,
            has_lyrics=bool(self.timeline),
            plain_lyrics=self.plain_lyrics,
            line_changed=track_changed,
        )
        if not self.timeline:
            return frame

        match = match_position(self.timeline, snapshot.position_ms)
        index = current_index(self.timeline, snapshot.position_ms)
        if index != self._last_index:
            frame.line_changed = True
            self._last_index = index

        frame.current = match.current
        frame.next = match.next
        if match.current is not None:
            frame.current_translation = self.translation_cache.translate(match.current.text, self.language)
        if match.next is not None:
            frame.next_translation = self.translation_cache.translate(match.next.text, self.language)
        return frame
