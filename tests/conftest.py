"""Shared test doubles for the network-backed collaborators."""

from typing import Dict, List, Optional, Tuple

import pytest

from lyricsync.exceptions import TranslationError
from lyricsync.lyrics_provider import LyricsProvider
from lyricsync.models import LyricsResult, PlaybackSnapshot, TrackIdentity
from lyricsync.playback import PlaybackSource
from lyricsync.translator import Translator

class FakeTranslator(Translator):
    """Records calls and answers '<code>:<text>' unless told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[Tuple[str, str]] = []

    def translate(self, text, source_lang="en", target_lang="tr"):
        self.calls.append((text, target_lang))
        if self.fail:
            raise TranslationError("provider unavailable")
        return f"{target_lang}:{text}"

class FakeLyricsProvider(LyricsProvider):
    def __init__(self, results: Optional[Dict[str, LyricsResult]] = None, error: Optional[Exception] = None):
        self.results = results or {}
        self.error = error
        self.lookups: List[tuple] = []

    def lookup(self, track_name, artist_name, album_name=None, duration_s=None):
        self.lookups.append((track_name, artist_name, album_name, duration_s))
        if self.error is not None:
            raise self.error
        return self.results.get(track_name)

class ScriptedPlayback(PlaybackSource):
    """Returns the queued snapshots (or raises queued exceptions) in order."""

    def __init__(self, items):
        self.items = list(items)

    def get_snapshot(self):
        item = self.items.pop(0) if self.items else None
        if isinstance(item, Exception):
            raise item
        return item

class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

THREE_LINES_LRC = "[00:01.00]line1\n[00:02.00]line2\n[00:03.00]line3\n"

def make_track(title="Song", artist="Artist", track_id="id-1", duration_ms=180000):
    return TrackIdentity(title=title, artist=artist, album="Album", duration_ms=duration_ms, track_id=track_id)

def make_snapshot(position_ms, track=None, is_playing=True):
    return PlaybackSnapshot(track=track or make_track(), position_ms=position_ms, is_playing=is_playing)

def make_lyrics(synced=THREE_LINES_LRC, plain=None, title="Song"):
    return LyricsResult(track_name=title, artist_name="Artist", synced_lyrics=synced, plain_lyrics=plain)

@pytest.fixture
def translator():
    return FakeTranslator()

@pytest.fixture
def clock():
    return FakeClock()
