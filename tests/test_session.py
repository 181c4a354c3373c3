from conftest import FakeLyricsProvider, make_lyrics, make_snapshot, make_track
from lyricsync.exceptions import LyricsProviderError
from lyricsync.session import LyricsSession
from lyricsync.translation_cache import TranslationCache


def make_session(translator, clock, provider=None, language="Turkish"):
    provider = provider or FakeLyricsProvider({"Song": make_lyrics()})
    cache = TranslationCache(translator, clock=clock)
    return LyricsSession(provider, cache, language=language), provider


def test_poll_sequence_follows_timeline(translator, clock):
    session, _ = make_session(translator, clock)

    frames = [session.tick(make_snapshot(position)) for position in (0, 1200, 1800, 2600)]

    currents = [frame.current.text if frame.current else None for frame in frames]
    assert currents == [None, "line1", "line1", "line2"]
    assert frames[1].next.text == "line2"
    assert frames[1].current_translation == "tr:line1"
    assert frames[1].next_translation == "tr:line2"
    assert frames[0].next is None
    assert frames[0].current_translation is None


def test_lyrics_are_fetched_once_per_track(translator, clock):
    provider = FakeLyricsProvider({"Song": make_lyrics(), "Other": make_lyrics(title="Other")})
    session, _ = make_session(translator, clock, provider)

    for position in (1000, 1500, 2000):
        session.tick(make_snapshot(position))
    session.tick(make_snapshot(1000, track=make_track(title="Other", track_id="id-2")))

    assert [lookup[0] for lookup in provider.lookups] == ["Song", "Other"]
    assert provider.lookups[0] == ("Song", "Artist", "Album", 180.0)


def test_repeated_ticks_reuse_cached_translations(translator, clock):
    session, _ = make_session(translator, clock)

    for position in (1000, 1100, 1200, 1300):
        session.tick(make_snapshot(position))

    assert translator.calls == [("line1", "tr"), ("line2", "tr")]


def test_line_changed_flag_only_set_on_transitions(translator, clock):
    session, _ = make_session(translator, clock)

    flags = [session.tick(make_snapshot(position)).line_changed for position in (0, 500, 1000, 1500, 2000)]

    assert flags == [True, False, True, False, True]


def test_track_without_lyrics_yields_empty_frame(translator, clock):
    session, _ = make_session(translator, clock, FakeLyricsProvider({}))

    frame = session.tick(make_snapshot(5000))

    assert frame.has_lyrics is False
    assert frame.current is None and frame.next is None
    assert translator.calls == []


def test_plain_only_lyrics_are_exposed(translator, clock):
    provider = FakeLyricsProvider({"Song": make_lyrics(synced=None, plain="just words")})
    session, _ = make_session(translator, clock, provider)

    frame = session.tick(make_snapshot(5000))

    assert frame.has_lyrics is False
    assert frame.plain_lyrics == "just words"


def test_provider_error_is_treated_as_missing_lyrics(translator, clock):
    provider = FakeLyricsProvider(error=LyricsProviderError("lrclib down"))
    session, _ = make_session(translator, clock, provider)

    first = session.tick(make_snapshot(1000))
    second = session.tick(make_snapshot(2000))

    assert first.has_lyrics is False and second.has_lyrics is False
    assert len(provider.lookups) == 1


def test_same_track_without_id_is_matched_by_metadata(translator, clock):
    session, provider = make_session(translator, clock)
    track = make_track(track_id=None)

    session.tick(make_snapshot(1000, track=track))
    session.tick(make_snapshot(1500, track=make_track(track_id=None)))
    session.tick(make_snapshot(1500, track=make_track(track_id=None, duration_ms=200000)))

    assert len(provider.lookups) == 2
