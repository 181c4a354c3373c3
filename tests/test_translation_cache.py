import pytest

from conftest import FakeTranslator
from lyricsync.translation_cache import DEFAULT_TTL_SECONDS, LANGUAGE_CODES, TranslationCache


def test_translate_calls_provider_once_for_repeated_line(translator, clock):
    cache = TranslationCache(translator, clock=clock)

    first = cache.translate("Hello", "Turkish")
    second = cache.translate("Hello", "Turkish")

    assert first == second == "tr:Hello"
    assert translator.calls == [("Hello", "tr")]


def test_translate_key_ignores_case_and_surrounding_whitespace(translator, clock):
    cache = TranslationCache(translator, clock=clock)

    cache.translate("Hello", "Spanish")
    assert cache.translate("  hello ", "Spanish") == "es:Hello"
    assert len(translator.calls) == 1
    assert len(cache) == 1


def test_translate_keys_by_language_name_not_code(translator, clock):
    cache = TranslationCache(translator, clock=clock)

    cache.translate("Hello", "Turkish")
    cache.translate("Hello", "tr")

    assert len(translator.calls) == 2
    assert len(cache) == 2


def test_entry_is_trusted_until_ttl(translator, clock):
    cache = TranslationCache(translator, clock=clock)
    cache.translate("Hello", "Turkish")

    clock.advance(DEFAULT_TTL_SECONDS - 0.001)
    cache.translate("Hello", "Turkish")
    assert len(translator.calls) == 1

    clock.advance(0.002)
    cache.translate("Hello", "Turkish")
    assert len(translator.calls) == 2


def test_hit_does_not_refresh_timestamp(translator, clock):
    cache = TranslationCache(translator, ttl_seconds=10, clock=clock)
    cache.translate("Hello", "Turkish")
    clock.advance(9)
    cache.translate("Hello", "Turkish")
    clock.advance(1)
    cache.translate("Hello", "Turkish")
    assert len(translator.calls) == 2


def test_provider_failure_returns_original_text_and_caches_nothing(clock):
    translator = FakeTranslator(fail=True)
    cache = TranslationCache(translator, clock=clock)

    assert cache.translate("hello", "Turkish") == "hello"
    assert len(cache) == 0

    translator.fail = False
    assert cache.translate("hello", "Turkish") == "tr:hello"
    assert len(translator.calls) == 2


def test_provider_failure_with_unexpected_exception_is_swallowed(clock):
    class BrokenTranslator(FakeTranslator):
        def translate(self, text, source_lang="en", target_lang="tr"):
            raise ConnectionError("network down")

    cache = TranslationCache(BrokenTranslator(), clock=clock)
    assert cache.translate("hello", "Turkish") == "hello"


def test_failure_after_expiry_keeps_returning_original(clock):
    translator = FakeTranslator()
    cache = TranslationCache(translator, ttl_seconds=5, clock=clock)
    cache.translate("hello", "German")
    clock.advance(5)
    translator.fail = True
    assert cache.translate("hello", "German") == "hello"


def test_unknown_language_falls_back_to_default_code(translator, clock):
    cache = TranslationCache(translator, default_language_code="fr", clock=clock)
    assert cache.translate("Hello", "Klingon") == "fr:Hello"
    assert cache.language_code("Klingon") == "fr"
    assert cache.language_code("Japanese") == "ja"


def test_language_table_has_expected_codes():
    assert LANGUAGE_CODES["Turkish"] == "tr"
    assert LANGUAGE_CODES["Chinese"] == "zh"
    assert len(LANGUAGE_CODES) == 13


def test_translate_batch_maps_each_line(translator, clock):
    cache = TranslationCache(translator, clock=clock)
    result = cache.translate_batch(["one", "two", "one"], "Italian")
    assert result == {"one": "it:one", "two": "it:two"}
    assert translator.calls == [("one", "it"), ("two", "it")]


def test_purge_expired_drops_only_stale_entries(translator, clock):
    cache = TranslationCache(translator, ttl_seconds=10, clock=clock)
    cache.translate("old", "Turkish")
    clock.advance(6)
    cache.translate("new", "Turkish")
    clock.advance(5)

    assert cache.purge_expired() == 1
    assert len(cache) == 1
    cache.translate("new", "Turkish")
    assert len(translator.calls) == 2


def test_non_positive_ttl_is_rejected(translator):
    with pytest.raises(ValueError):
        TranslationCache(translator, ttl_seconds=0)
