"""Memoizes line translations per target language with a time-to-live."""

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Tuple

from .models import CacheEntry
from .translator import Translator
from .utils import shorten

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_LANGUAGE_CODE = "tr"

# Display names accepted from the UI layer, mapped to provider language codes.
LANGUAGE_CODES: Dict[str, str] = {
    "Turkish": "tr",
    "English": "en",
    "Spanish": "es",
    "French": "fr",
    "German": "de",
    "Italian": "it",
    "Portuguese": "pt",
    "Russian": "ru",
    "Japanese": "ja",
    "Korean": "ko",
    "Chinese": "zh",
    "Arabic": "ar",
    "Hindi": "hi",
}

CacheKey = Tuple[str, str]

class TranslationCache:
    """
    Wraps a Translator so that each (line, language) pair is only sent to the
    provider once per TTL window.

    Entries are keyed by the lowercased, trimmed line text and the language
    *name* exactly as the caller passes it. Stale entries are not removed,
    only ignored, until purge_expired() is called. Provider failures never
    reach the caller: the original line is returned and nothing is cached,
    so the next call tries the provider again.

    One instance belongs to one session. There is no locking; two callers
    racing on a key can at worst both call the provider and both write.
    """

    def __init__(
        self,
        translator: Translator,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        default_language_code: str = DEFAULT_LANGUAGE_CODE,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initializes the TranslationCache.

        Args:
            translator: The provider cache misses are delegated to.
            ttl_seconds: Age at which an entry stops being trusted.
            default_language_code: Code used for language names missing from LANGUAGE_CODES.
            clock: Source of the current time in seconds (injectable for tests).

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl_seconds}.")
        self.translator = translator
        self.ttl_seconds = ttl_seconds
        self.default_language_code = default_language_code
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(text: str, language_name: str) -> CacheKey:
        return (text.strip().lower(), language_name)

    def language_code(self, language_name: str) -> str:
        """Maps a display language name to the provider's code."""
        code = LANGUAGE_CODES.get(language_name)
        if code is None:
            logger.debug(f"Unknown language '{language_name}', using '{self.default_language_code}'.")
            return self.default_language_code
        return code

    def _lookup(self, key: CacheKey) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at >= self.ttl_seconds:
            return None
        return entry.translation

    def translate(self, text: str, language_name: str) -> str:
        """
        Returns the translation of text into language_name.

        Always succeeds from the caller's point of view: if the provider fails
        the original text is returned unchanged.
        """
        key = self.make_key(text, language_name)
        cached = self._lookup(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{shorten(text)}' ({language_name}).")
            return cached

        code = self.language_code(language_name)
        try:
            translation = self.translator.translate(text, target_lang=code)
        except Exception as e:
            logger.warning(f"Translation to '{code}' failed for '{shorten(text)}': {e}. Showing original line.")
            return text

        self._entries[key] = CacheEntry(translation=translation, created_at=self._clock())
        return translation

    def translate_batch(self, lines: Iterable[str], language_name: str) -> Dict[str, str]:
        """Translates each line in order, returning original -> translation."""
        translations: Dict[str, str] = {}
        for line in lines:
            translations[line] = self.translate(line, language_name)
        return translations

    def purge_expired(self) -> int:
        """Removes stale entries. Returns how many were dropped."""
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if now - entry.created_at >= self.ttl_seconds]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.info(f"Purged {len(stale)} expired translations from cache.")
        return len(stale)
