"""Parses timestamp-tagged (LRC) lyric text into an ordered timeline."""

import logging
import re
from typing import Optional

from .models import TimedLine, Timeline

logger = logging.getLogger(__name__)

# [m:ss] / [mm:ss] with an optional .fff or :fff fraction, then the lyric text.
# Only the first bracket group on a line is read.
_TIMESTAMP_PREFIX = re.compile(r"^\s*\[(\d{1,2}):(\d{2})(?:[.:](\d{1,3}))?\](.*)$")

def parse_timestamp(minutes: str, seconds: str, fraction: Optional[str]) -> int:
    """
    Converts the captured parts of an LRC timestamp to milliseconds.

    The fraction is right-padded to three digits, so '5' and '50' both mean
    500 ms while '05' means 50 ms.
    """
    millis = int(fraction.ljust(3, "0")) if fraction else 0
    return int(minutes) * 60000 + int(seconds) * 1000 + millis

def parse_lrc(raw_text: Optional[str]) -> Timeline:
    """
    Parses raw LRC text into a timeline sorted by offset.

    Lines without a leading timestamp (metadata tags, section headers, prose)
    and lines whose text is empty after trimming are skipped. Entries sharing
    an offset keep their relative order from the input.

    Args:
        raw_text: The synced lyrics as delivered by the lyrics provider.

    Returns:
        A list of TimedLine objects, possibly empty. Never raises for
        malformed input.
    """
    if not raw_text:
        return []

    entries = []
    skipped = 0
    for line in raw_text.splitlines():
        match = _TIMESTAMP_PREFIX.match(line)
        if not match:
            skipped += 1
            continue
        text = match.group(4).strip()
        if not text:
            skipped += 1 # Instrumental gaps are written as bare timestamps
            continue
        offset_ms = parse_timestamp(match.group(1), match.group(2), match.group(3))
        entries.append(TimedLine(offset_ms=offset_ms, text=text))

    timeline = sorted(entries, key=lambda entry: entry.offset_ms)
    logger.debug(f"Parsed {len(timeline)} timed lines ({skipped} lines skipped).")
    return timeline
