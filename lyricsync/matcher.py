"""Finds the active lyric line for a playback position."""

from .models import MatchResult, Timeline

def match_position(timeline: Timeline, position_ms: int) -> MatchResult:
    """
    Returns the line active at position_ms and the line that follows it.

    The timeline is scanned forward. Every entry at or before the position
    becomes the current line and takes its successor along as the next line;
    the scan stops at the first entry past the position. Before the first
    entry there is no current line, and no next line is reported either.

    Args:
        timeline: Lines sorted ascending by offset.
        position_ms: Playback position in milliseconds (non-negative).

    Returns:
        A MatchResult; both fields are None for an empty timeline.
    """
    current = None
    next_line = None
    for index, line in enumerate(timeline):
        if line.offset_ms > position_ms:
            break
        current = line
        next_line = timeline[index + 1] if index + 1 < len(timeline) else None
    return MatchResult(current=current, next=next_line)

def current_index(timeline: Timeline, position_ms: int) -> int:
    """Index of the line match_position would report as current, or -1."""
    index = -1
    for i, line in enumerate(timeline):
        if line.offset_ms > position_ms:
            break
        index = i
    return index
