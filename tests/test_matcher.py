import pytest

from lyricsync.matcher import current_index, match_position
from lyricsync.models import MatchResult, TimedLine

A = TimedLine(0, "A")
B = TimedLine(1000, "B")
C = TimedLine(2000, "C")
TIMELINE = [A, B, C]


@pytest.mark.parametrize(
    "position, current, next_line",
    [
        (0, A, B),
        (500, A, B),
        (999, A, B),
        (1000, B, C),
        (1999, B, C),
        (2000, C, None),
        (2500, C, None),
        (10 ** 9, C, None),
    ],
)
def test_match_position_returns_current_and_following_line(position, current, next_line):
    assert match_position(TIMELINE, position) == MatchResult(current=current, next=next_line)


def test_match_position_empty_timeline():
    assert match_position([], 0) == MatchResult(None, None)
    assert match_position([], 12345) == MatchResult(None, None)


def test_match_position_before_first_line_reports_no_next():
    timeline = [TimedLine(500, "A"), TimedLine(900, "B")]
    assert match_position(timeline, 100) == MatchResult(current=None, next=None)


def test_match_position_single_line():
    timeline = [TimedLine(500, "A")]
    assert match_position(timeline, 500) == MatchResult(current=timeline[0], next=None)


def test_match_position_with_duplicate_offsets_picks_last_of_group():
    first = TimedLine(1000, "x")
    second = TimedLine(1000, "y")
    after = TimedLine(3000, "z")
    result = match_position([first, second, after], 1500)
    assert result.current is second
    assert result.next is after


def test_match_position_is_monotonic_over_increasing_positions():
    timeline = [TimedLine(offset, str(offset)) for offset in (0, 250, 250, 900, 4000, 4100)]
    indices = [current_index(timeline, position) for position in range(0, 5000, 37)]
    assert indices == sorted(indices)
    for position in range(0, 5000, 37):
        result = match_position(timeline, position)
        index = current_index(timeline, position)
        assert result.current is (timeline[index] if index >= 0 else None)


def test_match_position_is_deterministic():
    assert match_position(TIMELINE, 1500) == match_position(TIMELINE, 1500)


def test_current_index_before_first_line():
    assert current_index([TimedLine(500, "A")], 100) == -1
    assert current_index([], 100) == -1
