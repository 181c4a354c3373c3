"""Fixed-interval poll loop that drives a LyricsSession."""

import logging
import time
from typing import Callable, Optional

from .exceptions import LyricSyncError, PlaybackError
from .models import SessionFrame
from .playback import PlaybackSource
from .session import LyricsSession

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5

class LyricsFollower:
    """Polls a PlaybackSource and feeds each snapshot into the session."""

    def __init__(
        self,
        playback_source: PlaybackSource,
        session: LyricsSession,
        on_frame: Callable[[SessionFrame], None],
        interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}.")
        self.playback_source = playback_source
        self.session = session
        self.on_frame = on_frame
        self.interval = interval
        self._sleep = sleep
        self._running = False
        self._idle = False

    def stop(self) -> None:
        self._running = False

    def poll_once(self) -> Optional[SessionFrame]:
        """
        Runs a single tick. Returns the frame, or None if nothing is playing,
        the playback source failed or the session could not be updated.
        """
        try:
            snapshot = self.playback_source.get_snapshot()
        except PlaybackError as e:
            logger.error(f"Could not read playback state: {e}")
            return None

        if snapshot is None:
            if not self._idle:
                logger.info("Nothing is playing.")
                self._idle = True
            return None

        self._idle = False
        try:
            frame = self.session.tick(snapshot)
        except LyricSyncError as e:
            logger.error(f"Could not update lyrics for {snapshot.track.describe()}: {e}")
            return None
        self.on_frame(frame)
        return frame

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Polls until stop() is called or max_ticks ticks have run.

        Returns:
            The number of ticks performed.
        """
        self._running = True
        ticks = 0
        logger.info(f"Following playback every {self.interval:.2f}s (language: {self.session.language}).")
        while self._running:
            self.poll_once()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            self._sleep(self.interval)
        self._running = False
        return ticks
