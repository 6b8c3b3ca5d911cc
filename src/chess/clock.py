"""Wall-clock match timer. Ticks once per second while the game is running. Has no bearing on the rules."""

import asyncio
import logging
from typing import Optional

log = logging.getLogger(__name__)


class MatchClock:
    def __init__(self, tick_s: float = 1.0) -> None:
        self.tick_s = tick_s
        self.elapsed_seconds = 0
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def formatted(self) -> str:
        """MM:SS"""
        minutes, seconds = divmod(self.elapsed_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def start(self) -> None:
        """Needs a running event loop. Starting twice is a no-op."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            log.debug("Match clock stopped at %s", self.formatted)

    def reset(self) -> None:
        self.stop()
        self.elapsed_seconds = 0

    def tick(self) -> None:
        self.elapsed_seconds += 1

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_s)
            self.tick()
