"""Session countdown driven by the running asyncio loop."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

log = logging.getLogger("sentence_builder.timer")


class SessionTimer:
    """Counts down once per *interval* seconds while active.

    ``on_expire`` is called exactly once when the count reaches zero.  Call
    :meth:`reset` to begin a new cycle.
    """

    def __init__(self, initial_seconds: int, on_expire: Callable[[], None], interval: float = 1.0):
        self.initial_seconds = max(0, int(initial_seconds))
        self.remaining = self.initial_seconds
        self.on_expire = on_expire
        self.interval = interval
        self.active = False
        self.expired = False
        self._task: asyncio.Task | None = None

    def tick(self) -> None:
        if not self.active or self.expired:
            return
        if self.remaining > 0:
            self.remaining -= 1
        if self.remaining == 0:
            self._expire()

    def _expire(self) -> None:
        self.expired = True
        self.active = False
        log.info("Time is up")
        self.on_expire()

    def start(self) -> None:
        """Activate and spawn the tick task on the running loop."""
        if self.expired:
            return
        self.active = True
        if self.remaining == 0:
            self._expire()
            return
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            while not self.expired:
                await asyncio.sleep(self.interval)
                self.tick()
        except asyncio.CancelledError:
            log.debug("Timer task cancelled with %ds left", self.remaining)
            raise

    def pause(self) -> None:
        self.active = False

    def resume(self) -> None:
        if not self.expired:
            self.active = True

    def stop(self) -> None:
        """Tear down: no further ticks or expiry signals."""
        self.active = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def reset(self, seconds: int | None = None) -> None:
        self.stop()
        if seconds is not None:
            self.initial_seconds = max(0, int(seconds))
        self.remaining = self.initial_seconds
        self.expired = False
