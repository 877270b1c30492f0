import asyncio
import logging
from typing import Callable, Optional

from circuit_challenge.core.config import settings

logger = logging.getLogger(__name__)


class GameTimer:
    """
    Cooperative timer: while running, an asyncio task reports the elapsed
    milliseconds through on_tick every interval. Stopping cancels the task.
    """

    def __init__(self, on_tick: Callable[[int], None], clock: Callable[[], int], interval: Optional[float] = None):
        self.on_tick = on_tick
        self.clock = clock
        self.interval = settings.TIMER_TICK_SECONDS if interval is None else interval
        self._task: Optional[asyncio.Task] = None
        self._start_time: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._task.get_loop().is_closed()

    def start(self, start_time: int) -> bool:
        """Schedule ticking on the running event loop. Returns False outside a loop, callers then tick by hand"""
        if self.running:
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, timer ticks are left to the caller")
            return False
        self._start_time = start_time
        self._task = loop.create_task(self._run())
        return True

    def stop(self) -> None:
        if self._task is not None:
            # a task left behind by a closed loop can no longer be cancelled
            if not self._task.get_loop().is_closed():
                self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.on_tick(self.clock() - self._start_time)
