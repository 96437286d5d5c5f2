import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

TOAST_SECONDS = 3.0

# (delay, callback) -> handle with .cancel(); asyncio's loop.call_later by default
Scheduler = Callable[[float, Callable[[], None]], Any]


def _loop_call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class ToastTimer:
    """Clears the toast a fixed delay after it was last set.

    Only one clear is ever pending: ``restart`` cancels the previous one before
    scheduling, and ``cancel`` drops it without firing.
    """

    def __init__(
        self,
        on_expire: Callable[[], None],
        delay: float = TOAST_SECONDS,
        call_later: Optional[Scheduler] = None,
    ) -> None:
        self._on_expire = on_expire
        self.delay = delay
        self._call_later = call_later or _loop_call_later
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def restart(self) -> None:
        self.cancel()
        self._handle = self._call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        logger.debug("toast expired after %ss", self.delay)
        self._on_expire()
