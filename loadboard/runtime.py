"""
A long-lived event loop for the Streamlit page.

Streamlit runs the page script in a worker thread and reruns it on every
interaction, so the async view cannot own a loop of its own. The portal keeps
one asyncio loop alive in a background thread; the page hands coroutines to it
and blocks until they finish. Toast timers scheduled on that loop keep running
between reruns.
"""

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional

from anyio.from_thread import BlockingPortal, start_blocking_portal

logger = logging.getLogger(__name__)


class EventLoopThread:
    def __init__(self) -> None:
        self._cm: Optional[AbstractContextManager] = None
        self._portal: Optional[BlockingPortal] = None

    @property
    def running(self) -> bool:
        return self._portal is not None

    def start(self) -> "EventLoopThread":
        if self._portal is None:
            self._cm = start_blocking_portal(backend="asyncio")
            self._portal = self._cm.__enter__()
            logger.info("event loop thread started")
        return self

    def call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run ``func(*args)`` on the loop thread and wait for its result.

        Coroutine functions are awaited; plain callables are just called, which
        keeps every state change on the one thread.
        """
        if self._portal is None:
            raise RuntimeError("event loop thread is not running")
        return self._portal.call(func, *args)

    def stop(self) -> None:
        if self._cm is not None:
            self._cm.__exit__(None, None, None)
            logger.info("event loop thread stopped")
        self._cm = None
        self._portal = None
