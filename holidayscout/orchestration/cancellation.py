"""
Cooperative cancellation for package searches.

A newer search supersedes an older one (last request wins). The older
run's token is cancelled; its workers check the token before each provider
call and discard anything that completes afterwards.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """A one-way flag checked cooperatively by search workers."""

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()


class SearchSession:
    """
    Hands out cancellation tokens so only the latest search survives.

    Examples:
        >>> session = SearchSession()
        >>> first = session.start()
        >>> second = session.start()
        >>> first.cancelled, second.cancelled
        (True, False)
    """

    def __init__(self):
        self._current: Optional[CancellationToken] = None

    def start(self) -> CancellationToken:
        """Cancel the in-flight search, if any, and return a fresh token."""
        if self._current is not None and not self._current.cancelled:
            logger.info("Superseding in-flight search")
            self._current.cancel("superseded")
        self._current = CancellationToken()
        return self._current

    @property
    def current(self) -> Optional[CancellationToken]:
        return self._current
