"""Debouncer — delays a rapidly-changing value until it has been stable for a while."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Emits the latest pushed value once ``delay`` seconds pass without a newer push.

    Every push cancels the pending timer and starts a new one, so a
    superseded value is never emitted. Timers are event-loop timer handles;
    ``close()`` cancels the pending one and refuses further pushes.

    Usage:
        debouncer = Debouncer(0.25, on_settled, initial="")
        debouncer.push("J")
        debouncer.push("JU")   # "J" is dropped, "JU" fires 250 ms later
    """

    def __init__(
        self,
        delay: float,
        listener: Callable[[T], None],
        *,
        initial: T,
        name: str = "debouncer",
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._delay = delay
        self._listener = listener
        self._value = initial
        self._name = name
        self._pending: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def value(self) -> T:
        """The last emitted (settled) value."""
        return self._value

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        """Restart the quiet period with a new value. Must run inside an event loop."""
        if self._closed:
            raise RuntimeError(f"{self._name} is closed")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._delay, self._emit, value)

    def cancel(self) -> None:
        """Drop the pending emission, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def close(self) -> None:
        self.cancel()
        self._closed = True

    def _emit(self, value: T) -> None:
        self._pending = None
        self._value = value
        logger.debug("%s settled on %r", self._name, value)
        self._listener(value)
