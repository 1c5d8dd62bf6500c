"""Single-producer, multi-consumer publication of immutable values."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Generic, TypeVar


T = TypeVar("T")
Listener = Callable[[T], None]

logger = logging.getLogger(__name__)


class StateBroadcast(Generic[T]):
    """Holds the latest value and pushes every change to its consumers.

    Publishing a value equal to the current one is a no-op. Listeners are
    called synchronously by the publisher; async subscribers get their own
    queue bound to the loop they subscribed from.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []
        self._queues: list[tuple[asyncio.AbstractEventLoop, asyncio.Queue[T]]] = []

    @property
    def value(self) -> T:
        return self._value

    def publish(self, value: T) -> bool:
        if value == self._value:
            return False
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.warning("State listener %r failed", listener, exc_info=True)
        for loop, queue in list(self._queues):
            _put(loop, queue, value)
        return True

    def add_listener(self, listener: Listener[T]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the current value, then every published change."""
        entry = (asyncio.get_running_loop(), asyncio.Queue())
        self._queues.append(entry)
        try:
            yield self._value
            while True:
                yield await entry[1].get()
        finally:
            self._queues.remove(entry)


def _put(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[T], value: T) -> None:
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        running = None
    if running is loop:
        queue.put_nowait(value)
    elif not loop.is_closed():
        loop.call_soon_threadsafe(queue.put_nowait, value)
