"""
Message coalescer for CraftAgent.

Chat input tends to arrive in bursts ("hey", "can you", "build a house").
The coalescer buffers input and fires once the input has been quiet for a
full window, handing every buffered item over in one batch.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Optional, Protocol, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
FlushCallback = Callable[[list[T]], Union[None, Awaitable[None]]]


def _event_loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class MessageCoalescer(Generic[T]):
    """Debounces input into batches.

    Every ``push`` re-arms the countdown, cancelling the previous one. When a
    countdown runs out, ``on_flush`` receives all buffered items in arrival
    order. Coroutine callbacks are scheduled as tasks on the running loop.
    """

    def __init__(
        self,
        on_flush: FlushCallback,
        window: float = 3.0,
        scheduler: Optional[Scheduler] = None,
    ):
        """Initialize the coalescer.

        Args:
            on_flush: Called with each batch
            window: Quiet period in seconds before a batch fires
            scheduler: ``schedule(delay, callback) -> handle``; defaults to
                the running event loop's ``call_later``
        """
        if window < 0:
            raise ValueError("window must not be negative")

        self.on_flush = on_flush
        self.window = window
        self._schedule = scheduler or _event_loop_scheduler
        self._buffer: list[T] = []
        self._handle: Optional[TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> list[T]:
        """Items waiting for the next batch."""
        return list(self._buffer)

    @property
    def armed(self) -> bool:
        """Whether a countdown is running."""
        return self._handle is not None

    def push(self, item: T) -> None:
        """Buffer an item and restart the countdown.

        Raises:
            RuntimeError: If the coalescer is closed
        """
        if self._closed:
            raise RuntimeError("Coalescer is closed")

        self._buffer.append(item)
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._schedule(self.window, self._on_timer)
        logger.debug(f"Buffered input ({len(self._buffer)} pending), firing in {self.window}s")

    def flush(self) -> Any:
        """Fire now with whatever is buffered.

        Returns:
            The callback's return value (a task for coroutine callbacks), or
            None if nothing was buffered
        """
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        if not self._buffer:
            return None

        batch, self._buffer = self._buffer, []
        logger.info(f"Flushing {len(batch)} coalesced input(s)")

        result = self.on_flush(batch)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return task
        return result

    async def drain(self) -> None:
        """Wait for batches that are still being processed."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> list[T]:
        """Stop the countdown and refuse further input.

        Returns:
            Items that were buffered and will never be flushed
        """
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._closed = True
        dropped, self._buffer = self._buffer, []
        return dropped

    def _on_timer(self) -> None:
        self._handle = None
        self.flush()

    def __repr__(self) -> str:
        """Representation."""
        return f"<MessageCoalescer window={self.window} pending={len(self._buffer)}>"
