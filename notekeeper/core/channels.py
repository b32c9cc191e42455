"""
State and Effect Channels.

The two outputs of every screen controller:

    StateHolder    - latest immutable state snapshot, pull-style, conflated
    EffectChannel  - one-shot effects, consumed exactly once, never replayed

Usage:
    state = StateHolder(HomeState())
    state.update(is_loading=True)
    current = state.value

    effects = EffectChannel(capacity=64)
    effects.send(ShowError(message="Failed"))
    effect = await effects.receive()
"""

import asyncio
from collections import deque
from collections.abc import AsyncGenerator, Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from notekeeper.core.exceptions import ChannelClosedError
from notekeeper.core.logging import get_logger

logger = get_logger(__name__)

S = TypeVar("S", bound=BaseModel)
E = TypeVar("E")


class StateHolder(Generic[S]):
    """
    Holds the latest state snapshot of one controller.

    Snapshots are replaced, never modified. Setting a value equal to the
    current one is ignored, so watchers only see distinct states.
    """

    def __init__(self, initial: S) -> None:
        self._value = initial
        self._watchers: set[asyncio.Event] = set()

    @property
    def value(self) -> S:
        """The current snapshot."""
        return self._value

    def set(self, value: S) -> None:
        """Replace the snapshot and wake watchers if it changed."""
        if value == self._value:
            return
        self._value = value
        for changed in list(self._watchers):
            changed.set()

    def update(self, **changes: Any) -> S:
        """Replace the snapshot with a copy carrying `changes`."""
        self.set(self._value.model_copy(update=changes))
        return self._value

    async def watch(self) -> AsyncGenerator[S, None]:
        """
        Yield the current snapshot, then each new one.

        Slow consumers skip intermediate snapshots and always receive
        the latest.
        """
        changed = asyncio.Event()
        self._watchers.add(changed)
        try:
            while True:
                changed.clear()
                yield self._value
                await changed.wait()
        finally:
            self._watchers.discard(changed)

    async def wait_for(
        self,
        predicate: Callable[[S], bool],
        timeout: float | None = None,
    ) -> S:
        """
        Wait until a snapshot satisfies `predicate` and return it.

        Raises:
            TimeoutError: If no matching snapshot appears within `timeout`
        """
        async with asyncio.timeout(timeout):
            watcher = self.watch()
            try:
                async for state in watcher:
                    if predicate(state):
                        return state
            finally:
                await watcher.aclose()
        raise AssertionError("unreachable")


class EffectChannel(Generic[E]):
    """
    Bounded single-consumer queue of one-shot effects.

    Each effect is delivered to exactly one receive() call. When the
    buffer is full the oldest pending effect is dropped. Closing the
    channel discards everything not yet delivered, so a view attached
    later never sees stale effects.
    """

    def __init__(self, capacity: int = 64) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._pending: deque[E] = deque()
        self._ready = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._pending)

    def send(self, effect: E) -> None:
        """Queue an effect for the view. Dropped silently once closed."""
        if self._closed:
            logger.debug("Effect dropped on closed channel", extra={"effect": repr(effect)})
            return
        if len(self._pending) >= self._capacity:
            dropped = self._pending.popleft()
            logger.warning(
                "Effect buffer full, dropping oldest effect",
                extra={"dropped": repr(dropped), "capacity": self._capacity},
            )
        self._pending.append(effect)
        self._ready.set()

    def receive_nowait(self) -> E | None:
        """Take the next pending effect, or None when nothing is pending."""
        if not self._pending:
            return None
        effect = self._pending.popleft()
        if not self._pending:
            self._ready.clear()
        return effect

    async def receive(self) -> E:
        """
        Wait for and take the next effect.

        Raises:
            ChannelClosedError: If the channel is closed while waiting
        """
        while True:
            if self._pending:
                return self.receive_nowait()  # type: ignore[return-value]
            if self._closed:
                raise ChannelClosedError("Effect channel closed")
            self._ready.clear()
            await self._ready.wait()

    def close(self) -> None:
        """Close the channel, discarding undelivered effects."""
        if self._closed:
            return
        self._closed = True
        discarded = len(self._pending)
        self._pending.clear()
        self._ready.set()
        if discarded:
            logger.debug("Undelivered effects discarded", extra={"count": discarded})

    def __aiter__(self) -> "EffectChannel[E]":
        return self

    async def __anext__(self) -> E:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
