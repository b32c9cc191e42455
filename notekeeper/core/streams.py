"""
Reactive Streams.

Live-query plumbing for the local store and the combine-latest operator
used by screens that merge several live queries into one view state.

Components:
    ChangeNotifier  - per-table registry of live queries, woken after writes
    live_query      - async generator re-running a fetch after every change
    combine_latest  - merges N streams, recomputing from the latest values

Usage:
    notifier = ChangeNotifier()

    async for notes in live_query(notifier, "notes", fetch_all):
        render(notes)

    # After a committed write:
    notifier.notify("notes")

    async for pinned, all_notes in combine_latest(
        pinned_stream, all_stream, transform=lambda p, a: (p, a),
    ):
        ...
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from contextlib import aclosing, contextmanager
from typing import Any, TypeVar

from notekeeper.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_MISSING: Any = object()
_DONE: Any = object()


class ChangeNotifier:
    """
    Wakes live queries after a committed write to a table.

    Each subscription owns one asyncio.Event. Several writes that land
    before the subscriber re-reads collapse into a single wake-up; the
    re-read always observes the latest committed state.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, set[asyncio.Event]] = defaultdict(set)

    @contextmanager
    def subscribe(self, table: str) -> Iterator[asyncio.Event]:
        """Register for change notifications on `table` for the block's duration."""
        changed = asyncio.Event()
        self._subscribers[table].add(changed)
        try:
            yield changed
        finally:
            self._subscribers[table].discard(changed)

    def notify(self, table: str) -> None:
        """Signal every live query over `table` to re-read."""
        subscribers = self._subscribers.get(table, set())
        for changed in list(subscribers):
            changed.set()
        logger.debug(
            "Table change notified",
            extra={"table": table, "subscribers": len(subscribers)},
        )

    def subscriber_count(self, table: str) -> int:
        """Number of live queries currently registered on `table`."""
        return len(self._subscribers.get(table, set()))


async def live_query(
    notifier: ChangeNotifier,
    table: str,
    fetch: Callable[[], Awaitable[T]],
) -> AsyncGenerator[T, None]:
    """
    Yield `fetch()` now and again after every change to `table`.

    The subscription is registered before the first read, so a write that
    commits between registration and the read is never missed. Errors
    raised by `fetch` end the stream and propagate to the consumer.
    """
    with notifier.subscribe(table) as changed:
        while True:
            changed.clear()
            yield await fetch()
            await changed.wait()


async def combine_latest(
    *sources: AsyncGenerator[Any, None],
    transform: Callable[..., R],
) -> AsyncGenerator[R, None]:
    """
    Merge streams, emitting `transform(*latest)` whenever any source emits.

    Holds one latest-value slot per source. Nothing is emitted until every
    slot has been filled at least once; after that each emission from any
    single source produces a new combined value. The first error from any
    source cancels the others and is re-raised to the consumer. The merged
    stream completes when every source has completed.
    """
    queue: asyncio.Queue[tuple[int, Any, BaseException | None]] = asyncio.Queue()
    latest: list[Any] = [_MISSING] * len(sources)

    async def pump(index: int, source: AsyncGenerator[Any, None]) -> None:
        try:
            async with aclosing(source):
                async for value in source:
                    await queue.put((index, value, None))
        except Exception as exc:
            await queue.put((index, _MISSING, exc))
            return
        await queue.put((index, _DONE, None))

    tasks = [
        asyncio.create_task(pump(index, source), name=f"combine_latest[{index}]")
        for index, source in enumerate(sources)
    ]
    remaining = len(tasks)

    try:
        while remaining:
            index, value, error = await queue.get()
            if error is not None:
                raise error
            if value is _DONE:
                remaining -= 1
                continue
            latest[index] = value
            if all(slot is not _MISSING for slot in latest):
                yield transform(*latest)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
