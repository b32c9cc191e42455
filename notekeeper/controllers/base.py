"""
Base Controller.

Base class for screen controllers. A controller owns one screen's state,
consumes intents, and emits one-shot effects:

    view --dispatch(intent)--> controller --use case--> repository
    view <--state snapshot---- controller <--live query--
    view <--effects----------- controller

Every intent runs as its own task in the controller's scope, so a slow
mutation never blocks another intent. At most one live subscription is
active at a time; a new load replaces the previous one. Closing the
controller cancels all of its tasks and discards undelivered effects.

Controllers must be created inside a running event loop.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable, Coroutine
from contextlib import aclosing
from typing import Any, Generic, TypeVar

from notekeeper.core.channels import EffectChannel, StateHolder
from notekeeper.core.logging import get_logger, log_context
from notekeeper.schemas.base import Intent, ScreenState
from notekeeper.schemas.effects import ShowError

S = TypeVar("S", bound=ScreenState)
I = TypeVar("I", bound=Intent)  # noqa: E741
E = TypeVar("E")
T = TypeVar("T")

DEFAULT_EFFECT_BUFFER_SIZE = 64


def error_message(exc: BaseException, fallback: str) -> str:
    """User-facing text for a failure: the error's message, else `fallback`."""
    message = getattr(exc, "message", None) or str(exc)
    return message or fallback


class BaseController(Generic[S, I, E]):
    """
    Base class for all screen controllers.

    Provides:
    - State holder with the latest snapshot
    - Bounded effect channel
    - Task scope with cancellation on close
    - Failure-to-effect conversion at the intent boundary

    Subclasses implement `_handle(intent)`.
    """

    def __init__(
        self,
        initial_state: S,
        effect_buffer_size: int = DEFAULT_EFFECT_BUFFER_SIZE,
    ) -> None:
        self._state: StateHolder[S] = StateHolder(initial_state)
        self._effects: EffectChannel[E] = EffectChannel(effect_buffer_size)
        self._tasks: set[asyncio.Task[Any]] = set()
        self._subscription: asyncio.Task[Any] | None = None
        self._closed = False
        self._logger = get_logger(self.__class__.__module__)

    @property
    def state(self) -> S:
        """Latest state snapshot."""
        return self._state.value

    @property
    def states(self) -> StateHolder[S]:
        """State holder, for views that watch or await snapshots."""
        return self._state

    @property
    def effects(self) -> EffectChannel[E]:
        """One-shot effects for the attached view."""
        return self._effects

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, intent: I) -> asyncio.Task[Any]:
        """
        Handle an intent in the background.

        Returns:
            The task processing the intent; awaiting it is optional

        Raises:
            RuntimeError: If the controller has been closed
        """
        if self._closed:
            raise RuntimeError(f"{self.__class__.__name__} is closed")
        self._logger.debug(
            "Intent dispatched",
            extra={"controller": self.__class__.__name__, "intent": repr(intent)},
        )
        return self._launch(self._handle(intent), name=type(intent).__name__)

    async def _handle(self, intent: I) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Cancel every task and subscription, then close the effect channel."""
        if self._closed:
            return
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._subscription = None
        self._effects.close()
        self._logger.debug("Controller closed", extra={"controller": self.__class__.__name__})

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def _emit(self, effect: E) -> None:
        self._effects.send(effect)

    def _launch(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Run `coro` in this controller's scope."""
        task = asyncio.get_running_loop().create_task(
            self._guard(coro, name),
            name=f"{self.__class__.__name__}.{name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        # Cancelled before its first step: the wrapped coroutine never ran.
        task.add_done_callback(lambda t: coro.close() if t.cancelled() else None)
        return task

    async def _guard(self, coro: Coroutine[Any, Any, T], name: str) -> T | None:
        """Last-resort boundary: no failure escapes a controller task."""
        with log_context(controller=self.__class__.__name__, task=name):
            try:
                return await coro
            except Exception as exc:
                self._logger.exception("Unhandled controller failure")
                self._emit(ShowError(message=error_message(exc, "Unexpected error")))  # type: ignore[arg-type]
                return None

    async def _attempt(
        self,
        operation: str,
        action: Awaitable[None],
        fallback_message: str,
    ) -> bool:
        """
        Await a use case, turning failure into a ShowError effect.

        Returns:
            True if the action succeeded
        """
        try:
            await action
        except Exception as exc:
            self._logger.warning(
                "Operation failed",
                extra={
                    "controller": self.__class__.__name__,
                    "operation": operation,
                    "error": str(exc),
                },
            )
            self._emit(ShowError(message=error_message(exc, fallback_message)))  # type: ignore[arg-type]
            return False
        return True

    def _subscribe(
        self,
        stream: AsyncGenerator[T, None],
        on_value: Callable[[T], None],
        on_error: Callable[[Exception], None],
    ) -> asyncio.Task[Any]:
        """Replace the active subscription with one consuming `stream`."""
        if self._subscription is not None:
            self._subscription.cancel()
        self._subscription = self._launch(
            self._consume(stream, on_value, on_error),
            name="subscription",
        )
        return self._subscription

    async def _consume(
        self,
        stream: AsyncGenerator[T, None],
        on_value: Callable[[T], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        try:
            async with aclosing(stream):
                async for value in stream:
                    on_value(value)
        except Exception as exc:
            self._logger.error(
                "Subscription failed",
                extra={"controller": self.__class__.__name__, "error": str(exc)},
            )
            on_error(exc)
