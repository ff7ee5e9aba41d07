from __future__ import annotations

import asyncio
import enum
import logging
from typing import Awaitable, Callable, Sequence

from .types import RhymeCandidate, WordAtPosition

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Sequence[RhymeCandidate]]]
Render = Callable[[WordAtPosition, list[RhymeCandidate]], None]

DEFAULT_DEBOUNCE_S = 0.2


class PipelineState(enum.Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    QUERYING = "querying"


class QueryPipeline:
    """
    Debounced, superseding rhyme lookup for a stream of WordAtPosition.

    IDLE -> DEBOUNCING on a new word; the quiet timer restarts on every
    further new word. When it elapses one lookup is issued (QUERYING).
    A new word while querying starts another debounce and makes the
    in-flight result stale: it is still awaited but never rendered.
    Only the result of the current generation reaches `render`.

    Must be fed from inside a running event loop.
    """

    def __init__(self, lookup: Lookup, render: Render, *, debounce_s: float = DEFAULT_DEBOUNCE_S):
        self.lookup = lookup
        self.render = render
        self.debounce_s = debounce_s

        self._state = PipelineState.IDLE
        self._idle = asyncio.Event()
        self._idle.set()
        self._last_seen: WordAtPosition | None = None
        self._pending: WordAtPosition | None = None
        self._timer: asyncio.TimerHandle | None = None
        # bumped on every accepted event, checked when a result comes back
        self._generation = 0
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> PipelineState:
        return self._state

    def submit(self, event: WordAtPosition) -> None:
        if event == self._last_seen:
            return
        self._last_seen = event
        self._generation += 1
        self._pending = event

        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.debounce_s, self._fire)
        self._set_state(PipelineState.DEBOUNCING)

    async def wait_idle(self) -> None:
        await self._idle.wait()

    def reset(self) -> None:
        """Forget everything seen so far; lookups still in flight become stale."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None
        self._last_seen = None
        self._generation += 1
        self._set_state(PipelineState.IDLE)

    def close(self) -> None:
        self.reset()
        for task in list(self._tasks):
            task.cancel()

    def _fire(self) -> None:
        self._timer = None
        event, self._pending = self._pending, None
        if event is None:
            return
        self._set_state(PipelineState.QUERYING)
        task = asyncio.get_running_loop().create_task(self._query(self._generation, event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _query(self, generation: int, event: WordAtPosition) -> None:
        logger.debug("Looking up rhymes for %r", event.word)
        try:
            candidates = list(await self.lookup(event.word))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Rhyme lookup for %r failed: %s", event.word, e)
            candidates = []

        if generation != self._generation:
            logger.debug("Dropping stale rhymes for %r", event.word)
            return
        try:
            self.render(event, candidates)
        except Exception:
            logger.exception("Rendering rhymes for %r failed", event.word)
        finally:
            self._set_state(PipelineState.IDLE)

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        if state is PipelineState.IDLE:
            self._idle.set()
        else:
            self._idle.clear()
