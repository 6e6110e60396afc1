"""Panel-level orchestration: batches, progress and cooperative cancellation."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Union

import numpy as np

from .models import (
    PanelSimulationOutcome,
    Persona,
    ProductContext,
    SimulationResult,
    SurveyQuestion,
)
from .responder import QuestionResponder

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY_LIMIT = 5

# Both callbacks may be plain functions or coroutine functions.
ProgressCallback = Union[
    Callable[[int, int], Awaitable[None]],
    Callable[[int, int], None],
]
CancelCheck = Union[
    Callable[[], Awaitable[bool]],
    Callable[[], bool],
]


class CancellationToken:
    """Flag set by an out-of-band actor and polled between batches.

    The token is itself a valid ``cancel_check`` for ``simulate_panel``.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __call__(self) -> bool:
        return self._cancelled


async def _maybe_await(result):
    if inspect.isawaitable(result):
        return await result
    return result


def _batches(count: int, size: int) -> List[range]:
    return [range(start, min(start + size, count)) for start in range(0, count, size)]


class PanelSimulator:
    """Run every persona through every question in bounded-width batches."""

    def __init__(
        self,
        responder: QuestionResponder,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self._responder = responder
        self._rng = rng if rng is not None else np.random.default_rng()

    async def simulate_panel(
        self,
        personas: Sequence[Persona],
        questions: Sequence[SurveyQuestion],
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        product_context: Optional[ProductContext] = None,
    ) -> PanelSimulationOutcome:
        """Simulate a panel and return results in input persona order.

        ``cancel_check`` is polled before each batch. A batch already running
        always finishes and its personas are included in the returned results.
        ``progress_callback(completed, total)`` fires once per finished
        persona, never concurrently. Any error from a persona aborts the whole
        call and discards results gathered so far.

        Each persona samples ratings from its own child generator, spawned
        from the simulator's generator by input position, so a seeded run
        gives the same ratings however the backend schedules replies.
        """

        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")

        personas = list(personas)
        total = len(personas)
        results: List[SimulationResult] = []
        completed = 0
        progress_lock = asyncio.Lock()
        batches = _batches(total, concurrency_limit)
        persona_rngs = self._rng.spawn(total)

        async def run_persona(index: int) -> SimulationResult:
            nonlocal completed
            result = await self._responder.simulate_persona(
                personas[index], questions, product_context, persona_rngs[index]
            )
            async with progress_lock:
                completed += 1
                if progress_callback is not None:
                    await _maybe_await(progress_callback(completed, total))
            return result

        for batch_number, batch in enumerate(batches, start=1):
            if cancel_check is not None and await _maybe_await(cancel_check()):
                logger.info(
                    "Simulation cancelled before batch %d/%d (%d/%d personas complete)",
                    batch_number,
                    len(batches),
                    len(results),
                    total,
                )
                return PanelSimulationOutcome(results=results, cancelled=True)

            logger.info(
                "Processing batch %d/%d (%d personas)",
                batch_number,
                len(batches),
                len(batch),
            )
            tasks = [asyncio.create_task(run_persona(index)) for index in batch]
            try:
                batch_results = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            # gather preserves argument order, not completion order.
            results.extend(batch_results)

        return PanelSimulationOutcome(results=results, cancelled=False)


__all__ = [
    "CancelCheck",
    "CancellationToken",
    "DEFAULT_CONCURRENCY_LIMIT",
    "PanelSimulator",
    "ProgressCallback",
]
