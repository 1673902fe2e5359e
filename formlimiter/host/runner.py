"""Trigger runner: fire stored triggers from an asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from loguru import logger

from formlimiter.host.store import TriggerStore

if TYPE_CHECKING:
    from formlimiter.schedule.service import FormScheduler


class TriggerRunner:
    """Stand-in for a host trigger facility.

    One-shot triggers are removed from the store before their handler runs,
    so a handler that re-arms (``reinit``) never sees its own trigger.
    Event triggers stay registered until a cycle clears them.  Handlers run
    one at a time.
    """

    def __init__(
        self,
        scheduler: FormScheduler,
        store: TriggerStore,
        poll_interval_s: float = 60.0,
        clock: Callable[[], datetime] | None = None,
    ):
        self.scheduler = scheduler
        self.store = store
        self.poll_interval_s = poll_interval_s
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Runner: started (poll every {}s)", self.poll_interval_s)

    def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            self._task = None

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._delay())
                if self._running:
                    self.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Runner: tick failed: {}", e)

    def _delay(self) -> float:
        next_at = self.store.next_due_at()
        if next_at is None:
            return self.poll_interval_s
        wait = (next_at - self._clock()).total_seconds()
        return min(max(wait, 0.0), self.poll_interval_s)

    def tick(self, now: datetime | None = None) -> int:
        """Fire every one-shot trigger due at *now*; returns how many fired."""
        now = now or self._clock()
        fired = 0
        for trigger in self.store.due(now):
            # An earlier handler in this tick may have re-armed everything
            if not self.store.delete_trigger(trigger):
                continue
            logger.debug("Runner: firing {} ({})", trigger.handler, trigger.id)
            self.scheduler.dispatch(trigger.handler, now)
            fired += 1
        return fired

    def submit_event(self, event: str) -> int:
        """Fire the handlers registered for *event*."""
        triggers = self.store.event_triggers(event)
        for trigger in triggers:
            self.scheduler.dispatch(trigger.handler, self._clock())
        return len(triggers)
