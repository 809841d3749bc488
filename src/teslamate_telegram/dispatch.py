"""Per-vehicle serialized processing.

Every vehicle gets its own :class:`VehicleWorker`: an asyncio queue with
a single consumer task.  A vehicle's updates are therefore applied and
evaluated strictly in arrival order, while different vehicles proceed
independently (a slow reverse lookup for one car never delays another).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from teslamate_telegram._mqtt import FieldUpdate
from teslamate_telegram.exceptions import TeslaMateTelegramError
from teslamate_telegram.formatting import NotificationFormatter
from teslamate_telegram.state.detector import evaluate
from teslamate_telegram.state.registry import VehicleRegistry

_logger = logging.getLogger(__name__)

Notify = Callable[[str], Awaitable[None]]


class VehicleWorker:
    """Apply one vehicle's updates and report the sessions they finish.

    After an update the worker waits until ``debounce_seconds`` pass
    without another update for the same vehicle, then evaluates the
    session detector once for the whole burst.
    """

    def __init__(
        self,
        vehicle_id: int,
        *,
        registry: VehicleRegistry,
        formatter: NotificationFormatter,
        notify: Notify,
        debounce_seconds: float = 1.0,
    ) -> None:
        self.vehicle_id = vehicle_id
        self._registry = registry
        self._formatter = formatter
        self._notify = notify
        self._debounce_seconds = debounce_seconds
        self._queue: asyncio.Queue[FieldUpdate] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"vehicle-{self.vehicle_id}")

    def submit(self, update: FieldUpdate) -> None:
        self._queue.put_nowait(update)

    async def join(self) -> None:
        """Wait until every submitted update has been evaluated."""
        await self._queue.join()

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def _apply(self, update: FieldUpdate) -> None:
        self._registry.apply(update.vehicle_id, update.field, update.value)

    async def _collect_burst(self) -> int:
        """Apply further updates until the queue stays quiet."""
        applied = 0
        if self._debounce_seconds <= 0:
            return applied
        while True:
            try:
                update = await asyncio.wait_for(self._queue.get(), self._debounce_seconds)
            except TimeoutError:
                return applied
            self._apply(update)
            applied += 1

    async def _run(self) -> None:
        while True:
            update = await self._queue.get()
            applied = 1
            try:
                self._apply(update)
                applied += await self._collect_burst()
                await self._evaluate()
            except Exception:
                _logger.exception("Failed to process updates for vehicle %s", self.vehicle_id)
            finally:
                for _ in range(applied):
                    self._queue.task_done()

    async def _evaluate(self) -> None:
        vehicle = self._registry.vehicle(self.vehicle_id)
        _logger.debug("State update for vehicle %s: %s", self.vehicle_id, vehicle.snapshot)
        for event in evaluate(vehicle):
            try:
                text = await self._formatter.format_event(event)
                if not text:
                    _logger.debug("Suppressed insignificant session for vehicle %s: %s", self.vehicle_id, event)
                    continue
                await self._notify(text)
            except TeslaMateTelegramError:
                _logger.warning("Failed to send notification for vehicle %s", self.vehicle_id, exc_info=True)


class VehicleDispatcher:
    """Route field updates to one worker per vehicle."""

    def __init__(
        self,
        registry: VehicleRegistry,
        formatter: NotificationFormatter,
        notify: Notify,
        *,
        debounce_seconds: float = 1.0,
    ) -> None:
        self._registry = registry
        self._formatter = formatter
        self._notify = notify
        self._debounce_seconds = debounce_seconds
        self._workers: dict[int, VehicleWorker] = {}

    @property
    def registry(self) -> VehicleRegistry:
        return self._registry

    def worker(self, vehicle_id: int) -> VehicleWorker:
        worker = self._workers.get(vehicle_id)
        if worker is None:
            # Register the vehicle now so discovery order follows arrival order.
            self._registry.vehicle(vehicle_id)
            worker = VehicleWorker(
                vehicle_id,
                registry=self._registry,
                formatter=self._formatter,
                notify=self._notify,
                debounce_seconds=self._debounce_seconds,
            )
            self._workers[vehicle_id] = worker
            worker.start()
        return worker

    def submit(self, update: FieldUpdate) -> None:
        """Queue *update* on its vehicle's worker.  Must run on the event loop."""
        self.worker(update.vehicle_id).submit(update)

    async def join(self) -> None:
        for worker in list(self._workers.values()):
            await worker.join()

    async def stop(self) -> None:
        workers = list(self._workers.values())
        self._workers.clear()
        for worker in workers:
            await worker.stop()
