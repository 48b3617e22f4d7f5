from __future__ import annotations

from enum import Enum
import logging
import threading

from nomoredm.dispatch import DispatchSequencer, DispatchSummary
from nomoredm.registry import TenantRegistry

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


class SchedulerLoop:
    def __init__(
        self,
        registry: TenantRegistry,
        sequencer: DispatchSequencer,
        interval_seconds: float,
        run_on_start: bool = False,
    ):
        self._registry = registry
        self._sequencer = sequencer
        self._interval_seconds = interval_seconds
        self._run_on_start = run_on_start
        self._stop_event = threading.Event()
        self._pass_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._state = SchedulerState.IDLE

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="nomoredm-scheduler", daemon=True)
        self._thread.start()
        logger.info("Scheduler started, interval %.0fs", self._interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._state = SchedulerState.STOPPED

    def run_pass(self) -> DispatchSummary | None:
        if not self._pass_lock.acquire(blocking=False):
            logger.warning("Previous dispatch pass still running, skipping this one")
            return None

        try:
            self._state = SchedulerState.DISPATCHING
            tenant_ids = self._registry.snapshot()
            logger.info("Starting dispatch pass over %d tenant(s)", len(tenant_ids))
            return self._sequencer.run_over(tenant_ids)
        except Exception:
            logger.exception("Dispatch pass failed")
            return None
        finally:
            self._state = SchedulerState.WAITING
            self._pass_lock.release()

    def _run(self) -> None:
        if self._run_on_start:
            self.run_pass()

        while True:
            self._state = SchedulerState.WAITING
            if self._stop_event.wait(self._interval_seconds):
                break
            self.run_pass()

        self._state = SchedulerState.STOPPED
        logger.info("Scheduler stopped")
