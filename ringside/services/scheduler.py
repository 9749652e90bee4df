"""Periodic auto-update of the analysis results."""
import asyncio
import inspect
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ringside.core.logging import get_logger

logger = get_logger(__name__)

UpdateCallback = Callable[[], object]


class AutoUpdateScheduler:
    """
    Runs registered update callbacks on a fixed interval in a background thread.

    Runs never overlap: a trigger that arrives while a run is in progress is
    skipped. Each callback is isolated, so one failing callback does not stop
    the others. Coroutine functions are driven to completion on a fresh event
    loop.
    """

    JOB_ID = "auto_update"

    def __init__(self, interval_minutes: int = 10):
        self.interval_minutes = interval_minutes
        self._callbacks: List[UpdateCallback] = []
        self._callbacks_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    def add_update_callback(self, callback: UpdateCallback) -> None:
        with self._callbacks_lock:
            self._callbacks.append(callback)

    def remove_update_callback(self, callback: UpdateCallback) -> None:
        with self._callbacks_lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _run_callback(self, callback: UpdateCallback) -> bool:
        try:
            result = callback()
            if inspect.isawaitable(result):
                asyncio.run(_await(result))
            return True
        except Exception as e:
            logger.error(f"Auto-update callback {getattr(callback, '__name__', callback)!r} failed: {e}")
            return False

    def trigger_update(self) -> bool:
        """
        Run all callbacks now.

        Returns:
            False when skipped because another run is in progress
        """
        if not self._run_lock.acquire(blocking=False):
            logger.info("Auto-update already running, skipping trigger")
            return False

        try:
            with self._callbacks_lock:
                callbacks = list(self._callbacks)

            logger.info(f"Auto-update: running {len(callbacks)} callbacks")
            succeeded = sum(1 for callback in callbacks if self._run_callback(callback))
            logger.info(f"Auto-update: {succeeded}/{len(callbacks)} callbacks completed")
            return True
        finally:
            self._run_lock.release()

    def setup(self, run_immediately: bool = False) -> 'AutoUpdateScheduler':
        """
        Configure the interval job.

        Args:
            run_immediately: Schedule the first run now instead of after one interval

        Returns:
            Self for chaining
        """
        if self._scheduler is None:
            # An explicit next_run_time of None would add the job paused
            extra = {"next_run_time": datetime.now(timezone.utc)} if run_immediately else {}

            self._scheduler = BackgroundScheduler(timezone=timezone.utc)
            self._scheduler.add_job(
                self.trigger_update,
                'interval',
                minutes=self.interval_minutes,
                id=self.JOB_ID,
                name='Wrestler analysis auto-update',
                max_instances=1,
                coalesce=True,
                **extra,
            )
            logger.info(f"Auto-update scheduled every {self.interval_minutes} minutes")

        return self

    def start(self, run_immediately: bool = False) -> None:
        """Start the background scheduler; a running scheduler is left as is."""
        if self.is_running:
            return

        self.setup(run_immediately=run_immediately)
        self._scheduler.start()
        logger.info("Auto-update scheduler started")

    def stop(self) -> None:
        """Stop the scheduler and wait for a running update to finish."""
        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=True)
            logger.info("Auto-update scheduler stopped")
        self._scheduler = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def get_jobs_count(self) -> int:
        if self._scheduler:
            return len(self._scheduler.get_jobs())
        return 0


async def _await(awaitable):
    return await awaitable
