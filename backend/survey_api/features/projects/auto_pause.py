"""
Auto-pause monitor.

Periodically pauses playing projects that have shown no sign of life for
longer than the inactivity threshold. Uses the same ProjectService
transition as an explicit pause, with auto_paused=True.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from survey_api.shared.timeutils import Clock, utc_now

from .service import ProjectService

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Outcome of one sweep."""

    checked: int = 0
    paused: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class AutoPauseMonitor:
    """
    Background task runner for the inactivity sweep.

    Call `start()` to begin sweeping.
    Call `stop()` to gracefully stop.

    Usage:
        monitor = AutoPauseMonitor(AsyncSessionLocal, interval_seconds=900)
        await monitor.start()
        # ... later ...
        await monitor.stop()
    """

    def __init__(
        self,
        db_factory,
        interval_seconds: float,
        inactivity_threshold: Optional[timedelta] = None,
        clock: Clock = utc_now,
    ):
        self._db_factory = db_factory
        self.interval_seconds = interval_seconds
        self.inactivity_threshold = inactivity_threshold
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self):
        """Start the sweep loop (first sweep runs immediately)."""
        if self.running:
            return

        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            f"Auto-pause monitor started "
            f"(interval {self.interval_seconds}s, threshold {self._threshold_label()})"
        )

    async def stop(self):
        """Stop the sweep loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Auto-pause monitor stopped")

    async def _run_loop(self):
        """Main sweep loop."""
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Auto-pause sweep error: {e}")

            # Wait before next sweep
            await asyncio.sleep(self.interval_seconds)

    async def run_once(self) -> SweepResult:
        """
        Run one sweep.

        A failure on one project is logged and the sweep continues with the
        next one. Running twice in a row pauses each project at most once.
        """
        result = SweepResult()

        async with self._db_factory() as db:
            project_ids = await self._service(db).list_stale_project_ids()

        result.checked = len(project_ids)
        if not project_ids:
            return result

        logger.info(f"Auto-pause sweep: {len(project_ids)} stale projects")

        for project_id in project_ids:
            try:
                async with self._db_factory() as db:
                    if await self._service(db).auto_pause(project_id):
                        result.paused.append(project_id)
            except Exception as e:
                result.failed.append(project_id)
                logger.error(f"Error auto-pausing project {project_id}: {e}")

        return result

    def _service(self, db) -> ProjectService:
        return ProjectService(
            db,
            clock=self.clock,
            inactivity_threshold=self.inactivity_threshold,
        )

    def _threshold_label(self) -> str:
        if self.inactivity_threshold is None:
            return "default"
        return str(self.inactivity_threshold)
