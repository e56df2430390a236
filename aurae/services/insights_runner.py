"""
Background insights computation with last-write-wins semantics

The report builder is synchronous. Callers that must not block (an event loop
serving a UI or API) hand episodes to InsightsRunner, which snapshots them,
runs the builder on a worker thread and publishes the result. A newer
update_episodes() call cancels any in-flight computation so a stale report
never overwrites a fresh one.
"""

import asyncio
import logging
from datetime import datetime
from typing import Iterable, Optional

from aurae.exceptions import InsightsTimeoutError
from aurae.models.episode import Episode
from aurae.models.insights import InsightsReport
from aurae.services.insights_service import InsightsService

logger = logging.getLogger(__name__)


class InsightsRunner:
    """Owns the most recent report and at most one in-flight computation"""

    def __init__(self, service: Optional[InsightsService] = None):
        self.service = service or InsightsService()
        self.report: Optional[InsightsReport] = None
        self.is_loading: bool = False
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def minimum_logs_met(self) -> bool:
        return self.report.minimum_logs_met if self.report else False

    @property
    def total_logs(self) -> int:
        return self.report.total_logs if self.report else 0

    def update_episodes(
        self,
        episodes: Iterable[Episode],
        now: Optional[datetime] = None
    ) -> asyncio.Task:
        """
        Start computing a report for a new episode collection.

        Must be called from a running event loop. Any computation still in
        flight is cancelled and its result discarded.

        Args:
            episodes: Episode snapshots; copied before the computation starts
            now: Optional reference time passed to the builder

        Returns:
            The task computing the new report
        """
        if self._task and not self._task.done():
            logger.debug("Superseding in-flight insights computation")
            self._task.cancel()

        snapshot = tuple(episodes)
        self._generation += 1
        self.is_loading = True
        self._task = asyncio.create_task(self._compute(snapshot, now, self._generation))
        return self._task

    async def _compute(
        self,
        snapshot: tuple,
        now: Optional[datetime],
        generation: int
    ) -> InsightsReport:
        try:
            report = await asyncio.to_thread(self.service.build_report, snapshot, now)
        except Exception as e:
            logger.error(f"Insights computation failed: {e}", exc_info=True)
            raise
        finally:
            # A newer update_episodes() call owns the loading flag now
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug(f"Discarding stale insights report (generation {generation})")
            return report

        self.report = report
        logger.info(
            f"Insights report ready: {report.total_logs} logs, "
            f"minimum met: {report.minimum_logs_met}"
        )
        return report

    async def wait_for_report(self, timeout: Optional[float] = None) -> Optional[InsightsReport]:
        """
        Wait for the current computation and return the published report.

        Args:
            timeout: Seconds to wait before giving up (None waits forever)

        Returns:
            The latest report, or None if nothing was ever computed

        Raises:
            InsightsTimeoutError: If the computation outlives the timeout
        """
        task = self._task
        if task is None:
            return self.report

        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise InsightsTimeoutError(timeout=timeout, cause=e)
        except asyncio.CancelledError:
            # Superseded while we waited; the replacement task carries on
            if self._task is not task:
                return await self.wait_for_report(timeout=timeout)
            raise

        return self.report

    async def close(self) -> None:
        """Cancel any in-flight computation"""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass  # Expected when we cancel the task
        self._task = None
        self.is_loading = False
