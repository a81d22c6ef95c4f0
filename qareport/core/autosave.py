"""Debounced checklist autosave.

Checklist edits arrive in bursts (every checkbox click). Instead of one write
per click, the latest checklist for each report is held and written once the
report has been quiet for ``delay`` seconds. An explicit save skips the wait.

Writes for one report run one at a time. While a write is in flight its payload
still counts as pending, so edits made meanwhile build on it rather than on the
older stored copy.

Failed writes are logged and remembered per report; they are not retried.
The next successful write, debounced or explicit, supersedes them.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Callable, Sequence
from uuid import UUID

from qareport.core.logging import get_logger, log_with_context
from qareport.core.schemas_qa import ChecklistCategory

logger = get_logger(__name__)

ChecklistWriter = Callable[[UUID, Sequence[ChecklistCategory]], Any]


class DebouncedSaver:
    """Coalesces checklist writes per report behind a quiet period."""

    def __init__(self, write: ChecklistWriter, delay: float = 1.0):
        self._write = write
        self._delay = delay
        self._pending: dict[UUID, list[ChecklistCategory]] = {}
        self._inflight: dict[UUID, list[ChecklistCategory]] = {}
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._timers: dict[UUID, asyncio.Task] = {}
        self._last_errors: dict[UUID, str] = {}

    @property
    def delay(self) -> float:
        return self._delay

    def schedule(self, report_id: UUID, checklist: Sequence[ChecklistCategory]) -> None:
        """Queue ``checklist`` for ``report_id``, restarting its quiet period."""
        self._pending[report_id] = [c.model_copy(deep=True) for c in checklist]
        self._cancel_timer(report_id)
        self._timers[report_id] = asyncio.get_running_loop().create_task(
            self._write_after_delay(report_id)
        )
        logger.debug(
            f"Scheduled checklist save for report {report_id}",
            extra={"report_id": str(report_id), "delay": self._delay},
        )

    def pending(self, report_id: UUID) -> bool:
        """True while a write for ``report_id`` is queued or in flight."""
        return report_id in self._pending or report_id in self._inflight

    def pending_checklist(self, report_id: UUID) -> list[ChecklistCategory] | None:
        """Copy of the newest unsaved checklist (queued, else in flight)."""
        checklist = self._pending.get(report_id)
        if checklist is None:
            checklist = self._inflight.get(report_id)
        if checklist is None:
            return None
        return [c.model_copy(deep=True) for c in checklist]

    def last_error(self, report_id: UUID) -> str | None:
        """Message of the most recent failed write, cleared by the next success."""
        return self._last_errors.get(report_id)

    async def flush(self, report_id: UUID) -> bool:
        """
        Write any queued checklist now. Returns True if a write succeeded.

        Waits for an in-flight write first, so storage is current on return.
        """
        self._cancel_timer(report_id)
        return await self._write_pending(report_id)

    async def save_now(self, report_id: UUID, checklist: Sequence[ChecklistCategory]) -> None:
        """
        Write immediately, dropping any queued payload for the report.

        Unlike the debounced path, failures propagate so the caller can tell
        the user the save did not happen.
        """
        self._cancel_timer(report_id)
        self._pending.pop(report_id, None)
        payload = [c.model_copy(deep=True) for c in checklist]
        async with self._lock(report_id):
            self._inflight[report_id] = payload
            try:
                await asyncio.to_thread(self._write, report_id, payload)
            finally:
                self._inflight.pop(report_id, None)
        self._last_errors.pop(report_id, None)

    async def shutdown(self) -> None:
        """Flush every pending write (app shutdown)."""
        for report_id in set(self._pending) | set(self._inflight):
            await self.flush(report_id)

    def _lock(self, report_id: UUID) -> asyncio.Lock:
        return self._locks.setdefault(report_id, asyncio.Lock())

    def _cancel_timer(self, report_id: UUID) -> None:
        timer = self._timers.pop(report_id, None)
        if timer is not None:
            timer.cancel()

    async def _write_after_delay(self, report_id: UUID) -> None:
        await asyncio.sleep(self._delay)
        # Past the quiet period: detach so a new schedule() can't cancel the write
        self._timers.pop(report_id, None)
        await self._write_pending(report_id)

    async def _write_pending(self, report_id: UUID) -> bool:
        async with self._lock(report_id):
            checklist = self._pending.pop(report_id, None)
            if checklist is None:
                return False

            self._inflight[report_id] = checklist
            try:
                await asyncio.to_thread(self._write, report_id, checklist)
            except Exception as e:
                self._last_errors[report_id] = str(e)
                log_with_context(
                    logger,
                    logging.ERROR,
                    f"Debounced checklist save failed: {e}",
                    report_id=str(report_id),
                )
                return False
            finally:
                self._inflight.pop(report_id, None)

        self._last_errors.pop(report_id, None)
        logger.debug(
            f"Saved checklist for report {report_id}",
            extra={"report_id": str(report_id)},
        )
        return True


@lru_cache(maxsize=1)
def get_checklist_saver() -> DebouncedSaver:
    """Process-wide saver writing through ``qa_reports.update_checklist``."""
    from qareport.core.config import get_settings
    from qareport.db.qa_reports import update_checklist

    return DebouncedSaver(update_checklist, delay=get_settings().SAVE_DEBOUNCE_SECONDS)
