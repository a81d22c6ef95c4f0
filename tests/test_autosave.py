"""Tests for the debounced checklist saver."""

import asyncio
import time
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from qareport.core.autosave import DebouncedSaver
from tests.fixtures_qa import make_checklist

DELAY = 0.05


def _checklist(checked: int):
    return make_checklist([[(checked, 3 - checked)]])


class TestDebouncedSaver:
    @pytest.mark.asyncio
    async def test_burst_coalesces_into_one_write_with_latest_payload(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=DELAY)
        report_id = uuid4()

        for checked in range(4):
            saver.schedule(report_id, _checklist(checked))
        assert saver.pending(report_id)

        await asyncio.sleep(DELAY * 4)

        write.assert_called_once()
        written_id, written = write.call_args[0]
        assert written_id == report_id
        assert written[0].sections[0].completed is True
        assert not saver.pending(report_id)

    @pytest.mark.asyncio
    async def test_nothing_written_before_quiet_period(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=1.0)

        saver.schedule(uuid4(), _checklist(1))
        await asyncio.sleep(0.01)

        write.assert_not_called()
        await saver.shutdown()

    @pytest.mark.asyncio
    async def test_reports_are_debounced_independently(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=DELAY)
        first, second = uuid4(), uuid4()

        saver.schedule(first, _checklist(1))
        saver.schedule(second, _checklist(2))
        await asyncio.sleep(DELAY * 4)

        assert {call.args[0] for call in write.call_args_list} == {first, second}

    @pytest.mark.asyncio
    async def test_flush_writes_immediately(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=10)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(2))
        assert await saver.flush(report_id) is True

        write.assert_called_once()
        assert await saver.flush(report_id) is False

    @pytest.mark.asyncio
    async def test_save_now_bypasses_and_drops_pending(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=DELAY)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(0))
        await saver.save_now(report_id, _checklist(3))
        await asyncio.sleep(DELAY * 4)

        write.assert_called_once()
        assert write.call_args[0][1][0].sections[0].completed is True

    @pytest.mark.asyncio
    async def test_save_now_propagates_failure(self):
        write = MagicMock(side_effect=RuntimeError("store down"))
        saver = DebouncedSaver(write, delay=DELAY)

        with pytest.raises(RuntimeError):
            await saver.save_now(uuid4(), _checklist(1))

    @pytest.mark.asyncio
    async def test_debounced_failure_is_recorded_not_retried(self):
        write = MagicMock(side_effect=RuntimeError("store down"))
        saver = DebouncedSaver(write, delay=DELAY)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(1))
        await asyncio.sleep(DELAY * 4)

        assert write.call_count == 1
        assert saver.last_error(report_id) == "store down"

        write.side_effect = None
        saver.schedule(report_id, _checklist(2))
        await asyncio.sleep(DELAY * 4)

        assert saver.last_error(report_id) is None

    @pytest.mark.asyncio
    async def test_pending_checklist_is_a_copy(self):
        saver = DebouncedSaver(MagicMock(), delay=10)
        report_id = uuid4()
        saver.schedule(report_id, _checklist(0))

        copy = saver.pending_checklist(report_id)
        copy[0].sections[0].items[0].checked = True

        assert saver.pending_checklist(report_id)[0].sections[0].items[0].checked is False
        assert saver.pending_checklist(uuid4()) is None
        await saver.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_flushes_everything(self):
        write = MagicMock()
        saver = DebouncedSaver(write, delay=10)
        ids = [uuid4(), uuid4()]
        for report_id in ids:
            saver.schedule(report_id, _checklist(1))

        await saver.shutdown()

        assert write.call_count == 2
        assert not any(saver.pending(report_id) for report_id in ids)


class _SlowWriter:
    """Blocking writer that records what it stored, like a slow Supabase round-trip."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.writes = []

    def __call__(self, report_id, checklist):
        time.sleep(self.seconds)
        self.writes.append((report_id, [c.model_copy(deep=True) for c in checklist]))


class TestInFlightWrites:
    @pytest.mark.asyncio
    async def test_in_flight_payload_stays_visible(self):
        writer = _SlowWriter(0.3)
        saver = DebouncedSaver(writer, delay=DELAY)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(1))
        await asyncio.sleep(DELAY * 2)

        assert writer.writes == []
        assert saver.pending(report_id)
        assert saver.pending_checklist(report_id)[0].sections[0].items[0].checked is True
        await saver.shutdown()

    @pytest.mark.asyncio
    async def test_edit_during_write_keeps_earlier_edit(self):
        writer = _SlowWriter(0.3)
        saver = DebouncedSaver(writer, delay=DELAY)
        report_id = uuid4()

        first = _checklist(0)
        first[0].sections[0].items[0].checked = True
        saver.schedule(report_id, first)
        await asyncio.sleep(DELAY * 2)

        # Second edit builds on the newest unsaved copy, not on storage
        second = saver.pending_checklist(report_id)
        second[0].sections[0].items[1].checked = True
        saver.schedule(report_id, second)
        await asyncio.sleep(0.3 * 2 + DELAY * 4)

        assert len(writer.writes) == 2
        final_items = writer.writes[-1][1][0].sections[0].items
        assert [item.checked for item in final_items] == [True, True, False]
        assert not saver.pending(report_id)

    @pytest.mark.asyncio
    async def test_flush_waits_for_in_flight_write(self):
        writer = _SlowWriter(0.2)
        saver = DebouncedSaver(writer, delay=DELAY)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(2))
        await asyncio.sleep(DELAY * 2)
        await saver.flush(report_id)

        assert len(writer.writes) == 1
        assert not saver.pending(report_id)

    @pytest.mark.asyncio
    async def test_save_now_is_ordered_after_in_flight_write(self):
        writer = _SlowWriter(0.2)
        saver = DebouncedSaver(writer, delay=DELAY)
        report_id = uuid4()

        saver.schedule(report_id, _checklist(1))
        await asyncio.sleep(DELAY * 2)
        await saver.save_now(report_id, _checklist(3))

        assert len(writer.writes) == 2
        assert writer.writes[-1][1][0].sections[0].completed is True
