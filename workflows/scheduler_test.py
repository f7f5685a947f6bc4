"""Tests for the enrichment scheduler loop."""

import pytest
from unittest.mock import AsyncMock, patch

from workflows.scheduler import run_forever


class TestRunForever:
    """Tests for run_forever()."""

    @pytest.mark.asyncio
    async def test_waits_then_runs_on_interval(self):
        with patch("workflows.scheduler.asyncio.sleep", new=AsyncMock()) as mock_sleep, \
                patch("workflows.scheduler.enrich_venues.run", new=AsyncMock()) as mock_run:
            runs = await run_forever(interval_hours=6, initial_delay=5, max_runs=3)

        assert runs == 3
        assert mock_run.await_count == 3
        assert [c.args[0] for c in mock_sleep.await_args_list] == [5, 6 * 3600, 6 * 3600]

    @pytest.mark.asyncio
    async def test_failed_run_does_not_stop_schedule(self):
        with patch("workflows.scheduler.asyncio.sleep", new=AsyncMock()), \
                patch("workflows.scheduler.enrich_venues.run",
                      new=AsyncMock(side_effect=[RuntimeError("browser crashed"), None])) as mock_run:
            runs = await run_forever(initial_delay=0, max_runs=2)

        assert runs == 2
        assert mock_run.await_count == 2
