"""
Unit tests for recurring metrics sampling.
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from design_gate.core.exceptions import MetricsUnavailableError
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.monitoring.metrics import MetricsSampler
from design_gate.core.monitoring.scheduler import PeriodicSampler


@pytest.fixture
def stub_sampler(make_snapshot):
    sampler = MagicMock()
    sampler.sample.side_effect = lambda connections: make_snapshot(
        active_connections=connections
    )
    return sampler


class TestTick:
    """Test a single sampling cycle."""

    def test_tick_records_with_live_connection_count(self, stub_sampler, history):
        counts = iter([3, 8])
        periodic = PeriodicSampler(stub_sampler, history, lambda: next(counts))

        periodic.tick()
        periodic.tick()

        assert [s.active_connections for s in history.all()] == [3, 8]
        stub_sampler.sample.assert_called_with(8)

    def test_failed_sample_leaves_history_untouched(
        self, stub_sampler, history, make_snapshot
    ):
        history.record(make_snapshot(active_connections=1))
        stub_sampler.sample.side_effect = MetricsUnavailableError("boom")
        periodic = PeriodicSampler(stub_sampler, history, lambda: 0)

        assert periodic.tick() is None
        assert len(history) == 1
        assert history.current().active_connections == 1

    def test_negative_count_is_skipped(self, history):
        periodic = PeriodicSampler(MetricsSampler(), history, lambda: -5)

        assert periodic.tick() is None
        assert len(history) == 0

    def test_counter_error_propagates_from_tick(self, stub_sampler, history):
        counter = MagicMock(side_effect=RuntimeError("route layer down"))
        periodic = PeriodicSampler(stub_sampler, history, counter)

        with pytest.raises(RuntimeError):
            periodic.tick()
        assert len(history) == 0
        stub_sampler.sample.assert_not_called()


class TestBackgroundTask:
    """Test the asyncio sampling loop."""

    @pytest.mark.asyncio
    async def test_start_samples_repeatedly(self, stub_sampler):
        history = MetricsHistory()
        periodic = PeriodicSampler(stub_sampler, history, lambda: 4, interval=0.01)

        periodic.start()
        assert periodic.running
        await asyncio.sleep(0.08)
        await periodic.stop()

        assert not periodic.running
        assert len(history) >= 2
        assert all(s.active_connections == 4 for s in history.all())

    @pytest.mark.asyncio
    async def test_loop_survives_unavailable_metrics(self, stub_sampler, make_snapshot):
        history = MetricsHistory()
        results = iter(
            [MetricsUnavailableError("first read failed")]
            + [make_snapshot(active_connections=i) for i in range(100)]
        )

        def flaky(connections):
            result = next(results)
            if isinstance(result, Exception):
                raise result
            return result

        stub_sampler.sample.side_effect = flaky
        periodic = PeriodicSampler(stub_sampler, history, lambda: 0, interval=0.01)

        periodic.start()
        await asyncio.sleep(0.08)
        await periodic.stop()

        assert len(history) >= 1

    @pytest.mark.asyncio
    async def test_loop_survives_failing_counter(self, stub_sampler):
        history = MetricsHistory()
        counts = iter([RuntimeError("route layer down")] + list(range(1, 100)))

        def counter():
            value = next(counts)
            if isinstance(value, Exception):
                raise value
            return value

        periodic = PeriodicSampler(stub_sampler, history, counter, interval=0.01)

        with patch("design_gate.core.monitoring.scheduler.logger") as mock_logger:
            periodic.start()
            await asyncio.sleep(0.1)
            assert periodic.running
            await periodic.stop()

        mock_logger.exception.assert_called_once()
        assert not periodic.running
        assert len(history) >= 2
        assert history.all()[0].active_connections == 1

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self, stub_sampler, history):
        periodic = PeriodicSampler(stub_sampler, history, lambda: 0, interval=10)

        periodic.start()
        task = periodic._task
        periodic.start()
        assert periodic._task is task

        await periodic.stop()
        await periodic.stop()
        assert not periodic.running

    @pytest.mark.asyncio
    async def test_stop_without_start(self, stub_sampler, history):
        periodic = PeriodicSampler(stub_sampler, history, lambda: 0)
        await periodic.stop()
        assert not periodic.running
