"""Tests for binzingo/session/scheduler.py — keyed background scheduling."""

import threading
import time

import pytest

from binzingo.session.scheduler import TurnScheduler


@pytest.fixture
def scheduler():
    sched = TurnScheduler()
    yield sched
    sched.shutdown()


class TestTurnScheduler:
    def test_schedule_runs_callback(self, scheduler):
        done = threading.Event()
        scheduler.schedule("bot", 0.01, done.set)
        assert done.wait(timeout=2)

    def test_cancel_prevents_run(self, scheduler):
        done = threading.Event()
        scheduler.schedule("bot", 0.5, done.set)
        assert scheduler.is_pending("bot")
        scheduler.cancel("bot")
        assert not scheduler.is_pending("bot")
        assert not done.wait(timeout=0.8)

    def test_reschedule_replaces_pending(self, scheduler):
        first = threading.Event()
        second = threading.Event()
        scheduler.schedule("bot", 0.5, first.set)
        scheduler.schedule("bot", 0.01, second.set)
        assert second.wait(timeout=2)
        assert not first.wait(timeout=0.8)

    def test_clock_stops_when_handler_returns_false(self, scheduler):
        ticks = []
        stopped = threading.Event()

        def on_tick():
            ticks.append(1)
            if len(ticks) >= 3:
                stopped.set()
                return False
            return True

        scheduler.start_clock("clock", 0.01, on_tick)
        assert stopped.wait(timeout=2)
        time.sleep(0.1)
        assert len(ticks) == 3
        assert "clock" not in scheduler.pending_keys

    def test_failing_callback_does_not_stop_scheduler(self, scheduler):
        done = threading.Event()

        def boom():
            done.set()
            raise RuntimeError("boom")

        scheduler.schedule("bot", 0.01, boom)
        assert done.wait(timeout=2)
        # Scheduler keeps working afterwards
        again = threading.Event()
        scheduler.schedule("bot", 0.01, again.set)
        assert again.wait(timeout=2)

    def test_cancel_all(self, scheduler):
        scheduler.schedule("bot", 5, lambda: None)
        scheduler.start_clock("clock", 5, lambda: True)
        assert sorted(scheduler.pending_keys) == ["bot", "clock"]
        scheduler.cancel_all()
        assert scheduler.pending_keys == []

    def test_shutdown_is_idempotent(self):
        sched = TurnScheduler()
        sched.schedule("bot", 5, lambda: None)
        sched.shutdown()
        sched.shutdown()
        assert sched.pending_keys == []
