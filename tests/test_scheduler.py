"""Tests for the debounced save scheduler."""

from __future__ import annotations

import logging
import threading
import time

import pytest

from smarttracker.scheduler import BackgroundScheduler, create_scheduler


@pytest.fixture
def scheduler():
    sched = create_scheduler()
    yield sched
    sched.stop(flush=False)


def test_unstarted_scheduler_waits_for_flush(scheduler):
    calls = []

    scheduler.schedule("habits", 0.0, lambda: calls.append("habits"))

    assert calls == []
    assert scheduler.pending() == ["habits"]
    scheduler.flush()
    assert calls == ["habits"]
    assert scheduler.pending() == []


def test_last_scheduled_task_wins_per_category(scheduler):
    calls = []

    for value in range(5):
        scheduler.schedule("habits", 0.2, lambda value=value: calls.append(value))
    scheduler.flush()

    assert calls == [4]


def test_categories_are_independent(scheduler):
    calls = []

    scheduler.schedule("settings", 0.25, lambda: calls.append("settings"))
    scheduler.schedule("habits", 0.2, lambda: calls.append("habits"))
    scheduler.flush()

    assert calls == ["habits", "settings"]


def test_cancel_drops_pending_work(scheduler):
    calls = []

    scheduler.schedule("habits", 0.2, lambda: calls.append("habits"))
    scheduler.cancel("habits")
    scheduler.flush()

    assert calls == []


def test_failing_task_is_logged_not_raised(scheduler, caplog):
    def boom():
        raise RuntimeError("disk full")

    with caplog.at_level(logging.ERROR, logger="smarttracker.scheduler"):
        scheduler.schedule("habits", 0.0, boom)
        scheduler.flush()

    assert "disk full" in caplog.text


def test_stop_flushes_by_default():
    sched = BackgroundScheduler()
    calls = []
    sched.schedule("settings", 1.0, lambda: calls.append("settings"))

    sched.stop()

    assert calls == ["settings"]


class TestRunningScheduler:
    """With APScheduler running, pending work fires on its own."""

    def test_debounced_task_fires_after_delay(self, scheduler):
        done = threading.Event()
        scheduler.start()

        scheduler.schedule("habits", 0.05, done.set)

        assert done.wait(timeout=5)
        assert scheduler.pending() == []

    def test_rescheduling_supersedes_the_earlier_task(self, scheduler):
        calls = []
        done = threading.Event()
        scheduler.start()

        scheduler.schedule("habits", 0.5, lambda: calls.append("first"))
        scheduler.schedule("habits", 0.05, lambda: (calls.append("second"), done.set()))

        assert done.wait(timeout=5)
        assert calls == ["second"]

    def test_task_scheduled_during_a_running_save_still_runs(self, scheduler):
        calls = []
        started = threading.Event()
        done = threading.Event()
        scheduler.start()

        def slow_first():
            started.set()
            time.sleep(0.6)
            calls.append("first")

        scheduler.schedule("habits", 0.0, slow_first)
        assert started.wait(timeout=5)
        scheduler.schedule("habits", 0.05, lambda: (calls.append("second"), done.set()))

        assert done.wait(timeout=5)
        assert calls == ["first", "second"]
        assert scheduler.pending() == []

    def test_runs_for_one_category_never_overlap(self, scheduler):
        active = []
        overlaps = []
        done = threading.Event()
        scheduler.start()

        def save(label):
            active.append(label)
            if len(active) > 1:
                overlaps.append(tuple(active))
            time.sleep(0.3)
            active.remove(label)
            if label == "last":
                done.set()

        scheduler.schedule("habits", 0.0, lambda: save("first"))
        time.sleep(0.1)
        scheduler.schedule("habits", 0.0, lambda: save("last"))

        assert done.wait(timeout=5)
        assert overlaps == []

    def test_pending_work_without_a_job_is_rearmed_after_a_run(self, scheduler):
        release = threading.Event()
        started = threading.Event()
        done = threading.Event()
        scheduler.start()

        def blocking():
            started.set()
            release.wait(timeout=5)

        scheduler.schedule("habits", 0.0, blocking)
        assert started.wait(timeout=5)
        scheduler.schedule("habits", 60.0, done.set)
        # Same state APScheduler leaves behind when it skips an overlapping run.
        scheduler.scheduler.remove_job("save:habits")
        release.set()

        assert done.wait(timeout=5)
        assert scheduler.pending() == []

    def test_work_queued_before_start_runs_on_start(self, scheduler):
        done = threading.Event()
        scheduler.schedule("settings", 10.0, done.set)

        scheduler.start()

        assert done.wait(timeout=5)

    def test_interval_job_requires_running_scheduler(self, scheduler, caplog):
        with caplog.at_level(logging.WARNING, logger="smarttracker.scheduler"):
            scheduler.add_interval_job(lambda: None, seconds=60, job_id="rollover_sweep")
        assert "scheduler not started" in caplog.text

        scheduler.start()
        scheduler.add_interval_job(lambda: None, seconds=60, job_id="rollover_sweep")
        assert scheduler.scheduler.get_job("rollover_sweep") is not None
