# backend/tests/test_scheduler.py
from datetime import date, datetime, timezone

import pytest

from conftest import CLIENT_HEADERS, MASTER_ID
from utils.notifications import NotificationDispatcher
from utils.scheduler import NotificationJobs, SchedulerClock
from utils.tenants import TenantDirectory


@pytest.fixture
def jobs(store, mailer):
    store.add_tab(MASTER_ID, "Clients", [
        CLIENT_HEADERS,
        ["t1", "One", "one@example.com", "", "", "sheet-acme", "one", "pw"],
        ["t2", "Two", "two@example.com", "", "", "sheet-broken", "two", "pw"],
        ["t3", "Three", "three@example.com", "", "", "sheet-smeltech", "three", "pw"],
    ])
    store.fail("sheet-broken")
    return NotificationJobs(TenantDirectory(store, MASTER_ID), NotificationDispatcher(store, mailer))


class CountingJobs:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def run_all(self):
        self.calls += 1
        if self.error:
            raise self.error
        return []


def _utc(day, hour, minute):
    return datetime(2026, 10, day, hour, minute, tzinfo=timezone.utc)


# ==========================================
#  FAN-OUT
# ==========================================
def test_failing_tenant_does_not_block_others(jobs, mailer):
    report = jobs.run_low_stock_job()
    assert report.sent == ["t1", "t3"]
    assert report.failed == ["t2"]
    assert [e.to for e in mailer.sent] == ["one@example.com", "three@example.com"]


def test_mail_failure_is_contained(jobs, mailer):
    mailer.failing.add("one@example.com")
    report = jobs.run_dashboard_job()
    assert report.sent == ["t3"]
    assert sorted(report.failed) == ["t1", "t2"]


def test_directory_failure_yields_empty_report(store, jobs):
    store.fail(MASTER_ID)
    report = jobs.run_low_stock_job()
    assert report.processed == 0


def test_run_all_runs_both_jobs(jobs):
    low_stock, dashboard = jobs.run_all()
    assert (low_stock.job, dashboard.job) == ("low-stock", "dashboard-summary")
    assert len(dashboard.sent) == 2


# ==========================================
#  CLOCK
# ==========================================
def test_fires_once_inside_window():
    counting = CountingJobs()
    clock = SchedulerClock(counting, trigger_hour=18, window_minutes=5, utc_offset_minutes=330)

    assert clock.tick(_utc(19, 12, 29)) is False  # 17:59 IST
    assert clock.tick(_utc(19, 12, 30)) is True   # 18:00 IST
    assert clock.tick(_utc(19, 12, 33)) is False
    assert clock.tick(_utc(19, 12, 35)) is False  # 18:05 IST
    assert counting.calls == 1
    assert clock.last_run_date == date(2026, 10, 19)

    assert clock.tick(_utc(20, 12, 31)) is True
    assert counting.calls == 2


def test_local_date_rolls_over_before_utc():
    clock = SchedulerClock(CountingJobs(), trigger_hour=0, window_minutes=5, utc_offset_minutes=330)
    # 18:32 UTC on the 19th is 00:02 IST on the 20th
    assert clock.tick(_utc(19, 18, 32)) is True
    assert clock.last_run_date == date(2026, 10, 20)


def test_failed_run_is_logged_not_raised():
    counting = CountingJobs(error=RuntimeError("boom"))
    clock = SchedulerClock(counting, trigger_hour=18, window_minutes=5, utc_offset_minutes=330)
    assert clock.tick(_utc(19, 12, 30)) is False
    # The day is claimed before running
    assert clock.tick(_utc(19, 12, 31)) is False
    assert counting.calls == 1


def test_start_is_idempotent_and_stop_keeps_last_run():
    clock = SchedulerClock(CountingJobs(), interval_seconds=3600, trigger_hour=18,
                           window_minutes=5, utc_offset_minutes=330)
    clock.tick(_utc(19, 12, 30))
    try:
        clock.start()
        first = clock._scheduler
        clock.start()
        assert clock._scheduler is first
        assert clock.is_running
    finally:
        clock.stop()
    assert not clock.is_running
    assert clock.last_run_date == date(2026, 10, 19)
