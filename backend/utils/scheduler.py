# backend/utils/scheduler.py
"""Daily notification fan-out and the clock that triggers it.

The clock is a best-effort, at-most-once-per-day trigger for a single
process: the last run date lives in memory only, a window missed while the
process is down is not caught up, and two processes running their own clocks
will both send.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import settings

logger = logging.getLogger(__name__)

JOB_ID = "daily_notifications"


@dataclass
class JobReport:
    job: str
    sent: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.sent) + len(self.skipped) + len(self.failed)

    def to_dict(self) -> dict:
        return {"job": self.job, "sent": self.sent, "skipped": self.skipped, "failed": self.failed}


class NotificationJobs:
    """Runs one dispatcher call per notifiable tenant, one tenant at a time.

    A failure for one tenant is logged and never stops the others.
    """

    def __init__(self, directory, dispatcher):
        self.directory = directory
        self.dispatcher = dispatcher

    def _fan_out(self, job: str, send: Callable) -> JobReport:
        report = JobReport(job=job)
        logger.info(f"Starting {job} email job")
        try:
            tenants = self.directory.notifiable_tenants()
        except Exception:
            logger.exception(f"{job} email job could not list clients")
            return report

        logger.info(f"Found {len(tenants)} clients for {job} email job")
        for tenant in tenants:
            try:
                if send(tenant):
                    report.sent.append(tenant.id)
                else:
                    report.skipped.append(tenant.id)
            except Exception:
                logger.exception(f"Error sending {job} email to client {tenant.id} ({tenant.name})")
                report.failed.append(tenant.id)

        logger.info(
            f"Completed {job} email job: {len(report.sent)} sent, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed"
        )
        return report

    def run_low_stock_job(self) -> JobReport:
        return self._fan_out("low-stock", self.dispatcher.send_low_stock_email)

    def run_dashboard_job(self) -> JobReport:
        return self._fan_out("dashboard-summary", self.dispatcher.send_dashboard_summary)

    def run_all(self) -> List[JobReport]:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify") as pool:
            low_stock = pool.submit(self.run_low_stock_job)
            dashboard = pool.submit(self.run_dashboard_job)
            return [low_stock.result(), dashboard.result()]


class SchedulerClock:
    """Wakes every `interval_seconds` and runs all jobs once inside the daily window."""

    def __init__(
        self,
        jobs: NotificationJobs,
        interval_seconds: int = None,
        trigger_hour: int = None,
        window_minutes: int = None,
        utc_offset_minutes: int = None,
        clock: Callable[[], datetime] = None,
    ):
        self.jobs = jobs
        self.interval_seconds = interval_seconds or settings.SCHEDULER_INTERVAL_SECONDS
        self.trigger_hour = settings.SCHEDULER_TRIGGER_HOUR if trigger_hour is None else trigger_hour
        self.window_minutes = settings.SCHEDULER_TRIGGER_WINDOW_MINUTES if window_minutes is None else window_minutes
        offset = settings.SCHEDULER_UTC_OFFSET_MINUTES if utc_offset_minutes is None else utc_offset_minutes
        self.tz = timezone(timedelta(minutes=offset))
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self.last_run_date: Optional[date] = None
        self._scheduler: Optional[BackgroundScheduler] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def local_now(self, now: Optional[datetime] = None) -> datetime:
        now = now or self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz)

    def is_trigger_time(self, now: Optional[datetime] = None) -> bool:
        local = self.local_now(now)
        return local.hour == self.trigger_hour and 0 <= local.minute < self.window_minutes

    def start(self) -> "SchedulerClock":
        if self.is_running:
            logger.info("Scheduler is already running")
            return self

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name="Send daily low stock and dashboard emails",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            f"Email scheduler started - will run daily at {self.trigger_hour:02d}:00 "
            f"(UTC{self.local_now().strftime('%z')})"
        )
        return self

    def stop(self) -> None:
        # In-flight runs finish; last_run_date is kept
        if not self.is_running:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Email scheduler stopped")

    def tick(self, now: Optional[datetime] = None) -> bool:
        """One wake-up. Returns True when the jobs were fired."""
        try:
            local = self.local_now(now)
            today = local.date()
            with self._lock:
                if not self.is_trigger_time(local) or self.last_run_date == today:
                    return False
                # Claimed before running so an overlapping wake-up sees it
                self.last_run_date = today

            logger.info(f"It's {local.strftime('%H:%M')} local - running scheduled email jobs")
            self.jobs.run_all()
            return True
        except Exception:
            logger.exception("Error in scheduler check")
            return False
