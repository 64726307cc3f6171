# backend/routes/scheduler.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from store import get_scheduler
from utils.scheduler import SchedulerClock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduler", tags=["Scheduler"])


# Manual trigger; without an action the daily clock is started.
# The response carries one aggregate status; per-client failures stay in the logs.
@router.get("")
def scheduler_action(action: Optional[str] = Query(None), clock: SchedulerClock = Depends(get_scheduler)):
    try:
        if action == "run-low-stock":
            report = clock.jobs.run_low_stock_job()
            return {"success": True, "message": "Low stock email job triggered successfully",
                    "reports": [report.to_dict()]}
        if action == "run-dashboard":
            report = clock.jobs.run_dashboard_job()
            return {"success": True, "message": "Dashboard summary email job triggered successfully",
                    "reports": [report.to_dict()]}
        if action == "run-all":
            reports = clock.jobs.run_all()
            return {"success": True, "message": "All email jobs triggered successfully",
                    "reports": [r.to_dict() for r in reports]}

        clock.start()
        return {"success": True, "message": "Scheduler started successfully"}
    except Exception as e:
        logger.exception("Error with scheduler")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process scheduler request", "details": str(e)},
        )


@router.get("/status")
def scheduler_status(clock: SchedulerClock = Depends(get_scheduler)):
    return {
        "running": clock.is_running,
        "lastRunDate": clock.last_run_date.isoformat() if clock.last_run_date else None,
        "triggerHour": clock.trigger_hour,
        "windowMinutes": clock.window_minutes,
    }


@router.post("/stop")
def stop_scheduler(clock: SchedulerClock = Depends(get_scheduler)):
    clock.stop()
    return {"success": True, "message": "Scheduler stopped"}
