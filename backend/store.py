# backend/store.py
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request

from config import settings
from utils.mailer import SmtpMailer
from utils.notifications import NotificationDispatcher
from utils.scheduler import NotificationJobs, SchedulerClock
from utils.sheets_client import GoogleSheetsStore
from utils.tenants import CLIENT_COOKIE, TenantDirectory, resolve_sheet_id

# One store per process; it caches the service-account token
_store: Optional[GoogleSheetsStore] = None

NO_SHEET_MESSAGE = "No sheet ID available. Please select a client or check configuration."


def get_store() -> GoogleSheetsStore:
    global _store
    if _store is None:
        _store = GoogleSheetsStore()
    return _store


def get_directory(store=Depends(get_store)) -> TenantDirectory:
    return TenantDirectory(store, settings.MASTER_SHEET_ID)


def get_mailer() -> SmtpMailer:
    return SmtpMailer()


def get_dispatcher(store=Depends(get_store), mailer=Depends(get_mailer)) -> NotificationDispatcher:
    return NotificationDispatcher(store, mailer)


# Spreadsheet for the current request: explicit clientId, then the clientId cookie, then the default
def resolve_request_sheet(request: Request, directory: TenantDirectory, client_id: Optional[str] = None) -> str:
    cookie_header = None
    cookie_value = request.cookies.get(CLIENT_COOKIE)
    if cookie_value is None:
        cookie_header = request.headers.get("cookie")

    sheet_id = resolve_sheet_id(
        directory,
        settings.GOOGLE_SHEET_ID,
        tenant_id=client_id,
        cookie_tenant_id=cookie_value,
        cookie_header=cookie_header,
    )
    if not sheet_id:
        raise HTTPException(status_code=400, detail=NO_SHEET_MESSAGE)
    return sheet_id


def get_sheet_id(
    request: Request,
    client_id: Optional[str] = Query(None, alias="clientId"),
    directory: TenantDirectory = Depends(get_directory),
) -> str:
    return resolve_request_sheet(request, directory, client_id)


# ==========================================
#  SCHEDULER
# ==========================================
def build_scheduler(store=None, mailer=None) -> SchedulerClock:
    store = store or get_store()
    directory = TenantDirectory(store, settings.MASTER_SHEET_ID)
    dispatcher = NotificationDispatcher(store, mailer or SmtpMailer())
    return SchedulerClock(NotificationJobs(directory, dispatcher))


# The clock lives on app.state (created in the lifespan)
def get_scheduler(request: Request) -> SchedulerClock:
    clock = getattr(request.app.state, "scheduler", None)
    if clock is None:
        clock = build_scheduler()
        request.app.state.scheduler = clock
    return clock
