# backend/routes/dashboard.py
from fastapi import APIRouter, Depends

from schemas.dashboard import DashboardOut
from store import get_dispatcher, get_sheet_id
from utils.notifications import NotificationDispatcher

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("")
def dashboard(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    sheet_id: str = Depends(get_sheet_id),
):
    metrics = dispatcher.dashboard_metrics(sheet_id)
    return DashboardOut.model_validate(metrics).model_dump(mode="json", by_alias=True)
