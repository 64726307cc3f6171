# backend/routes/email.py
import logging

from fastapi import APIRouter, Depends, Request

from models.tenant import Tenant
from schemas import email as schemas
from store import get_directory, get_dispatcher, resolve_request_sheet
from utils.notifications import NotificationDispatcher
from utils.tenants import TenantDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["Email"])


# ---- HELPERS ----
def _tenant_from_request(payload: schemas.ClientEmailRequest, request: Request, directory: TenantDirectory) -> Tenant:
    return Tenant(
        id=payload.client_id or "",
        name=payload.client_name or "",
        email=payload.client_email,
        sheet_id=resolve_request_sheet(request, directory, payload.client_id),
    )


# ==========================================
#  CLIENT REPORTS
# ==========================================
@router.post("/low-stock")
def send_low_stock(
    payload: schemas.ClientEmailRequest,
    request: Request,
    directory: TenantDirectory = Depends(get_directory),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    tenant = _tenant_from_request(payload, request, directory)
    if not dispatcher.send_low_stock_email(tenant):
        return {"success": True, "message": "No low stock items found"}
    return {"success": True, "message": f"Low stock alert sent to {tenant.email}"}


@router.post("/dashboard-summary")
def send_dashboard_summary(
    payload: schemas.ClientEmailRequest,
    request: Request,
    directory: TenantDirectory = Depends(get_directory),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    tenant = _tenant_from_request(payload, request, directory)
    dispatcher.send_dashboard_summary(tenant)
    return {"success": True, "message": f"Dashboard summary sent to {tenant.email}"}


# ==========================================
#  HELP DESK
# ==========================================
@router.post("/password-reset")
def password_reset(payload: schemas.PasswordResetRequest, dispatcher: NotificationDispatcher = Depends(get_dispatcher)):
    dispatcher.send_password_reset_request(payload.name, payload.contact_number, payload.company_name)
    logger.info(f"Password reset request forwarded for {payload.name} ({payload.company_name})")
    return {"success": True, "message": "Password reset request sent successfully"}


@router.post("/support")
def support(payload: schemas.SupportRequest, dispatcher: NotificationDispatcher = Depends(get_dispatcher)):
    dispatcher.send_support_request(payload.name, payload.email, payload.subject, payload.message)
    return {"success": True, "message": "Your query has been sent successfully"}
