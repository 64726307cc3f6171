# backend/utils/notifications.py
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import settings
from models.dashboard import DashboardMetrics
from models.inventory import InventoryItem
from models.tenant import Tenant
from utils.formatting import format_inr, format_ist_timestamp, format_long_date, format_quantity
from utils.mailer import OutgoingEmail
from utils.metrics import compute_metrics
from utils.record_mapper import map_inventory, map_purchases, map_sales
from utils.terminology import get_purchase_term, get_sales_term

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

INVENTORY_RANGE = "Inventory!A:Z"
PURCHASE_RANGE = "Purchase!A:Z"
SALES_RANGE = "Sales!A:Z"

DEFAULT_SYSTEM_NAME = "Inventory Management System"


def _plural(term: str) -> str:
    # "Sales" and "Received" stay as they are
    return term if term.endswith(("s", "ed")) else f"{term}s"


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
_env.filters["inr"] = format_inr
_env.filters["qty"] = format_quantity
_env.filters["plural"] = _plural


# ==========================================
#  RENDERING
# ==========================================
def render_low_stock_email(items: Sequence[InventoryItem], client_name: Optional[str] = None,
                           now: Optional[datetime] = None) -> str:
    return _env.get_template("low_stock_email.html").render(
        items=items,
        client_name=client_name,
        generated_at=format_ist_timestamp(now),
    )


def render_dashboard_summary_email(metrics: DashboardMetrics, client_name: Optional[str] = None,
                                   now: Optional[datetime] = None) -> str:
    purchase_term = get_purchase_term(client_name)
    sales_term = get_sales_term(client_name)
    weekly_cards = [
        (purchase_term, metrics.this_week.purchases, metrics.purchase_change, metrics.avg_per_day.purchases),
        (sales_term, metrics.this_week.sales, metrics.sales_change, metrics.avg_per_day.sales),
    ]
    return _env.get_template("dashboard_summary_email.html").render(
        metrics=metrics,
        client_name=client_name,
        purchase_term=purchase_term,
        sales_term=sales_term,
        weekly_cards=weekly_cards,
        report_date=format_long_date(now),
        generated_at=format_ist_timestamp(now),
    )


# ==========================================
#  DISPATCH
# ==========================================
class NotificationDispatcher:
    """Reads one tenant's sheets, builds a report and mails it to the tenant."""

    def __init__(self, store, mailer):
        self.store = store
        self.mailer = mailer

    # ---- DATA ----
    def fetch_inventory(self, sheet_id: str) -> List[InventoryItem]:
        return map_inventory(self.store.get_values(sheet_id, INVENTORY_RANGE))

    def fetch_purchases(self, sheet_id: str):
        return map_purchases(self.store.get_values(sheet_id, PURCHASE_RANGE))

    def fetch_sales(self, sheet_id: str):
        return map_sales(self.store.get_values(sheet_id, SALES_RANGE))

    def low_stock_items(self, sheet_id: str) -> List[InventoryItem]:
        return [item for item in self.fetch_inventory(sheet_id) if item.needs_attention]

    def dashboard_metrics(self, sheet_id: str, now: Optional[datetime] = None) -> DashboardMetrics:
        return compute_metrics(
            self.fetch_inventory(sheet_id),
            self.fetch_purchases(sheet_id),
            self.fetch_sales(sheet_id),
            now=now,
        )

    # ---- EMAILS ----
    def send_low_stock_email(self, tenant: Tenant) -> bool:
        """Mail the tenant its low/negative stock items. False when there was nothing to send."""
        if not tenant.email or not tenant.sheet_id:
            logger.info(f"Skipping client {tenant.id} - missing email or sheet ID")
            return False

        items = self.low_stock_items(tenant.sheet_id)
        if not items:
            logger.info(f"No low stock items found for client {tenant.id} ({tenant.name})")
            return False

        self.mailer.send(OutgoingEmail(
            to=tenant.email,
            subject=f"Low Stock Alert - {tenant.name or DEFAULT_SYSTEM_NAME}",
            html=render_low_stock_email(items, tenant.name),
        ))
        logger.info(f"Low stock email sent to {tenant.email} for {len(items)} items")
        return True

    def send_dashboard_summary(self, tenant: Tenant) -> bool:
        if not tenant.email or not tenant.sheet_id:
            logger.info(f"Skipping client {tenant.id} - missing email or sheet ID")
            return False

        metrics = self.dashboard_metrics(tenant.sheet_id)
        self.mailer.send(OutgoingEmail(
            to=tenant.email,
            subject=f"Daily Dashboard Summary - {tenant.name or DEFAULT_SYSTEM_NAME}",
            html=render_dashboard_summary_email(metrics, tenant.name),
        ))
        logger.info(f"Dashboard summary email sent to {tenant.email}")
        return True

    def send_password_reset_request(self, name: str, contact_number: str, company_name: str) -> None:
        html = _env.get_template("password_reset_email.html").render(
            name=name, contact_number=contact_number, company_name=company_name,
        )
        self.mailer.send(OutgoingEmail(
            to=settings.HELP_EMAIL,
            subject="Password Reset Request: Inventory Management",
            html=html,
            text=(
                f"Name: {name}\nContact Number: {contact_number}\nCompany Name: {company_name}\n\n"
                "This user has requested a password reset."
            ),
        ))

    def send_support_request(self, name: str, email: str, subject: str, message: str) -> None:
        html = _env.get_template("support_email.html").render(
            name=name, email=email, subject=subject, message=message,
        )
        self.mailer.send(OutgoingEmail(
            to=getattr(self.mailer, "sender", None) or settings.HELP_EMAIL,
            subject="Client query: Inventory Management",
            html=html,
            text=f"Name: {name}\nEmail: {email}\nSubject: {subject}\nMessage: {message}",
            reply_to=email,
        ))
