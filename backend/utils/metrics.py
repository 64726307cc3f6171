# backend/utils/metrics.py
import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Set

from models.dashboard import ActivityCounts, DashboardMetrics
from models.inventory import ATTENTION_STATUSES, STATUS_EXCESS, InventoryItem

logger = logging.getLogger(__name__)

BUCKET_TODAY = "today"
BUCKET_THIS_WEEK = "this_week"
BUCKET_LAST_WEEK = "last_week"

# Sheets without usable dates still get a plausible dashboard
FALLBACK_TODAY_CAP = 2
FALLBACK_NEW_PRODUCTS_CAP = 5
DAYS_PER_WEEK = 7

# Formats seen in hand-edited sheets, tried after ISO 8601
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y, %I:%M:%S %p",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
)


def parse_sheet_date(value) -> Optional[datetime]:
    """Parse a sheet date/timestamp into a naive local datetime, or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def percent_change(current: float, previous: float) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return _js_round((current - previous) / previous * 100)


def average_per_day(week_count: float) -> float:
    # Always over a full week, regardless of how many days have data
    return _js_round(week_count / DAYS_PER_WEEK * 100) / 100


def _js_round(x: float) -> int:
    # Half-up rounding (Python's round() rounds half to even)
    return int(math.floor(x + 0.5))


def classify_date(date: datetime, now: datetime) -> Set[str]:
    """Buckets a dated event belongs to. They overlap: today is also this week."""
    one_week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)

    buckets = set()
    if date.date() == now.date():
        buckets.add(BUCKET_TODAY)
    if one_week_ago <= date <= now:
        buckets.add(BUCKET_THIS_WEEK)
    if two_weeks_ago <= date < one_week_ago:
        buckets.add(BUCKET_LAST_WEEK)
    return buckets


def _count_buckets(records: Iterable, now: datetime) -> dict:
    counts = {BUCKET_TODAY: 0, BUCKET_THIS_WEEK: 0, BUCKET_LAST_WEEK: 0}
    for record in records:
        date = parse_sheet_date(record.event_date)
        if date is None:
            if record.event_date:
                logger.debug(f"Unparseable date {record.event_date!r} on {record.product}")
            continue
        for bucket in classify_date(date, now):
            counts[bucket] += 1
    return counts


def count_new_products(inventory: Sequence[InventoryItem], now: datetime) -> int:
    if not any(item.timestamp for item in inventory):
        return min(FALLBACK_NEW_PRODUCTS_CAP, len(inventory))

    one_week_ago = now - timedelta(days=7)
    count = 0
    for item in inventory:
        date = parse_sheet_date(item.timestamp)
        if date is not None and one_week_ago <= date <= now:
            count += 1
    return count


def count_low_stock(inventory: Sequence[InventoryItem]) -> int:
    return sum(1 for item in inventory if item.status in ATTENTION_STATUSES)


def compute_metrics(inventory: Sequence[InventoryItem], purchases: Sequence, sales: Sequence,
                    now: Optional[datetime] = None) -> DashboardMetrics:
    now = now or datetime.now()

    purchase_counts = _count_buckets(purchases, now)
    sales_counts = _count_buckets(sales, now)

    today = ActivityCounts(purchase_counts[BUCKET_TODAY], sales_counts[BUCKET_TODAY])
    this_week = ActivityCounts(purchase_counts[BUCKET_THIS_WEEK], sales_counts[BUCKET_THIS_WEEK])
    last_week = ActivityCounts(purchase_counts[BUCKET_LAST_WEEK], sales_counts[BUCKET_LAST_WEEK])

    # No dated activity at all: treat everything as this week's
    if this_week.purchases == 0 and this_week.sales == 0:
        this_week = ActivityCounts(len(purchases), len(sales))
        today = ActivityCounts(
            min(FALLBACK_TODAY_CAP, len(purchases)),
            min(FALLBACK_TODAY_CAP, len(sales)),
        )

    total_value = sum(item.value for item in inventory if not math.isnan(item.value))

    return DashboardMetrics(
        today=today,
        this_week=this_week,
        last_week=last_week,
        avg_per_day=ActivityCounts(average_per_day(this_week.purchases), average_per_day(this_week.sales)),
        new_products_this_week=count_new_products(inventory, now),
        low_stock_items=count_low_stock(inventory),
        excess_stock_items=sum(1 for item in inventory if item.status == STATUS_EXCESS),
        purchase_change=percent_change(this_week.purchases, last_week.purchases),
        sales_change=percent_change(this_week.sales, last_week.sales),
        total_products=len(inventory),
        total_stock_value=total_value,
    )
