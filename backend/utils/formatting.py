# backend/utils/formatting.py
# Indian-locale (en-IN) number, currency and date formatting for emails and PDFs.
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

IST = timezone(timedelta(hours=5, minutes=30), "IST")


def group_indian(integer_part: str) -> str:
    # 1234567 -> 12,34,567 (last three digits, then pairs)
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_number(value: float, max_decimals: int = 3, min_decimals: int = 0) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "NaN"
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{max_decimals}f}"
    integer_part, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) < min_decimals:
        fraction = fraction.ljust(min_decimals, "0")
    result = group_indian(integer_part)
    if fraction:
        result = f"{result}.{fraction}"
    return sign + result


def format_inr(value: float) -> str:
    """12345.5 -> ₹12,345.50"""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "₹NaN"
    text = format_number(value, max_decimals=2, min_decimals=2)
    if text.startswith("-"):
        return "-₹" + text[1:]
    return "₹" + text


def format_quantity(value: float) -> str:
    return format_number(value)


def format_long_date(moment: Optional[datetime] = None) -> str:
    """Monday, 19 October 2026"""
    moment = moment or datetime.now()
    return f"{moment.strftime('%A')}, {moment.day} {moment.strftime('%B %Y')}"


def format_ist_timestamp(moment: Optional[datetime] = None) -> str:
    """19/10/2026, 6:00:00 pm (Asia/Kolkata wall clock)"""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    local = moment.astimezone(IST)
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{local.strftime('%d/%m/%Y')}, {hour}:{local.strftime('%M:%S')} {suffix}"
