# backend/schemas/dashboard.py
from schemas.base import CamelModel


class ActivityCountsOut(CamelModel):
    purchases: float
    sales: float


class DashboardOut(CamelModel):
    today: ActivityCountsOut
    this_week: ActivityCountsOut
    last_week: ActivityCountsOut
    avg_per_day: ActivityCountsOut
    new_products_this_week: int
    low_stock_items: int
    excess_stock_items: int
    purchase_change: int
    sales_change: int
    total_products: int
    total_stock_value: float
