# backend/models/dashboard.py
from dataclasses import dataclass, field


@dataclass
class ActivityCounts:
    purchases: float = 0
    sales: float = 0


# DashboardMetrics
# Aggregate view of one tenant at one moment; computed on demand, never stored.
@dataclass
class DashboardMetrics:
    today: ActivityCounts = field(default_factory=ActivityCounts)
    this_week: ActivityCounts = field(default_factory=ActivityCounts)
    last_week: ActivityCounts = field(default_factory=ActivityCounts)
    avg_per_day: ActivityCounts = field(default_factory=ActivityCounts)
    new_products_this_week: int = 0
    low_stock_items: int = 0
    excess_stock_items: int = 0
    purchase_change: int = 0
    sales_change: int = 0
    total_products: int = 0
    total_stock_value: float = 0
