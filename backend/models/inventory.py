# backend/models/inventory.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Derived stock levels, never stored in the sheet
STATUS_NEGATIVE = "negative"
STATUS_LOW = "low"
STATUS_NORMAL = "normal"
STATUS_EXCESS = "excess"

ATTENTION_STATUSES = {STATUS_LOW, STATUS_NEGATIVE}


def get_stock_status(stock: float, minimum_quantity: float, maximum_quantity: float) -> str:
    # Boundaries (stock == min, stock == max) count as normal.
    # NaN compares false everywhere and therefore lands on "normal".
    if stock < 0:
        return STATUS_NEGATIVE
    if stock < minimum_quantity:
        return STATUS_LOW
    if stock > maximum_quantity:
        return STATUS_EXCESS
    return STATUS_NORMAL


# InventoryItem
# One row of a tenant's "Inventory" tab. `value` is stored independently of
# stock * price_per_unit and is not recomputed on read.
@dataclass
class InventoryItem:
    sr_no: float
    product: str
    category: str = "Uncategorized"
    unit: str = "PCS"
    minimum_quantity: float = 0
    maximum_quantity: float = 0
    reorder_quantity: float = 0
    stock: float = 0
    price_per_unit: float = 0
    value: float = 0
    timestamp: Optional[str] = None
    parse_errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def status(self) -> str:
        return get_stock_status(self.stock, self.minimum_quantity, self.maximum_quantity)

    @property
    def needs_attention(self) -> bool:
        return self.status in ATTENTION_STATUSES
