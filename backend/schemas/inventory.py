# backend/schemas/inventory.py
from typing import List, Optional

from pydantic import Field, field_validator

from schemas.base import CamelModel, SheetNumber


class InventoryItemOut(CamelModel):
    sr_no: SheetNumber
    product: str
    category: str
    unit: str
    minimum_quantity: SheetNumber
    maximum_quantity: SheetNumber
    reorder_quantity: SheetNumber
    stock: SheetNumber
    price_per_unit: SheetNumber
    value: SheetNumber
    timestamp: Optional[str] = None
    status: str
    parse_errors: List[str] = []

    @field_validator("parse_errors", mode="before")
    @classmethod
    def _error_fields(cls, value):
        return [e[0] if isinstance(e, (tuple, list)) else e for e in value]


# Schema for a new Inventory row
class InventoryCreate(CamelModel):
    product: str = Field(min_length=1)
    category: str = "Uncategorized"
    unit: str = "PCS"
    minimum_quantity: float = Field(default=0, ge=0)
    maximum_quantity: float = Field(default=0, ge=0)
    reorder_quantity: float = Field(default=0, ge=0)
    stock: float = 0
    price_per_unit: float = Field(default=0, ge=0)
    # stock * pricePerUnit when omitted
    value: Optional[float] = None
