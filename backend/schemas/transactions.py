# backend/schemas/transactions.py
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel, SheetNumber


class PurchaseOut(CamelModel):
    sr_no: SheetNumber
    product: str
    quantity: SheetNumber
    unit: str
    po_number: str = ""
    supplier: str = ""
    date_of_receiving: str = ""
    rack_number: str = ""
    timestamp: Optional[str] = None


class SaleOut(CamelModel):
    sr_no: SheetNumber
    product: str
    quantity: SheetNumber
    unit: str
    contact: str = ""
    company_name: str = ""
    indent_number: str = ""
    date_of_issue: str = ""
    timestamp: Optional[str] = None


class SupplierOut(CamelModel):
    supplier: str = ""
    company_name: str = ""


# Goods received: appended to Purchase, adds quantity to stock
class PurchaseCreate(CamelModel):
    product: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = "PCS"
    po_number: str = ""
    supplier: str = ""
    date_of_receiving: str = ""
    rack_number: str = ""


# Goods issued: appended to Sales, subtracts quantity from stock
class SaleCreate(CamelModel):
    product: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = "PCS"
    contact: str = ""
    company_name: str = ""
    indent_number: str = ""
    date_of_issue: str = ""


class SupplierCreate(CamelModel):
    supplier: str = ""
    company_name: str = ""
