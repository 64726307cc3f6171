# backend/schemas/sheets.py
from typing import Any, Dict, List, Optional

from pydantic import Field

from schemas.base import CamelModel


# Raw row append to any tab; keys are matched against the tab's headers
class SheetEntryCreate(CamelModel):
    sheet_name: str = Field(min_length=1)
    entry: Dict[str, Any]
    client_id: Optional[str] = None


class StockUpdateRequest(CamelModel):
    product: str = Field(min_length=1)
    new_stock: float
    new_value: float
    client_id: Optional[str] = None


class UpdateProductRequest(CamelModel):
    product: str = Field(min_length=1)
    updated_data: Dict[str, Any]
    client_id: Optional[str] = None


class DeleteRequest(CamelModel):
    sheet_name: str = Field(min_length=1)
    items: List[str]
    client_id: Optional[str] = None
