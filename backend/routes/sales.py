# backend/routes/sales.py
from fastapi import APIRouter, Depends, status

from schemas import transactions as schemas
from store import get_sheet_id, get_store
from utils.inventory_ops import SALES_TAB, record_sale
from utils.record_mapper import map_sales

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("")
def list_sales(store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    items = map_sales(store.get_values(sheet_id, f"{SALES_TAB}!A:Z"))
    return {"data": [schemas.SaleOut.model_validate(i).model_dump(mode="json", by_alias=True) for i in items]}


# Goods issued: new Sales row, then stock goes down (may end up negative)
@router.post("", status_code=status.HTTP_201_CREATED)
def add_sale(payload: schemas.SaleCreate, store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    result = record_sale(store, sheet_id, payload.model_dump(by_alias=True))
    return {"success": True, "message": "Sale recorded", "data": result["entry"], "stock": result["stock"]}
