# backend/routes/purchases.py
from fastapi import APIRouter, Depends, status

from schemas import transactions as schemas
from store import get_sheet_id, get_store
from utils.inventory_ops import PURCHASE_TAB, record_purchase
from utils.record_mapper import map_purchases

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.get("")
def list_purchases(store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    items = map_purchases(store.get_values(sheet_id, f"{PURCHASE_TAB}!A:Z"))
    return {"data": [schemas.PurchaseOut.model_validate(i).model_dump(mode="json", by_alias=True) for i in items]}


# Goods received: new Purchase row, then stock goes up by the quantity
@router.post("", status_code=status.HTTP_201_CREATED)
def add_purchase(payload: schemas.PurchaseCreate, store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    result = record_purchase(store, sheet_id, payload.model_dump(by_alias=True))
    return {"success": True, "message": "Purchase recorded", "data": result["entry"], "stock": result["stock"]}
