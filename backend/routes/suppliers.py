# backend/routes/suppliers.py
from fastapi import APIRouter, Depends, HTTPException, status

from schemas import transactions as schemas
from store import get_sheet_id, get_store
from utils.inventory_ops import SUPPLIERS_TAB, append_entry
from utils.record_mapper import map_suppliers

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])


@router.get("")
def list_suppliers(store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    items = map_suppliers(store.get_values(sheet_id, f"{SUPPLIERS_TAB}!A:Z"))
    return {"data": [schemas.SupplierOut.model_validate(i).model_dump(mode="json", by_alias=True) for i in items]}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_supplier(payload: schemas.SupplierCreate, store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    if not payload.supplier and not payload.company_name:
        raise HTTPException(status_code=400, detail="Supplier or company name is required")
    saved = append_entry(store, sheet_id, SUPPLIERS_TAB, payload.model_dump(by_alias=True))
    return {"success": True, "message": f"New {SUPPLIERS_TAB} entry added successfully", "data": saved}
