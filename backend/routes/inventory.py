# backend/routes/inventory.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from schemas import inventory as schemas
from store import get_sheet_id, get_store
from utils.inventory_ops import INVENTORY_TAB, append_entry
from utils.pdf import generate_inventory_pdf
from utils.record_mapper import map_inventory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])

INVENTORY_RANGE = f"{INVENTORY_TAB}!A:Z"


# ---- HELPERS ----
def _load_items(store, sheet_id: str):
    return map_inventory(store.get_values(sheet_id, INVENTORY_RANGE))


def _page(items) -> dict:
    data = [schemas.InventoryItemOut.model_validate(i).model_dump(mode="json", by_alias=True) for i in items]
    return {"data": data, "total": len(data)}


# ==========================================
#  READ
# ==========================================
@router.get("")
def list_inventory(
    status_filter: Optional[str] = Query(None, alias="status"),
    store=Depends(get_store),
    sheet_id: str = Depends(get_sheet_id),
):
    items = _load_items(store, sheet_id)
    if status_filter:
        items = [i for i in items if i.status == status_filter.lower()]
    return _page(items)


@router.get("/low-stock")
def low_stock(store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    items = [i for i in _load_items(store, sheet_id) if i.needs_attention]
    return _page(items)


@router.get("/export/pdf")
def export_pdf(
    client_name: Optional[str] = Query(None, alias="clientName"),
    store=Depends(get_store),
    sheet_id: str = Depends(get_sheet_id),
):
    items = _load_items(store, sheet_id)
    pdf_bytes = generate_inventory_pdf(items, client_name)
    logger.info(f"Inventory PDF generated ({len(items)} items)")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="inventory.pdf"'},
    )


# ==========================================
#  CREATE
# ==========================================
@router.post("", status_code=status.HTTP_201_CREATED)
def add_product(payload: schemas.InventoryCreate, store=Depends(get_store), sheet_id: str = Depends(get_sheet_id)):
    entry = payload.model_dump(by_alias=True)
    if entry["value"] is None:
        entry["value"] = payload.stock * payload.price_per_unit
    saved = append_entry(store, sheet_id, INVENTORY_TAB, entry)
    return {"success": True, "message": f"New {INVENTORY_TAB} entry added successfully", "data": saved}
