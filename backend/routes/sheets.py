# backend/routes/sheets.py
# Generic tab access used by the data-entry UI: any tab by name, rows keyed by
# folded header.
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from schemas import sheets as schemas
from store import get_directory, get_sheet_id, get_store, resolve_request_sheet
from utils.inventory_ops import append_entry, delete_products, update_product_fields, update_product_stock
from utils.record_mapper import fold_rows
from utils.tenants import TenantDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sheets", tags=["Sheets"])


@router.get("")
def read_sheet(
    sheet: str = Query(..., min_length=1),
    store=Depends(get_store),
    sheet_id: str = Depends(get_sheet_id),
):
    grid = store.get_values(sheet_id, f"{sheet}!A:Z")
    if not grid:
        raise HTTPException(status_code=404, detail="No data found")
    data = fold_rows(grid)
    logger.info(f"Fetched {len(data)} rows from {sheet} sheet")
    return {"data": data}


@router.post("")
def add_entry(
    payload: schemas.SheetEntryCreate,
    request: Request,
    store=Depends(get_store),
    directory: TenantDirectory = Depends(get_directory),
):
    sheet_id = resolve_request_sheet(request, directory, payload.client_id)
    saved = append_entry(store, sheet_id, payload.sheet_name, payload.entry)
    return {"success": True, "message": f"New {payload.sheet_name} entry added successfully", "data": saved}


# Overwrite stock and value of one inventory product
@router.put("")
def update_stock(
    payload: schemas.StockUpdateRequest,
    request: Request,
    store=Depends(get_store),
    directory: TenantDirectory = Depends(get_directory),
):
    sheet_id = resolve_request_sheet(request, directory, payload.client_id)
    update_product_stock(store, sheet_id, payload.product, payload.new_stock, payload.new_value)
    return {"success": True, "message": "Inventory updated successfully"}


@router.put("/update-product")
def update_product(
    payload: schemas.UpdateProductRequest,
    request: Request,
    store=Depends(get_store),
    directory: TenantDirectory = Depends(get_directory),
):
    if not payload.updated_data:
        raise HTTPException(status_code=400, detail="Invalid request. Product name and updated data are required.")
    sheet_id = resolve_request_sheet(request, directory, payload.client_id)
    written = update_product_fields(store, sheet_id, payload.product, payload.updated_data)
    return {"success": True, "message": "Product updated successfully", "updated": written}


@router.post("/delete")
def delete_rows(
    payload: schemas.DeleteRequest,
    request: Request,
    store=Depends(get_store),
    directory: TenantDirectory = Depends(get_directory),
):
    if not payload.items:
        raise HTTPException(status_code=400, detail="Invalid request. sheetName and items array are required.")
    sheet_id = resolve_request_sheet(request, directory, payload.client_id)
    deleted = delete_products(store, sheet_id, payload.sheet_name, payload.items)
    if deleted == 0:
        raise HTTPException(status_code=404, detail="No matching rows found to delete")
    return {"success": True, "message": f"Successfully deleted {deleted} rows from {payload.sheet_name}"}
