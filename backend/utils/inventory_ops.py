# backend/utils/inventory_ops.py
# Writes against a tenant spreadsheet: appending entries, moving stock,
# deleting products. Nothing here is transactional; a purchase or sale is an
# append followed by separate stock/value cell updates.
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Sequence

from models.inventory import InventoryItem
from utils.exceptions import MalformedCellError, SheetStructureError
from utils.record_mapper import (
    INVENTORY_FIELDS,
    PURCHASE_FIELDS,
    SALES_FIELDS,
    SUPPLIER_FIELDS,
    entry_value,
    field_for_header,
    map_inventory,
    map_suppliers,
    to_number,
)
from utils.sheets_client import a1

logger = logging.getLogger(__name__)

INVENTORY_TAB = "Inventory"
PURCHASE_TAB = "Purchase"
SALES_TAB = "Sales"
SUPPLIERS_TAB = "Suppliers"

FIELDS_BY_TAB = {
    INVENTORY_TAB: INVENTORY_FIELDS,
    PURCHASE_TAB: PURCHASE_FIELDS,
    SALES_TAB: SALES_FIELDS,
    SUPPLIERS_TAB: SUPPLIER_FIELDS,
}

SR_NO_HEADERS = {"srno", "sr. no", "sr no", "sr.no"}
# Fields a stock movement computes from
STOCK_INPUTS = ("stock", "pricePerUnit")


@dataclass
class StockAdjustment:
    product: str
    row_number: int
    old_stock: float
    new_stock: float
    new_value: float

    def to_dict(self) -> dict:
        return {
            "product": self.product,
            "oldStock": self.old_stock,
            "newStock": self.new_stock,
            "newValue": self.new_value,
        }


def _is_sr_no_header(header: str) -> bool:
    return str(header).strip().lower() in SR_NO_HEADERS


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ==========================================
#  APPEND
# ==========================================
def next_sr_no(store, sheet_id: str, sheet_name: str) -> int:
    column = store.get_values(sheet_id, f"{sheet_name}!A:A")
    if len(column) <= 1 or not column[0] or not _is_sr_no_header(column[0][0]):
        return 1
    numbers = []
    for row in column[1:]:
        if not row:
            continue
        number, ok = to_number(row[0])
        if ok:
            numbers.append(number)
    return int(max(numbers, default=0)) + 1


def build_row(headers: Sequence[str], entry: Dict[str, Any], sheet_name: str, sr_no: int) -> List[Any]:
    fields = FIELDS_BY_TAB.get(sheet_name, ())
    row = []
    for header in headers:
        if _is_sr_no_header(header):
            row.append(sr_no)
        elif str(header).strip().lower() == "timestamp":
            row.append(_now_iso())
        else:
            value = entry_value(entry, header, fields)
            row.append("" if value is None else value)
    return row


def append_entry(store, sheet_id: str, sheet_name: str, entry: Dict[str, Any]) -> Dict[str, Any]:
    """Append one entry in the tab's header order. Returns the entry with its srNo."""
    sr_no = next_sr_no(store, sheet_id, sheet_name)
    header_rows = store.get_values(sheet_id, f"{sheet_name}!1:1")
    headers = header_rows[0] if header_rows else []
    if not headers:
        raise SheetStructureError(f"No headers found in sheet {sheet_name}")

    row = build_row(headers, entry, sheet_name, sr_no)
    store.append_values(sheet_id, f"{sheet_name}!A:Z", [row])
    logger.info(f"New {sheet_name} entry added (srNo {sr_no})")
    return {**entry, "srNo": sr_no}


# ==========================================
#  STOCK
# ==========================================
def _header_index(headers: Sequence[str], *names: str) -> int:
    for name in names:
        if name in headers:
            return list(headers).index(name)
    return -1


def find_product_row(grid: Sequence[Sequence[Any]], product: str) -> int:
    """1-based sheet row number of the first row whose product matches, or -1."""
    if not grid:
        return -1
    col = _header_index(grid[0], "product", "Product")
    if col == -1:
        raise SheetStructureError("Product column not found")
    for i, row in enumerate(grid[1:], start=2):
        if col < len(row) and row[col] == product:
            return i
    return -1


def update_product_stock(store, sheet_id: str, product: str, new_stock: float, new_value: float) -> int:
    """Write stock and value cells for a product. Two independent cell updates."""
    grid = store.get_values(sheet_id, f"{INVENTORY_TAB}!A:Z")
    if not grid:
        raise SheetStructureError("No inventory data found")
    headers = grid[0]

    row_number = find_product_row(grid, product)
    if row_number == -1:
        raise SheetStructureError(f"Product '{product}' not found in inventory")

    stock_col = _header_index(headers, "stock", "Stock")
    value_col = _header_index(headers, "value", "Value")
    if stock_col == -1:
        raise SheetStructureError("Stock column not found")
    if value_col == -1:
        raise SheetStructureError("Value column not found")

    store.update_values(sheet_id, a1(INVENTORY_TAB, stock_col, row_number), [[new_stock]])
    store.update_values(sheet_id, a1(INVENTORY_TAB, value_col, row_number), [[new_value]])
    logger.info(f"Inventory updated for {product}: stock={new_stock}, value={new_value}")
    return row_number


def update_product_fields(store, sheet_id: str, product: str, updated: Dict[str, Any]) -> List[str]:
    """Write arbitrary inventory fields of one product. Returns the fields written.

    Field names may be JSON keys ("minimumQuantity") or header texts; fields
    with no matching column are skipped with a warning.
    """
    grid = store.get_values(sheet_id, f"{INVENTORY_TAB}!A:Z")
    if not grid:
        raise SheetStructureError("No inventory data found")
    headers = grid[0]

    row_number = find_product_row(grid, product)
    if row_number == -1:
        raise SheetStructureError("Product not found")

    written = []
    for field_name, value in updated.items():
        col = _header_index(headers, field_name)
        if col == -1:
            spec = field_for_header(field_name, INVENTORY_FIELDS)
            if spec is not None:
                col = next((i for i, h in enumerate(headers) if field_for_header(h, INVENTORY_FIELDS) is spec), -1)
        if col == -1:
            logger.warning(f'Column for field "{field_name}" not found in headers')
            continue
        store.update_values(sheet_id, a1(INVENTORY_TAB, col, row_number), [[value]])
        written.append(field_name)

    logger.info(f"Product {product} updated: {written}")
    return written



def stock_item(store, sheet_id: str, product: str) -> InventoryItem:
    """The inventory record a stock movement would rewrite, checked for numeric stock and price."""
    items = map_inventory(store.get_values(sheet_id, f"{INVENTORY_TAB}!A:Z"))
    item = next((i for i in items if i.product == product), None)
    if item is None:
        raise SheetStructureError(f"Product '{product}' not found in inventory")
    bad = [name for name, _ in item.parse_errors if name in STOCK_INPUTS]
    if bad:
        raise MalformedCellError(product, bad)
    return item


def adjust_stock(store, sheet_id: str, product: str, delta: float) -> StockAdjustment:
    """Move a product's stock by delta. Negative stock is allowed (oversold)."""
    item = stock_item(store, sheet_id, product)
    old_stock = item.stock
    new_stock = old_stock + delta
    new_value = new_stock * item.price_per_unit

    row_number = update_product_stock(store, sheet_id, product, new_stock, new_value)
    return StockAdjustment(product, row_number, old_stock, new_stock, new_value)


# ==========================================
#  SUPPLIERS
# ==========================================
def ensure_supplier(store, sheet_id: str, supplier: str = "", company_name: str = "") -> bool:
    """Register a supplier (purchase side) or company (sales side) once."""
    if not supplier and not company_name:
        return False
    grid = store.get_values(sheet_id, f"{SUPPLIERS_TAB}!A:Z")
    if not grid:
        return False
    known = map_suppliers(grid)
    if supplier and any(s.supplier == supplier for s in known):
        return False
    if company_name and any(s.company_name == company_name for s in known):
        return False
    append_entry(store, sheet_id, SUPPLIERS_TAB, {"supplier": supplier, "companyName": company_name})
    return True


# ==========================================
#  PURCHASE / SALE
# ==========================================
def _quantity(entry: Dict[str, Any]) -> float:
    number, ok = to_number(entry.get("quantity") or 0)
    if not ok:
        raise ValueError(f"Invalid quantity: {entry.get('quantity')!r}")
    return number


# Quantity and the inventory row are checked before the transaction row is appended
def record_purchase(store, sheet_id: str, entry: Dict[str, Any]) -> Dict[str, Any]:
    quantity = _quantity(entry)
    stock_item(store, sheet_id, entry["product"])
    saved = append_entry(store, sheet_id, PURCHASE_TAB, entry)
    adjustment = adjust_stock(store, sheet_id, entry["product"], quantity)
    ensure_supplier(store, sheet_id, supplier=entry.get("supplier") or "")
    return {"entry": saved, "stock": adjustment.to_dict()}


def record_sale(store, sheet_id: str, entry: Dict[str, Any]) -> Dict[str, Any]:
    quantity = _quantity(entry)
    stock_item(store, sheet_id, entry["product"])
    saved = append_entry(store, sheet_id, SALES_TAB, entry)
    adjustment = adjust_stock(store, sheet_id, entry["product"], -quantity)
    ensure_supplier(store, sheet_id, company_name=entry.get("companyName") or "")
    return {"entry": saved, "stock": adjustment.to_dict()}


# ==========================================
#  DELETE
# ==========================================
def delete_products(store, sheet_id: str, sheet_name: str, products: Iterable[str]) -> int:
    """Delete every row of a tab whose product is one of `products`."""
    wanted = set(products)
    grid = store.get_values(sheet_id, f"{sheet_name}!A:Z")
    if not grid or not wanted:
        return 0
    col = _header_index(grid[0], "product", "Product")
    if col == -1:
        raise SheetStructureError("Could not find product column in the sheet")

    # 0-based grid indices double as API row indices (header is index 0)
    indices = [i for i, row in enumerate(grid) if i > 0 and col < len(row) and row[col] in wanted]
    if not indices:
        return 0

    tab_id = store.get_tab_id(sheet_id, sheet_name)
    if tab_id is None:
        raise SheetStructureError(f"Sheet {sheet_name} not found")
    deleted = store.delete_rows(sheet_id, tab_id, indices)
    logger.info(f"Deleted {deleted} rows from {sheet_name}")
    return deleted
