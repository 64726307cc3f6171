# backend/utils/record_mapper.py
"""Decoding of raw sheet grids (header row + data rows) into typed records.

Sheets are edited by hand, so the same logical column shows up under
different header texts ("stock", "Stock", "Price per Unit"...). Every record
type declares a table of FieldSpec entries: the attribute it fills, the
header keys accepted for it (camelCase key first, then literal synonyms) and
how to coerce the cell. One generic decoder walks that table.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from models.inventory import InventoryItem
from models.tenant import Tenant
from models.transactions import PurchaseItem, SalesItem, Supplier

logger = logging.getLogger(__name__)

TEXT = "text"
NUMBER = "number"
OPTIONAL = "optional"

_FOLD_RE = re.compile(r"\s(.)")


def fold_header(header: str) -> str:
    """Lowercase, then drop each whitespace char and uppercase the char after it.

    "Minimum Quantity" -> "minimumQuantity", "Sr. no" -> "sr.No".
    """
    return _FOLD_RE.sub(lambda m: m.group(1).upper(), str(header).lower())


def _row_position(index: int) -> int:
    return index + 1


@dataclass(frozen=True)
class FieldSpec:
    attr: str
    keys: Tuple[str, ...]
    kind: str = TEXT
    default: Any = ""
    default_factory: Optional[Callable[[int], Any]] = None

    @property
    def entry_key(self) -> str:
        # Key used by JSON payloads for this field
        return self.keys[0]

    def default_for(self, index: int) -> Any:
        if self.default_factory is not None:
            return self.default_factory(index)
        return self.default


def _sr_no() -> FieldSpec:
    return FieldSpec("sr_no", ("srNo", "Sr. no", "Sr. No", "Sr no"), NUMBER, default_factory=_row_position)


def _timestamp() -> FieldSpec:
    return FieldSpec("timestamp", ("timestamp", "Timestamp"), OPTIONAL, None)


# ==========================================
#  FIELD TABLES
# ==========================================
INVENTORY_FIELDS: Tuple[FieldSpec, ...] = (
    _sr_no(),
    FieldSpec("product", ("product", "Product"), TEXT, "Unknown Product"),
    FieldSpec("category", ("category", "Category"), TEXT, "Uncategorized"),
    FieldSpec("unit", ("unit", "Unit"), TEXT, "PCS"),
    FieldSpec("minimum_quantity", ("minimumQuantity", "Minimum Quantity"), NUMBER, 0),
    FieldSpec("maximum_quantity", ("maximumQuantity", "Maximum Quantity"), NUMBER, 0),
    FieldSpec("reorder_quantity", ("reorderQuantity", "Reorder Quantity"), NUMBER, 0),
    FieldSpec("stock", ("stock", "Stock"), NUMBER, 0),
    FieldSpec("price_per_unit", ("pricePerUnit", "Price per Unit", "Price Per Unit"), NUMBER, 0),
    FieldSpec("value", ("value", "Value"), NUMBER, 0),
    _timestamp(),
)

PURCHASE_FIELDS: Tuple[FieldSpec, ...] = (
    _sr_no(),
    FieldSpec("product", ("product", "Product"), TEXT, "Unknown Product"),
    FieldSpec("quantity", ("quantity", "Quantity"), NUMBER, 0),
    FieldSpec("unit", ("unit", "Unit"), TEXT, "PCS"),
    FieldSpec("po_number", ("poNumber", "PO Number")),
    FieldSpec("supplier", ("supplier", "Supplier")),
    FieldSpec("date_of_receiving", ("dateOfReceiving", "Date of receiving", "Date of Receiving")),
    FieldSpec("rack_number", ("rackNumber", "Rack Number", "Rack Number/Location of Stock", "Location of Stock")),
    _timestamp(),
)

SALES_FIELDS: Tuple[FieldSpec, ...] = (
    _sr_no(),
    FieldSpec("product", ("product", "Product"), TEXT, "Unknown Product"),
    FieldSpec("quantity", ("quantity", "Quantity"), NUMBER, 0),
    FieldSpec("unit", ("unit", "Unit"), TEXT, "PCS"),
    FieldSpec("contact", ("contact", "Contact")),
    FieldSpec("company_name", ("companyName", "Company Name")),
    FieldSpec("indent_number", ("indentNumber", "Indent Number")),
    FieldSpec("date_of_issue", ("dateOfIssue", "Date of Issue", "Date of issue")),
    _timestamp(),
)

SUPPLIER_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("supplier", ("supplier", "Supplier")),
    FieldSpec("company_name", ("companyName", "Company Name")),
)

TENANT_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("id", ("id", "ID")),
    FieldSpec("name", ("name", "Name")),
    FieldSpec("email", ("email", "Email")),
    FieldSpec("phone", ("phone", "Phone")),
    FieldSpec("logo_url", ("logoUrl", "Logo URL")),
    FieldSpec("sheet_id", ("sheetId", "Sheet ID")),
    FieldSpec("username", ("username", "Username")),
    FieldSpec("password", ("password", "Password")),
)


# ==========================================
#  DECODING
# ==========================================
def to_number(raw: Any) -> Tuple[float, bool]:
    """Coerce a cell to a number. Returns (value, ok); malformed text gives (nan, False)."""
    if isinstance(raw, bool):
        return int(raw), True
    if isinstance(raw, int):
        return raw, True
    if isinstance(raw, float):
        return (int(raw) if raw.is_integer() else raw), True
    text = str(raw).strip()
    if not text:
        return 0, True
    try:
        number = float(text)
    except ValueError:
        return math.nan, False
    if math.isfinite(number) and number.is_integer():
        return int(number), True
    return number, True


def row_lookup(headers: Sequence[str], row: Sequence[Any]) -> Dict[str, Any]:
    """Map both the verbatim and the folded form of each header to the row's cell."""
    lookup: Dict[str, Any] = {}
    for i, header in enumerate(headers):
        value = row[i] if i < len(row) else ""
        lookup.setdefault(header, value)
        lookup.setdefault(fold_header(header), value)
    return lookup


def _first_present(lookup: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = lookup.get(key)
        if value is not None and value != "":
            return value
    return None


def decode_row(lookup: Dict[str, Any], fields: Sequence[FieldSpec], index: int) -> Tuple[Dict[str, Any], List[Tuple[str, str]]]:
    values: Dict[str, Any] = {}
    errors: List[Tuple[str, str]] = []
    for spec in fields:
        raw = _first_present(lookup, spec.keys)
        if raw is None:
            values[spec.attr] = spec.default_for(index)
        elif spec.kind == NUMBER:
            number, ok = to_number(raw)
            if not ok:
                errors.append((spec.entry_key, str(raw)))
            values[spec.attr] = number
        else:
            values[spec.attr] = str(raw)
    return values, errors


def decode_rows(headers: Sequence[str], rows: Sequence[Sequence[Any]],
                fields: Sequence[FieldSpec], record_cls: Type) -> List[Any]:
    records = []
    for index, row in enumerate(rows):
        values, errors = decode_row(row_lookup(headers, row), fields, index)
        if errors:
            logger.warning(f"{record_cls.__name__} row {index + 2}: malformed values {errors}")
        records.append(record_cls(parse_errors=errors, **values))
    return records


def split_grid(grid: Sequence[Sequence[Any]]) -> Tuple[List[str], List[Sequence[Any]]]:
    if not grid:
        return [], []
    return [str(h) for h in grid[0]], list(grid[1:])


def map_inventory(grid) -> List[InventoryItem]:
    headers, rows = split_grid(grid)
    return decode_rows(headers, rows, INVENTORY_FIELDS, InventoryItem)


def map_purchases(grid) -> List[PurchaseItem]:
    headers, rows = split_grid(grid)
    return decode_rows(headers, rows, PURCHASE_FIELDS, PurchaseItem)


def map_sales(grid) -> List[SalesItem]:
    headers, rows = split_grid(grid)
    return decode_rows(headers, rows, SALES_FIELDS, SalesItem)


def map_suppliers(grid) -> List[Supplier]:
    headers, rows = split_grid(grid)
    return decode_rows(headers, rows, SUPPLIER_FIELDS, Supplier)


def map_tenants(grid) -> List[Tenant]:
    headers, rows = split_grid(grid)
    return decode_rows(headers, rows, TENANT_FIELDS, Tenant)


def fold_rows(grid) -> List[Dict[str, Any]]:
    """Rows as dicts keyed by folded header, the shape the list endpoints return."""
    headers, rows = split_grid(grid)
    result = []
    for row in rows:
        result.append({fold_header(h): (row[i] if i < len(row) else "") for i, h in enumerate(headers)})
    return result


# ==========================================
#  ENCODING (entry dict -> row in header order)
# ==========================================
def field_for_header(header: str, fields: Sequence[FieldSpec]) -> Optional[FieldSpec]:
    folded = fold_header(header)
    lowered = str(header).strip().lower()
    for spec in fields:
        for key in spec.keys:
            if key == header or key == folded or key.lower() == lowered:
                return spec
    return None


def entry_value(entry: Dict[str, Any], header: str, fields: Sequence[FieldSpec]) -> Any:
    if header in entry:
        return entry[header]
    spec = field_for_header(header, fields)
    if spec is not None:
        for key in spec.keys:
            if key in entry:
                return entry[key]
        if spec.attr in entry:
            return entry[spec.attr]
    return ""
