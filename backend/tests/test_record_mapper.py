# backend/tests/test_record_mapper.py
import math

import pytest

from utils.record_mapper import fold_header, fold_rows, map_inventory, map_purchases, map_tenants, to_number


@pytest.mark.parametrize("header, expected", [
    ("Minimum Quantity", "minimumQuantity"),
    ("Price per Unit", "pricePerUnit"),
    ("Stock", "stock"),
    ("Sr. no", "sr.No"),
    ("Rack Number/Location of Stock", "rackNumber/locationOfStock"),
])
def test_fold_header(header, expected):
    assert fold_header(header) == expected


@pytest.mark.parametrize("raw, expected", [
    ("12", 12),
    ("1.5", 1.5),
    ("", 0),
    ("  ", 0),
    (20.0, 20),
    (7, 7),
])
def test_to_number(raw, expected):
    value, ok = to_number(raw)
    assert ok
    assert value == expected


def test_to_number_malformed_is_nan():
    value, ok = to_number("twelve")
    assert not ok
    assert math.isnan(value)


def test_map_inventory_title_case_headers():
    grid = [
        ["Sr. no", "Product", "Minimum Quantity", "Maximum Quantity", "Stock", "Price per Unit", "Value"],
        ["4", "Bolt", "10", "100", "2", "5", "10"],
    ]
    item = map_inventory(grid)[0]
    assert item.sr_no == 4
    assert item.product == "Bolt"
    assert item.minimum_quantity == 10
    assert item.maximum_quantity == 100
    assert item.stock == 2
    assert item.price_per_unit == 5
    assert item.status == "low"


def test_map_inventory_camel_case_headers():
    grid = [["product", "stock", "minimumQuantity", "maximumQuantity"], ["Nut", "50", "10", "40"]]
    item = map_inventory(grid)[0]
    assert item.stock == 50
    assert item.status == "excess"


def test_map_inventory_defaults():
    grid = [["Product", "Category", "Unit", "Stock"], [], ["Washer"]]
    first, second = map_inventory(grid)
    assert first.product == "Unknown Product"
    assert first.category == "Uncategorized"
    assert first.unit == "PCS"
    assert first.stock == 0
    # No srNo column: row position
    assert (first.sr_no, second.sr_no) == (1, 2)
    assert second.product == "Washer"


def test_map_inventory_records_malformed_numbers():
    grid = [["Product", "Stock"], ["Bolt", "lots"]]
    item = map_inventory(grid)[0]
    assert math.isnan(item.stock)
    assert item.parse_errors == [("stock", "lots")]


def test_map_purchases_location_synonym():
    grid = [["Product", "Quantity", "Location of Stock", "Date of receiving"], ["Bolt", "3", "R-12", "2026-10-01"]]
    purchase = map_purchases(grid)[0]
    assert purchase.rack_number == "R-12"
    assert purchase.quantity == 3
    assert purchase.event_date == "2026-10-01"


def test_map_tenants():
    grid = [
        ["ID", "Name", "Email", "Phone", "Logo URL", "Sheet ID", "Username", "Password"],
        ["c1", "Acme", "acme@example.com", "", "", "sheet-1", "acme", "secret"],
    ]
    tenant = map_tenants(grid)[0]
    assert tenant.id == "c1"
    assert tenant.sheet_id == "sheet-1"
    assert tenant.notifiable


def test_fold_rows():
    rows = fold_rows([["Product", "Price per Unit"], ["Bolt", "5"], ["Nut"]])
    assert rows == [{"product": "Bolt", "pricePerUnit": "5"}, {"product": "Nut", "pricePerUnit": ""}]


def test_empty_grid():
    assert map_inventory([]) == []
