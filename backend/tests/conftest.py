# backend/tests/conftest.py
import re
from copy import deepcopy

import pytest
from fastapi.testclient import TestClient

from config import settings
from utils.exceptions import EmailError, SheetsError

MASTER_ID = "master-sheet"
DEFAULT_ID = "default-sheet"

INVENTORY_HEADERS = [
    "Sr. no", "Product", "Category", "Unit", "Minimum Quantity", "Maximum Quantity",
    "Reorder Quantity", "Stock", "Price per Unit", "Value",
]
PURCHASE_HEADERS = ["Sr. no", "Product", "Quantity", "Unit", "PO Number", "Supplier", "Date of receiving", "Timestamp"]
SALES_HEADERS = ["Sr. no", "Product", "Quantity", "Unit", "Contact", "Company Name", "Date of Issue", "Timestamp"]
SUPPLIER_HEADERS = ["Supplier", "Company Name"]
CLIENT_HEADERS = ["ID", "Name", "Email", "Phone", "Logo URL", "Sheet ID", "Username", "Password"]

_CELL_RE = re.compile(r"^([A-Z]+)(\d+)$")


def _column_index(letters: str) -> int:
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - 64)
    return index - 1


class FakeStore:
    """In-memory stand-in for GoogleSheetsStore: spreadsheet id -> tab -> rows."""

    def __init__(self):
        self.sheets = {}
        self.failing = {}
        self.updates = []
        self.appends = []
        self.reads = []

    # ---- setup ----
    def add_tab(self, sheet_id, tab, rows):
        self.sheets.setdefault(sheet_id, {})[tab] = [list(r) for r in rows]

    def tab(self, sheet_id, tab):
        return self.sheets[sheet_id][tab]

    def fail(self, sheet_id, message="Requested entity was not found", status_code=404, status="NOT_FOUND"):
        self.failing[sheet_id] = SheetsError(message, status_code, status)

    def _check(self, sheet_id):
        if sheet_id in self.failing:
            raise self.failing[sheet_id]

    # ---- store contract ----
    def get_values(self, sheet_id, range_):
        self._check(sheet_id)
        self.reads.append((sheet_id, range_))
        tab, _, cols = range_.partition("!")
        rows = self.sheets.get(sheet_id, {}).get(tab)
        if not rows:
            return []
        if cols == "1:1":
            return [list(rows[0])]
        if cols == "A:A":
            return [[r[0]] if r else [] for r in rows]
        return deepcopy(rows)

    def append_values(self, sheet_id, range_, rows):
        self._check(sheet_id)
        tab = range_.split("!")[0]
        self.sheets.setdefault(sheet_id, {}).setdefault(tab, []).extend(list(r) for r in rows)
        self.appends.append((sheet_id, range_, rows))

    def update_values(self, sheet_id, range_, rows):
        self._check(sheet_id)
        tab, _, cell = range_.partition("!")
        match = _CELL_RE.match(cell)
        col, row = _column_index(match.group(1)), int(match.group(2)) - 1
        target = self.sheets[sheet_id][tab][row]
        while len(target) <= col:
            target.append("")
        target[col] = rows[0][0]
        self.updates.append((sheet_id, range_, rows))

    def get_tab_id(self, sheet_id, title):
        tabs = list(self.sheets.get(sheet_id, {}))
        return tabs.index(title) if title in tabs else None

    def ensure_tab(self, sheet_id, title, headers):
        tabs = self.sheets.setdefault(sheet_id, {})
        if title in tabs:
            return False
        tabs[title] = [list(headers)]
        return True

    def delete_rows(self, sheet_id, tab_id, row_indices):
        title = list(self.sheets[sheet_id])[tab_id]
        rows = self.sheets[sheet_id][title]
        for index in sorted(set(row_indices), reverse=True):
            del rows[index]
        return len(set(row_indices))


class RecordingMailer:
    sender = "noreply@example.com"

    def __init__(self):
        self.sent = []
        self.failing = set()

    def send(self, email):
        if email.to in self.failing:
            raise EmailError(f"Mailbox unavailable: {email.to}")
        self.sent.append(email)


# ==========================================
#  FIXTURES
# ==========================================
@pytest.fixture
def store():
    fake = FakeStore()
    fake.add_tab(MASTER_ID, "Clients", [
        CLIENT_HEADERS,
        ["c1", "Acme", "acme@example.com", "", "", "sheet-acme", "acme", "acme@123"],
        ["c2", "Smeltech", "ops@smeltech.example", "", "", "sheet-smeltech", "smeltech", "smeltech@123"],
        ["c3", "NoSheet", "nosheet@example.com", "", "", "", "nosheet", "nosheet@123"],
    ])
    for sheet_id in ("sheet-acme", "sheet-smeltech", DEFAULT_ID):
        fake.add_tab(sheet_id, "Inventory", [
            INVENTORY_HEADERS,
            ["1", "Bolt", "Hardware", "PCS", "10", "100", "50", "2", "5", "10"],
            ["2", "Nut", "Hardware", "PCS", "10", "100", "50", "40", "1.5", "60"],
        ])
        fake.add_tab(sheet_id, "Purchase", [PURCHASE_HEADERS])
        fake.add_tab(sheet_id, "Sales", [SALES_HEADERS])
        fake.add_tab(sheet_id, "Suppliers", [SUPPLIER_HEADERS, ["Steel Co", ""]])
    return fake


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "MASTER_SHEET_ID", MASTER_ID)
    monkeypatch.setattr(settings, "GOOGLE_SHEET_ID", DEFAULT_ID)
    monkeypatch.setattr(settings, "SECRET_KEY", "test-secret")
    return settings


@pytest.fixture
def client(store, mailer, configured):
    from main import app
    from store import build_scheduler, get_mailer, get_scheduler, get_store

    clock = build_scheduler(store, mailer)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_scheduler] = lambda: clock
    with TestClient(app) as test_client:
        test_client.clock = clock
        yield test_client
    app.dependency_overrides.clear()
