# backend/tests/test_routes.py
from conftest import DEFAULT_ID
from config import settings
from utils.tokenJWT import ROLE_ADMIN, ROLE_CLIENT, create_access_token


def _auth(role=ROLE_ADMIN, client_id=None):
    token = create_access_token({"sub": "tester", "role": role, "client_id": client_id})
    return {"Authorization": f"Bearer {token}"}


# ==========================================
#  AUTH / CLIENTS
# ==========================================
def test_admin_login(client):
    res = client.post("/login", json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD})
    assert res.status_code == 200
    assert res.json()["role"] == ROLE_ADMIN

    me = client.get("/me", headers={"Authorization": f"Bearer {res.json()['access_token']}"})
    assert me.json()["role"] == ROLE_ADMIN


def test_client_login_sets_cookie(client):
    res = client.post("/login", json={"username": "acme", "password": "acme@123"})
    assert res.status_code == 200
    assert res.json()["client_id"] == "c1"
    assert res.cookies.get("clientId") == "c1"


def test_bad_login(client):
    res = client.post("/login", json={"username": "acme", "password": "nope"})
    assert res.status_code == 401


def test_clients_require_admin(client):
    assert client.get("/clients").status_code in (401, 403)
    assert client.get("/clients", headers=_auth(ROLE_CLIENT, "c1")).status_code == 403

    res = client.get("/clients", headers=_auth())
    data = res.json()["data"]
    assert [c["id"] for c in data] == ["c1", "c2", "c3"]
    assert data[0]["sheetId"] == "sheet-acme"
    assert "password" not in data[0]


def test_add_client(client, store):
    res = client.post("/clients", headers=_auth(), json={"name": "Blue Gear", "email": "blue@example.com"})
    assert res.status_code == 201
    created = res.json()["client"]
    assert created["username"] == "bluegear"
    assert created["password"] == "bluegear@123"


def test_client_reads_only_itself(client):
    assert client.get("/clients/c1", headers=_auth(ROLE_CLIENT, "c1")).json()["name"] == "Acme"
    assert client.get("/clients/c2", headers=_auth(ROLE_CLIENT, "c1")).status_code == 403
    assert client.get("/clients/zz", headers=_auth()).status_code == 404


# ==========================================
#  INVENTORY / TRANSACTIONS
# ==========================================
def test_inventory_for_client(client):
    res = client.get("/inventory", params={"clientId": "c1"})
    assert res.status_code == 200
    items = res.json()["data"]
    assert [i["product"] for i in items] == ["Bolt", "Nut"]
    assert items[0]["status"] == "low"
    assert items[0]["pricePerUnit"] == 5


def test_inventory_cookie_and_default(client, store):
    store.add_tab("sheet-smeltech", "Inventory", [["Product", "Stock"], ["Ingot", "4"]])
    res = client.get("/inventory", headers={"Cookie": "clientId=c2"})
    assert [i["product"] for i in res.json()["data"]] == ["Ingot"]

    store.add_tab(DEFAULT_ID, "Inventory", [["Product", "Stock"], ["Default Item", "1"]])
    res = client.get("/inventory")
    assert [i["product"] for i in res.json()["data"]] == ["Default Item"]


def test_no_sheet_available(client, monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_SHEET_ID", "")
    res = client.get("/inventory")
    assert res.status_code == 400
    assert res.json()["detail"] == "No sheet ID available. Please select a client or check configuration."


def test_low_stock_and_pdf(client):
    res = client.get("/inventory/low-stock", params={"clientId": "c1"})
    assert res.json()["total"] == 1

    pdf = client.get("/inventory/export/pdf", params={"clientId": "c1", "clientName": "Acme"})
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


def test_add_inventory_item(client, store):
    res = client.post("/inventory", params={"clientId": "c1"},
                      json={"product": "Washer", "stock": 10, "pricePerUnit": 2})
    assert res.status_code == 201
    assert res.json()["data"]["srNo"] == 3
    assert store.tab("sheet-acme", "Inventory")[-1][1] == "Washer"
    assert store.tab("sheet-acme", "Inventory")[-1][9] == 20


def test_purchase_and_sale(client):
    res = client.post("/purchases", params={"clientId": "c1"}, json={"product": "Bolt", "quantity": 20})
    assert res.status_code == 201
    assert res.json()["stock"]["newStock"] == 22

    res = client.post("/sales", params={"clientId": "c1"}, json={"product": "Bolt", "quantity": 30})
    assert res.json()["stock"]["newStock"] == -8

    assert len(client.get("/purchases", params={"clientId": "c1"}).json()["data"]) == 1
    assert client.get("/sales", params={"clientId": "c1"}).json()["data"][0]["quantity"] == 30


def test_sale_of_unknown_product(client, store):
    res = client.post("/sales", params={"clientId": "c1"}, json={"product": "Gizmo", "quantity": 1})
    assert res.status_code == 404
    assert len(store.tab("sheet-acme", "Sales")) == 1


def test_malformed_cells_listed_as_null(client, store):
    store.tab("sheet-acme", "Inventory")[1][7] = "abc"
    store.tab("sheet-acme", "Purchase").append(["1", "Bolt", "twenty", "PCS", "PO-9", "Steel Co", "", ""])
    store.tab("sheet-acme", "Sales").append(["1", "Nut", "lots", "PCS", "", "NewCo", "", ""])

    res = client.get("/inventory", params={"clientId": "c1"})
    assert res.status_code == 200
    bolt, nut = res.json()["data"]
    assert bolt["stock"] is None
    assert bolt["parseErrors"] == ["stock"]
    assert nut["stock"] == 40 and nut["parseErrors"] == []

    purchases = client.get("/purchases", params={"clientId": "c1"}).json()["data"]
    assert purchases[0]["quantity"] is None
    assert purchases[0]["poNumber"] == "PO-9"
    sales = client.get("/sales", params={"clientId": "c1"}).json()["data"]
    assert sales[0]["quantity"] is None


def test_purchase_against_malformed_stock(client, store):
    store.tab("sheet-acme", "Inventory")[1][7] = "abc"
    res = client.post("/purchases", params={"clientId": "c1"}, json={"product": "Bolt", "quantity": 5})
    assert res.status_code == 422
    assert "stock" in res.json()["detail"]
    assert len(store.tab("sheet-acme", "Purchase")) == 1


def test_invalid_quantity(client):
    res = client.post("/purchases", params={"clientId": "c1"}, json={"product": "Bolt", "quantity": 0})
    assert res.status_code == 422


def test_suppliers(client):
    res = client.post("/suppliers", params={"clientId": "c1"}, json={"supplier": "Iron Works"})
    assert res.status_code == 201
    names = [s["supplier"] for s in client.get("/suppliers", params={"clientId": "c1"}).json()["data"]]
    assert names == ["Steel Co", "Iron Works"]
    assert client.post("/suppliers", params={"clientId": "c1"}, json={}).status_code == 400


def test_permission_denied_is_403(client, store):
    store.fail("sheet-acme", "The caller does not have permission", 403, "PERMISSION_DENIED")
    res = client.get("/inventory", params={"clientId": "c1"})
    assert res.status_code == 403
    assert "service account has access" in res.json()["detail"]


def test_sheets_error_is_500(client, store):
    store.fail("sheet-acme", "Backend Error", 503, "UNAVAILABLE")
    assert client.get("/inventory", params={"clientId": "c1"}).status_code == 500


# ==========================================
#  SHEETS
# ==========================================
def test_read_sheet(client):
    res = client.get("/sheets", params={"sheet": "Inventory", "clientId": "c1"})
    first = res.json()["data"][0]
    assert first["product"] == "Bolt"
    assert first["pricePerUnit"] == "5"

    assert client.get("/sheets", params={"sheet": "Nope", "clientId": "c1"}).status_code == 404


def test_add_entry_with_body_client(client, store):
    res = client.post("/sheets", json={"sheetName": "Sales", "entry": {"product": "Nut", "quantity": 2},
                                       "clientId": "c2"})
    assert res.status_code == 200
    assert store.tab("sheet-smeltech", "Sales")[-1][:3] == [1, "Nut", 2]


def test_update_stock_and_product(client, store):
    res = client.put("/sheets", json={"product": "Nut", "newStock": 12, "newValue": 18, "clientId": "c1"})
    assert res.json()["success"] is True
    row = store.tab("sheet-acme", "Inventory")[2]
    assert (row[7], row[9]) == (12, 18)

    res = client.put("/sheets/update-product",
                     json={"product": "Nut", "updatedData": {"reorderQuantity": 25}, "clientId": "c1"})
    assert res.json()["updated"] == ["reorderQuantity"]
    assert store.tab("sheet-acme", "Inventory")[2][6] == 25

    res = client.put("/sheets/update-product", json={"product": "Gizmo", "updatedData": {"stock": 1}, "clientId": "c1"})
    assert res.status_code == 404


def test_delete_rows(client, store):
    res = client.post("/sheets/delete", json={"sheetName": "Inventory", "items": ["Nut"], "clientId": "c1"})
    assert res.json()["message"] == "Successfully deleted 1 rows from Inventory"
    res = client.post("/sheets/delete", json={"sheetName": "Inventory", "items": ["Nut"], "clientId": "c1"})
    assert res.status_code == 404


# ==========================================
#  DASHBOARD / EMAIL / SCHEDULER
# ==========================================
def test_dashboard(client):
    data = client.get("/dashboard", params={"clientId": "c1"}).json()
    assert data["lowStockItems"] == 1
    assert data["totalProducts"] == 2
    assert data["totalStockValue"] == 70
    assert data["thisWeek"] == {"purchases": 0, "sales": 0}


def test_low_stock_email_endpoint(client, mailer):
    res = client.post("/email/low-stock", json={"clientEmail": "acme@example.com", "clientName": "Acme",
                                                "clientId": "c1"})
    assert res.json()["success"] is True
    assert mailer.sent[0].subject == "Low Stock Alert - Acme"


def test_help_desk_endpoints(client, mailer):
    res = client.post("/email/password-reset", json={"name": "Ravi", "contactNumber": "999", "companyName": "Acme"})
    assert res.status_code == 200
    res = client.post("/email/support", json={"name": "Ravi", "email": "r@example.com", "subject": "Hi",
                                              "message": "Help"})
    assert res.status_code == 200
    assert len(mailer.sent) == 2
    assert client.post("/email/password-reset", json={"name": "Ravi"}).status_code == 422


def test_email_failure_is_500(client, mailer):
    mailer.failing.add("acme@example.com")
    res = client.post("/email/dashboard-summary", json={"clientEmail": "acme@example.com", "clientId": "c1"})
    assert res.status_code == 500


def test_scheduler_endpoints(client, mailer):
    res = client.get("/scheduler", params={"action": "run-all"})
    assert res.json()["success"] is True
    assert len(res.json()["reports"]) == 2

    assert client.get("/scheduler/status").json()["running"] is False
    try:
        assert client.get("/scheduler").json()["message"] == "Scheduler started successfully"
        assert client.get("/scheduler/status").json()["running"] is True
    finally:
        client.post("/scheduler/stop")
    assert client.get("/scheduler/status").json()["running"] is False
