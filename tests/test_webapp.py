import pytest

pytest.importorskip("fastapi")
pytest.importorskip("sqlmodel")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from favocoin.demo import demo_roster, seed_demo  # noqa: E402
from favocoin.service import FavocoinBank  # noqa: E402
from favocoin.webapp.application import create_app  # noqa: E402
from favocoin.webapp.persistence import SQLRepository, make_engine  # noqa: E402


@pytest.fixture()
def client() -> TestClient:
    bank = FavocoinBank(SQLRepository(make_engine("sqlite://")), demo_roster())
    seed_demo(bank)
    return TestClient(create_app(bank))


def test_health_and_items(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok", "items": 4}
    names = {item["name"] for item in client.get("/api/store/items").json()}
    assert "Sessão de Cinema" in names


def test_balance_and_actions(client: TestClient) -> None:
    before = client.get("/api/students/stu-3/balance").json()["balance"]

    response = client.post("/api/students/stu-3/actions", json={"label": "Bom Comportamento"})
    assert response.status_code == 201
    assert response.json()["type"] == "earn"

    after = client.get("/api/students/stu-3/balance").json()["balance"]
    assert after == before + 10

    missing = client.post("/api/students/stu-3/actions", json={"label": "Voar"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "UnknownActionError"


def test_group_purchase_and_failures(client: TestClient) -> None:
    created = client.post("/api/store/items", json={"name": "Kit", "price": 30, "stock": 2, "id": "kit"})
    assert created.status_code == 201

    quote = client.post("/api/store/quote", json={"participant_ids": ["stu-2", "stu-3"], "item_id": "kit"})
    assert quote.json()["exact_share"] == "15"

    bought = client.post("/api/store/purchases", json={"participant_ids": ["stu-2", "stu-3"], "item_id": "kit"})
    assert bought.status_code == 201
    assert bought.json()["remaining_stock"] == 1

    cinema = client.post("/api/store/purchases", json={"participant_ids": ["stu-3"], "item_id": "item-4"})
    assert cinema.status_code == 409
    assert cinema.json()["participants"] == ["stu-3"]

    empty = client.post("/api/store/purchases", json={"participant_ids": [], "item_id": "kit"})
    assert empty.status_code == 422
    assert client.post("/api/store/purchases", json={"participant_ids": ["stu-3"], "item_id": "nope"}).status_code == 404


def test_store_item_edit_and_validation(client: TestClient) -> None:
    bad = client.post("/api/store/items", json={"name": "Kit", "price": -1, "stock": 1})
    assert bad.status_code == 422

    patched = client.patch("/api/store/items/item-1", json={"stock": 0})
    assert patched.json()["stock"] == 0
    sold_out = client.post("/api/store/purchases", json={"participant_ids": ["stu-1"], "item_id": "item-1"})
    assert sold_out.status_code == 409
    assert sold_out.json()["error"] == "OutOfStockError"

    assert client.delete("/api/store/items/item-1").status_code == 204
    assert client.get("/api/store/items/item-1").status_code == 404


def test_eligibility_endpoints(client: TestClient) -> None:
    assert client.get("/api/eligibility", params={"name": "3º Ano A"}).json()["eligible"] is True
    assert client.get("/api/eligibility", params={"name": "Creche III"}).json()["eligible"] is False
    assert client.get("/api/classes/class-2/eligibility").json()["eligible"] is True
    assert client.get("/api/classes/class-3/eligibility").json()["eligible"] is False
    assert client.get("/api/classes/none/eligibility").status_code == 404


def test_attendance_dashboard_and_exports(client: TestClient) -> None:
    posted = client.post("/api/classes/class-2/attendance", json={"day": "2025-03-10", "records": {"stu-3": True}})
    assert posted.json()["stu-3"][0]["amount"] == 10.0

    dashboard = client.get("/api/dashboard", params={"top": 2}).json()
    assert dashboard["eligible_students"] == 3
    assert len(dashboard["top_students"]) == 2

    statement = client.get("/api/students/stu-1/statement")
    assert "Student: João Silva" in statement.text
    csv_text = client.get("/api/ledger.csv", params={"student_id": "stu-3"}).text
    assert csv_text.startswith("id,date,student_id")


def test_package_exposes_web_entry_points_lazily() -> None:
    import favocoin.webapp as webapp

    assert webapp.SQLRepository is SQLRepository
    assert webapp.create_app is create_app
    assert {"app", "create_app", "make_engine"} <= set(dir(webapp))
    with pytest.raises(AttributeError):
        webapp.not_a_web_export
