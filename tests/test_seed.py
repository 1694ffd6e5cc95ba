import seeding
from repositories import CustomerRepository


def test_seed_all_then_status(client):
    response = client.post("/api/seed")
    assert response.status_code == 201
    body = response.json()
    assert body["customers"]["count"] == 2
    assert body["customers"]["skipped"] == 0
    assert body["projects"]["count"] == 3
    assert {p["projectNumber"] for p in body["projects"]["data"]} == {"PRJ-2405", "PRJ-2401", "PRJ-2398"}

    status = client.get("/api/seed").json()
    assert status["success"] is True
    assert status["customers"]["count"] == 2
    assert status["projects"]["count"] == 3
    assert {c["email"] for c in status["customers"]["data"]} == {"kamran@yourbuildpro.com", "contact@alfateh.com"}


def test_projects_refuse_to_reseed_without_clear(client):
    client.post("/api/seed", json={})
    response = client.post("/api/seed", json={"type": "projects"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["existingCount"] == 3
    assert body["error"].startswith("Database already contains 3 projects.")


def test_clear_reseeds(client):
    client.post("/api/seed")
    response = client.post("/api/seed", json={"clear": True})
    assert response.status_code == 201
    assert response.json()["customers"]["count"] == 2
    assert client.get("/api/seed").json()["projects"]["count"] == 3


def test_customers_are_deduplicated_by_email(client):
    client.post("/api/customers", json={"name": "Kamran", "email": "KAMRAN@yourbuildpro.com"})
    response = client.post("/api/seed", json={"type": "customers"})
    assert response.status_code == 201
    assert response.json()["customers"]["count"] == 1
    assert response.json()["customers"]["skipped"] == 1
    assert response.json()["projects"] is None

    again = client.post("/api/seed", json={"type": "customers"})
    assert again.status_code == 200
    assert again.json()["message"] == "All customers already exist in the database"


def test_invalid_seed_type(client):
    response = client.post("/api/seed", json={"type": "tasks"})
    assert response.status_code == 400


def test_command_line_seed(db):
    assert seeding.main(["--type", "customers"]) == 0
    assert db["customer"].count_documents({}) == 2
    assert db["project"].count_documents({}) == 0


def test_command_line_refuses_existing_projects(db):
    db["project"].insert_one({"name": "Existing", "projectNumber": "PRJ-0001"})
    assert seeding.main(["--type", "projects"]) == 1


def test_seed_all_stops_when_every_customer_exists(client):
    client.post("/api/seed", json={"type": "customers"})
    response = client.post("/api/seed", json={"type": "all"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "All customers already exist in the database"
    assert body["projects"] is None
    assert client.get("/api/seed").json()["projects"]["count"] == 0


def test_duplicate_records_during_seed_use_seed_message(client, monkeypatch):
    client.post("/api/customers", json={"name": "Kamran", "email": "kamran@yourbuildpro.com"})
    monkeypatch.setattr(CustomerRepository, "existing_emails", lambda self, emails: set())

    response = client.post("/api/seed", json={"type": "customers"})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Some records already exist in the database. Clear existing data first.",
    }
