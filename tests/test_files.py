from bson import ObjectId

FILE = {
    "name": "Site plan",
    "fileName": "1700000000000-site-plan.pdf",
    "fileType": "application/pdf",
    "fileSize": 2048,
    "fileUrl": "/uploads/1700000000000-site-plan.pdf",
}


def create(client, **overrides):
    response = client.post("/api/files", json={**FILE, **overrides})
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_create_and_get_file(client):
    record = create(client, category="plans", projectId="p1", uploadedBy="kamran")
    assert record["fileSize"] == 2048
    assert record["category"] == "plans"
    assert record["createdAt"].endswith("Z")

    fetched = client.get(f"/api/files/{record['id']}").json()["data"]
    assert fetched == record


def test_zero_size_is_allowed(client):
    assert create(client, fileSize=0)["fileSize"] == 0


def test_create_validation_messages(client):
    cases = [
        ({"name": ""}, "File name is required"),
        ({"fileName": None}, "File name is required"),
        ({"fileType": " "}, "File type is required"),
        ({"fileSize": None}, "File size is required"),
        ({"fileSize": -1}, "File size cannot be negative"),
        ({"fileUrl": ""}, "File URL is required"),
        ({"name": "x" * 201}, "File name cannot exceed 200 characters"),
        ({"description": "x" * 1001}, "Description cannot exceed 1000 characters"),
    ]
    for overrides, message in cases:
        response = client.post("/api/files", json={**FILE, **overrides})
        assert response.status_code == 400, overrides
        assert response.json()["error"] == message


def test_update_only_touches_editable_fields(client):
    record = create(client)
    response = client.put(f"/api/files/{record['id']}", json={
        "description": "Revision B",
        "category": "plans",
        "fileUrl": "/elsewhere",
    })
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["description"] == "Revision B"
    assert updated["category"] == "plans"
    assert updated["fileUrl"] == FILE["fileUrl"]
    assert updated["name"] == FILE["name"]


def test_ids_and_delete(client):
    assert client.get("/api/files/not-an-id").json()["error"] == "Invalid file ID"
    assert client.get(f"/api/files/{ObjectId()}").json()["error"] == "File not found"

    record = create(client)
    body = client.delete(f"/api/files/{record['id']}").json()
    assert body["message"] == "File deleted successfully"
    assert client.get(f"/api/files/{record['id']}").status_code == 404


def test_list_filters_and_search(client):
    create(client, name="Site plan", projectId="p1", category="plans")
    create(client, name="Invoice 7", fileName="invoice-7.pdf", customerId="c1", category="billing")
    create(client, name="Photo", fileName="front.jpg", description="Front elevation", projectId="p1")

    assert client.get("/api/files").json()["pagination"]["total"] == 3
    by_project = client.get("/api/files", params={"projectId": "p1"}).json()
    assert {f["name"] for f in by_project["data"]} == {"Site plan", "Photo"}
    by_customer = client.get("/api/files", params={"customerId": "c1"}).json()
    assert [f["name"] for f in by_customer["data"]] == ["Invoice 7"]
    by_category = client.get("/api/files", params={"category": "billing"}).json()
    assert [f["name"] for f in by_category["data"]] == ["Invoice 7"]
    searched = client.get("/api/files", params={"search": "elevation"}).json()
    assert [f["name"] for f in searched["data"]] == ["Photo"]
