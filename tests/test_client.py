import httpx
import pytest

from client import BuildProClient


@pytest.fixture
def api(client):
    return BuildProClient(http=client)


def test_customer_round_trip(api):
    created = api.create_customer({"name": "Jane Doe", "email": "JANE@X.COM"})
    assert created["success"] is True
    assert created["data"]["email"] == "jane@x.com"

    duplicate = api.create_customer({"name": "Jane", "email": "jane@x.com"})
    assert duplicate == {"success": False, "error": "A customer with this email already exists"}

    customer_id = created["data"]["id"]
    assert api.get_customer(customer_id)["data"]["name"] == "Jane Doe"
    assert api.update_customer(customer_id, {"phone": "555"})["data"]["phone"] == "555"
    assert api.list_customers(search="jane")["pagination"]["total"] == 1
    assert api.delete_customer(customer_id)["success"] is True


def test_projects_tasks_and_files(api):
    project = api.create_project({"name": "Build House", "customer": "Kamran Ali", "projectType": "Commercial"})
    project_id = project["data"]["id"]
    assert api.list_projects(project_type="Commercial")["pagination"]["total"] == 1
    assert api.update_project(project_id, {"location": "Lahore"})["data"]["location"] == "Lahore"
    assert api.get_project(project_id)["data"]["location"] == "Lahore"

    ids = [api.create_task({"title": t})["data"]["id"] for t in ("A", "B")]
    assert api.bulk_update_task_status(ids, "completed")["modifiedCount"] == 2
    assert api.bulk_update_task_priority(ids[:1], "high")["modifiedCount"] == 1
    assert api.list_tasks(status="completed", limit=5)["pagination"]["total"] == 2
    assert api.update_task(ids[0], {"title": "A2"})["data"]["title"] == "A2"
    assert api.get_task(ids[0])["data"]["priority"] == "high"
    assert api.delete_task(ids[0])["success"] is True
    assert api.bulk_delete_tasks(ids[1:])["deletedCount"] == 1

    uploaded = api.upload_file("plan.pdf", b"data", "application/pdf")
    record = api.create_file({
        "name": "Plan",
        "fileName": uploaded["data"]["filename"],
        "fileType": "application/pdf",
        "fileSize": 4,
        "fileUrl": uploaded["data"]["url"],
        "projectId": project_id,
    })
    file_id = record["data"]["id"]
    assert api.list_files(project_id=project_id)["pagination"]["total"] == 1
    assert api.update_file(file_id, {"category": "plans"})["data"]["category"] == "plans"
    assert api.get_file(file_id)["data"]["name"] == "Plan"
    assert api.delete_file(file_id)["success"] is True
    assert api.delete_project(project_id)["success"] is True


def test_upload_image_and_seed(api):
    rejected = api.upload_image("notes.txt", b"hi", "text/plain")
    assert rejected == {"success": False, "error": "File must be an image"}
    assert api.upload_image("cover.png", b"\x89PNG", "image/png")["success"] is True

    assert api.seed()["projects"]["count"] == 3
    assert api.seed_status()["customers"]["count"] == 2


def test_transport_errors_become_envelopes():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    api = BuildProClient(http=httpx.Client(base_url="http://buildpro.test", transport=httpx.MockTransport(refuse)))
    assert api.list_tasks() == {"success": False, "error": "connection refused"}
    api.close()
