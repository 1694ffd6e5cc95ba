"""
Project endpoints.

``customer`` may be sent as a customer id or as a literal name. An id is
resolved to that customer's current name (``Unknown`` when no such customer
exists) and stored as a snapshot: later customer renames do not cascade.
"""
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Query

from errors import failure_message, not_found
from repositories import CustomerRepository, ProjectRepository
from routes.common import list_filter, merge_changes, paginated
from schemas import Project, ProjectCreate, ProjectUpdate
from serializers import format_project

router = APIRouter(prefix="/api/projects", tags=["Projects"])
projects = ProjectRepository()
customers = CustomerRepository()

# placeholder used while validating a new project, before a real number is drawn
UNASSIGNED_NUMBER = "PRJ-PENDING"


def resolve_customer_name(value: str) -> str:
    if ObjectId.is_valid(value):
        customer = customers.find_by_id(ObjectId(value))
        return customer["name"] if customer else "Unknown"
    return value


def today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


@router.get("")
def list_projects(
    search: Optional[str] = None,
    customer: Optional[str] = None,
    location: Optional[str] = None,
    projectType: Optional[str] = None,
    sortBy: str = "created",
    sortOrder: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1),
):
    with failure_message("Failed to fetch projects"):
        query = list_filter(projects, search, customer=customer, location=location, projectType=projectType)
        return paginated(projects, query, sortBy, sortOrder, page, limit, format_project)


@router.post("", status_code=201)
def create_project(payload: ProjectCreate):
    with failure_message("Failed to create project"):
        data = payload.model_dump(exclude_none=True)
        if not data.get("location"):
            data.pop("location", None)
        data["created"] = data.get("created") or today()

        draft = Project.validate_document({**data, "projectNumber": UNASSIGNED_NUMBER})
        project = draft.model_copy(update={
            "customer": resolve_customer_name(draft.customer),
            "projectNumber": projects.next_project_number(),
        })
        doc = projects.create(project.to_document())
        return {"success": True, "data": format_project(doc)}


@router.get("/{project_id}")
def get_project(project_id: str):
    with failure_message("Failed to fetch project"):
        doc = projects.get_or_404(projects.parse_id(project_id))
        return {"success": True, "data": format_project(doc)}


@router.put("/{project_id}")
def update_project(project_id: str, payload: ProjectUpdate):
    with failure_message("Failed to update project"):
        oid = projects.parse_id(project_id)
        existing = projects.get_or_404(oid)
        changes = payload.model_dump(exclude_unset=True)
        if isinstance(changes.get("customer"), str) and changes["customer"].strip():
            changes["customer"] = resolve_customer_name(changes["customer"].strip())
        _, changes = merge_changes(Project, existing, changes)
        doc = projects.update(oid, changes)
        if not doc:
            raise not_found(projects.entity)
        return {"success": True, "data": format_project(doc)}


@router.delete("/{project_id}")
def delete_project(project_id: str):
    with failure_message("Failed to delete project"):
        doc = projects.delete(projects.parse_id(project_id))
        if not doc:
            raise not_found(projects.entity)
        return {"success": True, "message": "Project deleted successfully", "data": format_project(doc)}
