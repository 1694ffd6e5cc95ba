import logging
from typing import Optional

from fastapi import APIRouter, Query

from errors import bad_request, failure_message, not_found
from repositories import TaskRepository
from routes.common import list_filter, merge_changes, paginated
from schemas import TASK_PRIORITIES, TASK_STATUSES, BulkTaskRequest, BulkUpdateData, Task, TaskCreate, TaskUpdate
from serializers import format_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])
tasks = TaskRepository()

BULK_OPERATIONS = ("delete", "updateStatus", "updatePriority")


@router.get("")
def list_tasks(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    sortBy: str = "createdAt",
    sortOrder: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
):
    with failure_message("Failed to fetch tasks"):
        query = list_filter(tasks, search, status=status, priority=priority)
        return paginated(tasks, query, sortBy, sortOrder, page, limit, format_task)


@router.post("", status_code=201)
def create_task(payload: TaskCreate):
    with failure_message("Failed to create task"):
        data = payload.model_dump(exclude_none=True)
        # blank status/priority fall back to the defaults
        for field in ("status", "priority"):
            if not data.get(field):
                data.pop(field, None)
        task = Task.validate_document(data)
        doc = tasks.create(task.to_document())
        return {"success": True, "data": format_task(doc)}


@router.post("/bulk")
def bulk_tasks(payload: BulkTaskRequest):
    """Delete, or set status/priority on, many tasks at once."""
    with failure_message("Failed to perform bulk operation"):
        if not payload.operation or not payload.taskIds:
            raise bad_request("Operation and taskIds array are required")
        if payload.operation not in BULK_OPERATIONS:
            raise bad_request(f"Invalid operation. Supported: {', '.join(BULK_OPERATIONS)}")

        oids = []
        for task_id in payload.taskIds:
            if not tasks.is_valid_id(task_id):
                raise bad_request(f"Invalid task ID: {task_id}")
            oids.append(tasks.parse_id(task_id))
        update_data = payload.updateData or BulkUpdateData()

        if payload.operation == "delete":
            deleted = tasks.delete_many(oids)
            logger.info(f"Bulk deleted {deleted} task(s)")
            return {
                "success": True,
                "message": f"{deleted} task(s) deleted successfully",
                "deletedCount": deleted,
            }

        if payload.operation == "updateStatus":
            field, value, allowed = "status", update_data.status, TASK_STATUSES
        else:
            field, value, allowed = "priority", update_data.priority, TASK_PRIORITIES
        if not value:
            raise bad_request(f"{field.capitalize()} is required for {payload.operation} operation")
        if value not in allowed:
            raise bad_request(f"{field.capitalize()} must be one of: {', '.join(allowed)}")

        modified = tasks.update_many(oids, {field: value})
        logger.info(f"Bulk {payload.operation} to {value} modified {modified} task(s)")
        return {
            "success": True,
            "message": f"{modified} task(s) updated successfully",
            "modifiedCount": modified,
        }


@router.get("/{task_id}")
def get_task(task_id: str):
    with failure_message("Failed to fetch task"):
        doc = tasks.get_or_404(tasks.parse_id(task_id))
        return {"success": True, "data": format_task(doc)}


@router.put("/{task_id}")
def update_task(task_id: str, payload: TaskUpdate):
    with failure_message("Failed to update task"):
        oid = tasks.parse_id(task_id)
        existing = tasks.get_or_404(oid)
        _, changes = merge_changes(Task, existing, payload.model_dump(exclude_unset=True))
        doc = tasks.update(oid, changes)
        if not doc:
            raise not_found(tasks.entity)
        return {"success": True, "data": format_task(doc)}


@router.delete("/{task_id}")
def delete_task(task_id: str):
    with failure_message("Failed to delete task"):
        doc = tasks.delete(tasks.parse_id(task_id))
        if not doc:
            raise not_found(tasks.entity)
        return {"success": True, "message": "Task deleted successfully", "data": format_task(doc)}
