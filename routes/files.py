from typing import Optional

from fastapi import APIRouter, Query

from errors import failure_message, not_found
from repositories import FileRepository
from routes.common import list_filter, merge_changes, paginated
from schemas import FileCreate, FileRecord, FileUpdate
from serializers import format_file

router = APIRouter(prefix="/api/files", tags=["Files"])
files = FileRepository()


@router.get("")
def list_files(
    search: Optional[str] = None,
    category: Optional[str] = None,
    projectId: Optional[str] = None,
    customerId: Optional[str] = None,
    sortBy: str = "createdAt",
    sortOrder: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1),
):
    with failure_message("Failed to fetch files"):
        query = list_filter(files, search, category=category, projectId=projectId, customerId=customerId)
        return paginated(files, query, sortBy, sortOrder, page, limit, format_file)


@router.post("", status_code=201)
def create_file(payload: FileCreate):
    """Record metadata for a file previously stored through /api/upload."""
    with failure_message("Failed to create file"):
        record = FileRecord.validate_document(payload.model_dump())
        doc = files.create(record.to_document())
        return {"success": True, "data": format_file(doc)}


@router.get("/{file_id}")
def get_file(file_id: str):
    with failure_message("Failed to fetch file"):
        doc = files.get_or_404(files.parse_id(file_id))
        return {"success": True, "data": format_file(doc)}


@router.put("/{file_id}")
def update_file(file_id: str, payload: FileUpdate):
    with failure_message("Failed to update file"):
        oid = files.parse_id(file_id)
        existing = files.get_or_404(oid)
        _, changes = merge_changes(FileRecord, existing, payload.model_dump(exclude_unset=True))
        doc = files.update(oid, changes)
        if not doc:
            raise not_found(files.entity)
        return {"success": True, "data": format_file(doc)}


@router.delete("/{file_id}")
def delete_file(file_id: str):
    with failure_message("Failed to delete file"):
        doc = files.delete(files.parse_id(file_id))
        if not doc:
            raise not_found(files.entity)
        return {"success": True, "message": "File deleted successfully", "data": format_file(doc)}
