"""Response shapes for stored documents."""
from datetime import datetime, timezone
from typing import Iterable, Optional

CUSTOMER_FIELDS = ("name", "email", "phone", "address")
PROJECT_FIELDS = (
    "name",
    "customer",
    "location",
    "projectType",
    "openInvoice",
    "paidInvoice",
    "created",
    "projectNumber",
    "budgetVariance",
    "description",
    "coverPhoto",
)
TASK_FIELDS = ("title", "description", "status", "priority")
FILE_FIELDS = (
    "name",
    "fileName",
    "fileType",
    "fileSize",
    "fileUrl",
    "description",
    "category",
    "projectId",
    "customerId",
    "uploadedBy",
)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as UTC ISO-8601 with millisecond precision, e.g. 2025-03-10T09:30:00.000Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def date_only(value: Optional[datetime]) -> Optional[str]:
    rendered = isoformat(value)
    return rendered.split("T")[0] if rendered else None


def serialize_doc(doc: dict, fields: Iterable[str], timestamps: bool = True) -> dict:
    """Project a stored document onto its public fields; absent values are omitted."""
    if not doc:
        return doc
    d = {"id": str(doc["_id"])}
    for field in fields:
        if doc.get(field) is not None:
            d[field] = doc[field]
    if timestamps:
        for field in ("createdAt", "updatedAt"):
            if isinstance(doc.get(field), datetime):
                d[field] = isoformat(doc[field])
    return d


def format_customer(doc: dict) -> dict:
    return serialize_doc(doc, CUSTOMER_FIELDS, timestamps=False)


def format_project(doc: dict) -> dict:
    return serialize_doc(doc, PROJECT_FIELDS, timestamps=False)


def format_task(doc: dict) -> dict:
    d = serialize_doc(doc, TASK_FIELDS)
    due = date_only(doc.get("dueDate"))
    if due:
        d["dueDate"] = due
    return d


def format_file(doc: dict) -> dict:
    return serialize_doc(doc, FILE_FIELDS)
