"""
Database Schemas

MongoDB collection schemas as Pydantic models, plus the request bodies each
endpoint accepts. Collection models carry every stored constraint; request
bodies only check JSON types so that a missing field can be reported with a
readable message instead of a raw validation dump.

Each collection model maps to a lowercased collection name:
- Customer -> "customer"
- Project -> "project"
- Task -> "task"
- FileRecord -> "file"
"""
from datetime import datetime, timezone
from typing import ClassVar, Dict, List, Literal, Optional, Union, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import bad_request

ProjectType = Literal["Residential Build", "High-Rise Construction", "Commercial", "Renovation"]
TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]

PROJECT_TYPES = get_args(ProjectType)
TASK_STATUSES = get_args(TaskStatus)
TASK_PRIORITIES = get_args(TaskPriority)

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

Number = Union[int, float]


def _choices(label: str, values) -> str:
    return f"{label} must be one of: {', '.join(values)}"


class CollectionSchema(BaseModel):
    """Base for stored documents: trims strings and reports the first failed constraint."""

    model_config = ConfigDict(str_strip_whitespace=True)

    collection: ClassVar[str] = ""
    error_messages: ClassVar[Dict[str, Dict[str, str]]] = {}

    @classmethod
    def validate_document(cls, data: dict):
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise bad_request(cls.describe_error(exc.errors()[0])) from exc

    @classmethod
    def describe_error(cls, error: dict) -> str:
        field = str(error["loc"][0]) if error.get("loc") else ""
        messages = cls.error_messages.get(field, {})
        kind = error.get("type", "")
        value = error.get("input")

        if kind == "value_error" and error.get("ctx", {}).get("error") is not None:
            return str(error["ctx"]["error"])
        if kind == "missing" or value is None or (isinstance(value, str) and not value.strip()):
            kind = "required"
        elif kind == "string_too_long":
            kind = "max_length"
        elif kind == "literal_error":
            kind = "choices"
        elif kind == "string_pattern_mismatch":
            kind = "pattern"
        return messages.get(kind) or f"{field}: {error.get('msg')}"

    def to_document(self) -> dict:
        return self.model_dump(exclude_none=True)


class Customer(CollectionSchema):
    """
    Customers collection schema
    Collection name: "customer"
    """
    collection: ClassVar[str] = "customer"
    error_messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "name": {
            "required": "Customer name is required",
            "max_length": "Customer name cannot exceed 200 characters",
        },
        "email": {
            "required": "Email is required",
            "pattern": "Please provide a valid email address",
        },
        "address": {"max_length": "Address cannot exceed 500 characters"},
    }

    name: str = Field(..., min_length=1, max_length=200, description="Customer display name")
    email: str = Field(..., min_length=1, pattern=EMAIL_PATTERN, description="Unique, stored lowercase")
    phone: Optional[str] = Field(None, description="Free-form phone number")
    address: Optional[str] = Field(None, max_length=500, description="Postal address")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class Project(CollectionSchema):
    """
    Projects collection schema
    Collection name: "project"

    ``customer`` is a snapshot of the customer's name taken when the project
    was linked; renaming the customer does not touch existing projects.
    """
    collection: ClassVar[str] = "project"
    error_messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "name": {
            "required": "Project name is required",
            "max_length": "Project name cannot exceed 200 characters",
        },
        "customer": {"required": "Customer is required"},
        "projectType": {
            "required": "Project type is required",
            "choices": _choices("Project type", PROJECT_TYPES),
        },
        "created": {"required": "Created date is required"},
        "projectNumber": {"required": "Project number is required"},
        "description": {"max_length": "Description cannot exceed 2000 characters"},
    }

    name: str = Field(..., min_length=1, max_length=200)
    customer: str = Field(..., min_length=1, description="Customer name snapshot")
    location: str = Field("TBD")
    projectType: ProjectType
    openInvoice: Number = Field(0, description="Number of open invoices")
    paidInvoice: Number = Field(0, description="Number of paid invoices")
    created: str = Field(..., min_length=1, description="Creation date as YYYY-MM-DD")
    projectNumber: str = Field(..., min_length=1, description="PRJ-NNNN, unique")
    budgetVariance: Optional[str] = None
    description: Optional[str] = Field(None, max_length=2000)
    coverPhoto: Optional[str] = Field(None, description="Public URL of the cover image")

    @field_validator("openInvoice")
    @classmethod
    def open_invoice_not_negative(cls, value):
        if value < 0:
            raise ValueError("Open invoice cannot be negative")
        return value

    @field_validator("paidInvoice")
    @classmethod
    def paid_invoice_not_negative(cls, value):
        if value < 0:
            raise ValueError("Paid invoice cannot be negative")
        return value


class Task(CollectionSchema):
    """
    Tasks collection schema
    Collection name: "task"
    """
    collection: ClassVar[str] = "task"
    error_messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "title": {
            "required": "Title is required",
            "max_length": "Title cannot exceed 200 characters",
        },
        "description": {"max_length": "Description cannot exceed 1000 characters"},
        "status": {
            "required": _choices("Status", TASK_STATUSES),
            "choices": _choices("Status", TASK_STATUSES),
        },
        "priority": {
            "required": _choices("Priority", TASK_PRIORITIES),
            "choices": _choices("Priority", TASK_PRIORITIES),
        },
    }

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    dueDate: Optional[datetime] = None

    @field_validator("dueDate", mode="before")
    @classmethod
    def parse_due_date(cls, value):
        # any falsy value clears the due date
        if not value:
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                pass
        raise ValueError("Invalid due date")

    @field_validator("dueDate")
    @classmethod
    def due_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class FileRecord(CollectionSchema):
    """
    File metadata collection schema
    Collection name: "file"
    """
    collection: ClassVar[str] = "file"
    error_messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "name": {
            "required": "File name is required",
            "max_length": "File name cannot exceed 200 characters",
        },
        "fileName": {"required": "File name is required"},
        "fileType": {"required": "File type is required"},
        "fileSize": {"required": "File size is required"},
        "fileUrl": {"required": "File URL is required"},
        "description": {"max_length": "Description cannot exceed 1000 characters"},
    }

    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    fileName: str = Field(..., min_length=1, description="Stored file name")
    fileType: str = Field(..., min_length=1, description="Declared media type")
    fileSize: Number = Field(..., description="Size in bytes")
    fileUrl: str = Field(..., min_length=1, description="Public URL of the stored file")
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = None
    projectId: Optional[str] = None
    customerId: Optional[str] = None
    uploadedBy: Optional[str] = None

    @field_validator("fileSize")
    @classmethod
    def file_size_not_negative(cls, value):
        if value < 0:
            raise ValueError("File size cannot be negative")
        return value


# Request bodies. Every field is optional at the JSON level; the collection
# schemas above decide what is actually required.

class CustomerCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CustomerUpdate(CustomerCreate):
    """Only keys present in the body are applied."""


class ProjectCreate(BaseModel):
    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "projectName"))
    customer: Optional[str] = Field(None, description="Customer id or a literal customer name")
    location: Optional[str] = None
    projectType: Optional[str] = Field(None, validation_alias=AliasChoices("projectType", "remodelType"))
    openInvoice: Optional[Number] = None
    paidInvoice: Optional[Number] = None
    created: Optional[str] = None
    budgetVariance: Optional[str] = None
    description: Optional[str] = Field(None, validation_alias=AliasChoices("description", "projectDescription"))
    coverPhoto: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Only keys present in the body are applied; projectNumber is never changed."""

    name: Optional[str] = None
    customer: Optional[str] = None
    location: Optional[str] = None
    projectType: Optional[str] = None
    openInvoice: Optional[Number] = None
    paidInvoice: Optional[Number] = None
    created: Optional[str] = None
    budgetVariance: Optional[str] = None
    description: Optional[str] = None
    coverPhoto: Optional[str] = None


class TaskCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    dueDate: Optional[Union[str, int, float, bool]] = None


class TaskUpdate(TaskCreate):
    """Only keys present in the body are applied; a falsy dueDate clears it."""


class BulkUpdateData(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None


class BulkTaskRequest(BaseModel):
    operation: Optional[str] = None
    taskIds: Optional[List[str]] = None
    updateData: Optional[BulkUpdateData] = None


class FileCreate(BaseModel):
    name: Optional[str] = None
    fileName: Optional[str] = None
    fileType: Optional[str] = None
    fileSize: Optional[Number] = None
    fileUrl: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    projectId: Optional[str] = None
    customerId: Optional[str] = None
    uploadedBy: Optional[str] = None


class FileUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    projectId: Optional[str] = None
    customerId: Optional[str] = None


class SeedRequest(BaseModel):
    clear: bool = False
    type: Literal["all", "customers", "projects"] = "all"
