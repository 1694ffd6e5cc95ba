"""
MongoDB access for the BuildPro backend.

A single client is created lazily on first use and reused for the life of the
process. Collection names are the lowercased entity names:
- Customer -> "customer"
- Project -> "project"
- Task -> "task"
- FileRecord -> "file"
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import BulkWriteError, DuplicateKeyError

import config

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000

_client = None
db: Optional[Database] = None
_connect_lock = threading.Lock()


def connect(client=None) -> Database:
    """Connect if not already connected and return the shared database handle.

    ``client`` lets callers supply a ready-made client (tests pass an
    in-memory one); otherwise a ``MongoClient`` is built from ``DATABASE_URL``.
    """
    global _client, db
    if db is not None:
        return db
    with _connect_lock:
        if db is not None:
            return db
        if client is None:
            client = MongoClient(config.database_url())
        handle = client[config.database_name()]
        ensure_indexes(handle)
        _client = client
        db = handle
    logger.info(f"Connected to database {config.database_name()}")
    return db


def disconnect() -> None:
    global _client, db
    with _connect_lock:
        if _client is not None:
            _client.close()
        _client = None
        db = None


def get_db() -> Database:
    return connect()


def ensure_indexes(database: Database) -> None:
    # unique indexes are the authoritative guard for email and project number
    database["customer"].create_index([("email", ASCENDING)], unique=True)
    database["customer"].create_index([("name", ASCENDING)])

    database["project"].create_index([("projectNumber", ASCENDING)], unique=True)
    for field in ("customer", "location", "projectType", "openInvoice", "paidInvoice"):
        database["project"].create_index([(field, ASCENDING)])
    database["project"].create_index([("created", DESCENDING)])

    for field in ("status", "priority", "dueDate"):
        database["task"].create_index([(field, ASCENDING)])
    database["task"].create_index([("createdAt", DESCENDING)])

    for field in ("name", "category", "projectId", "customerId"):
        database["file"].create_index([(field, ASCENDING)])
    database["file"].create_index([("createdAt", DESCENDING)])


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a single document stamped with createdAt/updatedAt and return its id."""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump(exclude_none=True)
    else:
        data_dict = data.copy()
    now = utcnow()
    data_dict["createdAt"] = now
    data_dict["updatedAt"] = now
    result = get_db()[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    sort: Optional[List[Tuple[str, int]]] = None,
    skip: int = 0,
) -> List[dict]:
    cursor = get_db()[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def is_duplicate_key(exc: Exception) -> bool:
    if isinstance(exc, DuplicateKeyError):
        return True
    if isinstance(exc, BulkWriteError):
        errors = exc.details.get("writeErrors", []) if exc.details else []
        return any(error.get("code") == DUPLICATE_KEY_CODE for error in errors)
    return False
