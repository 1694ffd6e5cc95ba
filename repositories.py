"""
Data access for the four collections.

Uniqueness (customer email, project number) is guarded twice: handlers run an
optimistic pre-check so the common case gets a friendly message, and the
store's unique index is the authoritative guard. The pre-check is racy; a
conflicting write that slips past it is caught here as a duplicate-key error
and reported with the same message.
"""
import logging
import re
import time
from typing import Iterable, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from database import create_document, get_db, get_documents, is_duplicate_key, utcnow
from errors import bad_request, invalid_id, not_found

logger = logging.getLogger(__name__)


def search_filter(search: str, fields: Iterable[str]) -> dict:
    """Case-insensitive literal substring match over ``fields``."""
    pattern = re.escape(search)
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


class Repository:
    collection_name: str = ""
    entity: str = ""
    duplicate_message: str = "Record already exists"
    search_fields: Tuple[str, ...] = ()

    @property
    def collection(self) -> Collection:
        return get_db()[self.collection_name]

    @staticmethod
    def is_valid_id(record_id) -> bool:
        """True for the 24-hex-character string form of an ObjectId."""
        return isinstance(record_id, str) and ObjectId.is_valid(record_id)

    def parse_id(self, record_id: str) -> ObjectId:
        if not self.is_valid_id(record_id):
            raise invalid_id(self.entity)
        return ObjectId(record_id)

    def find_by_id(self, oid: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": oid})

    def get_or_404(self, oid: ObjectId) -> dict:
        doc = self.find_by_id(oid)
        if not doc:
            raise not_found(self.entity)
        return doc

    def find_page(
        self,
        filter_dict: dict,
        sort_by: str,
        sort_order: str,
        page: int,
        limit: int,
    ) -> Tuple[List[dict], int]:
        direction = ASCENDING if sort_order == "asc" else DESCENDING
        sort_field = "_id" if sort_by == "id" else sort_by
        docs = get_documents(
            self.collection_name,
            filter_dict,
            limit=limit,
            sort=[(sort_field, direction)],
            skip=(page - 1) * limit,
        )
        total = self.collection.count_documents(filter_dict)
        return docs, total

    def count(self, filter_dict: Optional[dict] = None) -> int:
        return self.collection.count_documents(filter_dict or {})

    def create(self, document: dict) -> dict:
        try:
            inserted_id = create_document(self.collection_name, document)
        except PyMongoError as exc:
            if is_duplicate_key(exc):
                raise bad_request(self.duplicate_message) from exc
            raise
        logger.info(f"Created {self.entity.lower()} {inserted_id}")
        return self.collection.find_one({"_id": ObjectId(inserted_id)})

    def update(self, oid: ObjectId, changes: dict) -> Optional[dict]:
        """Apply a partial ``$set``; returns the updated document or None when absent."""
        try:
            return self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {**changes, "updatedAt": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            if is_duplicate_key(exc):
                raise bad_request(self.duplicate_message) from exc
            raise

    def delete(self, oid: ObjectId) -> Optional[dict]:
        doc = self.collection.find_one_and_delete({"_id": oid})
        if doc:
            logger.info(f"Deleted {self.entity.lower()} {oid}")
        return doc

    def update_many(self, oids: List[ObjectId], changes: dict) -> int:
        result = self.collection.update_many(
            {"_id": {"$in": oids}},
            {"$set": {**changes, "updatedAt": utcnow()}},
        )
        return result.modified_count

    def delete_many(self, oids: Optional[List[ObjectId]] = None) -> int:
        """Delete the given ids, or every document when ``oids`` is None."""
        filter_dict = {} if oids is None else {"_id": {"$in": oids}}
        return self.collection.delete_many(filter_dict).deleted_count

    def insert_many(self, documents: List[dict], duplicate_message: Optional[str] = None) -> List[dict]:
        now = utcnow()
        stamped = [{**doc, "createdAt": now, "updatedAt": now} for doc in documents]
        try:
            result = self.collection.insert_many(stamped)
        except PyMongoError as exc:
            if is_duplicate_key(exc):
                raise bad_request(duplicate_message or self.duplicate_message) from exc
            raise
        return list(self.collection.find({"_id": {"$in": result.inserted_ids}}))


class CustomerRepository(Repository):
    collection_name = "customer"
    entity = "Customer"
    duplicate_message = "A customer with this email already exists"
    search_fields = ("name", "email")

    def email_taken(self, email: str, exclude: Optional[ObjectId] = None) -> bool:
        query = {"email": email.lower()}
        if exclude is not None:
            query["_id"] = {"$ne": exclude}
        return self.collection.find_one(query) is not None

    def existing_emails(self, emails: Iterable[str]) -> set:
        cursor = self.collection.find({"email": {"$in": list(emails)}}, {"email": 1})
        return {doc["email"] for doc in cursor}


class ProjectRepository(Repository):
    collection_name = "project"
    entity = "Project"
    duplicate_message = "A project with this project number already exists"
    search_fields = ("name", "customer", "location")

    def next_project_number(self, now_ms: Optional[int] = None) -> str:
        """PRJ- plus the last four digits of the millisecond clock, advanced past taken numbers."""
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        for offset in range(10000):
            candidate = f"PRJ-{str(stamp + offset)[-4:]}"
            if self.collection.find_one({"projectNumber": candidate}, {"_id": 1}) is None:
                return candidate
        raise bad_request("No project numbers are available")


class TaskRepository(Repository):
    collection_name = "task"
    entity = "Task"
    search_fields = ("title", "description")


class FileRepository(Repository):
    collection_name = "file"
    entity = "File"
    search_fields = ("name", "fileName", "description")
