"""Helpers shared by the resource handlers."""
import math
from typing import Callable, Optional, Tuple

from repositories import Repository, search_filter
from schemas import CollectionSchema


def list_filter(repo: Repository, search: Optional[str] = None, **equals) -> dict:
    query = search_filter(search, repo.search_fields) if search else {}
    for field, value in equals.items():
        if value:
            query[field] = value
    return query


def paginated(
    repo: Repository,
    query: dict,
    sort_by: str,
    sort_order: str,
    page: int,
    limit: int,
    formatter: Callable[[dict], dict],
) -> dict:
    docs, total = repo.find_page(query, sort_by, sort_order, page, limit)
    return {
        "success": True,
        "data": [formatter(doc) for doc in docs],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


def merge_changes(schema: type, existing: dict, changes: dict) -> Tuple[CollectionSchema, dict]:
    """Validate ``existing`` with ``changes`` applied; return the model and the normalized changes."""
    validated = schema.validate_document({**existing, **changes})
    return validated, {key: getattr(validated, key) for key in changes}
