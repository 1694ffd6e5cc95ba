"""
Demo data loader.

Used by the /api/seed endpoint and by the ``buildpro-seed`` command:

    buildpro-seed                  # seed customers and projects
    buildpro-seed --type customers # customers only, skipping existing emails
    buildpro-seed --clear          # wipe the collections first
"""
import argparse
import logging
import sys
from typing import List, Optional

import config
import database
from errors import ApiError
from repositories import CustomerRepository, ProjectRepository
from schemas import Customer, Project

logger = logging.getLogger(__name__)

SEED_TYPES = ("all", "customers", "projects")
SAMPLE_SIZE = 10
DUPLICATE_MESSAGE = "Some records already exist in the database. Clear existing data first."

DEMO_CUSTOMERS = [
    {"name": "Kamran Ali", "email": "kamran@yourbuildpro.com"},
    {"name": "Al-Fateh Group", "email": "contact@alfateh.com"},
]

DEMO_PROJECTS = [
    {
        "name": "Build House",
        "customer": "Kamran Ali",
        "location": "Lahore, PK",
        "projectType": "Residential Build",
        "openInvoice": 2,
        "paidInvoice": 3,
        "created": "2025-03-10",
        "projectNumber": "PRJ-2405",
    },
    {
        "name": "DHA Plaza Extension",
        "customer": "Al-Fateh Group",
        "location": "Islamabad, PK",
        "projectType": "High-Rise Construction",
        "openInvoice": 1,
        "paidInvoice": 6,
        "created": "2025-01-15",
        "projectNumber": "PRJ-2401",
    },
    {
        "name": "Sunrise Villas",
        "customer": "Kamran Ali",
        "location": "Karachi, PK",
        "projectType": "Residential Build",
        "openInvoice": 3,
        "paidInvoice": 6,
        "created": "2024-12-20",
        "projectNumber": "PRJ-2398",
    },
]


class SeedConflict(Exception):
    """Projects already exist and the caller did not ask to clear them."""

    def __init__(self, existing_count: int):
        self.existing_count = existing_count
        super().__init__(
            f"Database already contains {existing_count} projects. "
            'Send { "clear": true } in the request body to clear and reseed.'
        )


def customer_summary(doc: dict) -> dict:
    return {"id": str(doc["_id"]), "name": doc.get("name"), "email": doc.get("email")}


def project_summary(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "projectNumber": doc.get("projectNumber"),
        "customer": doc.get("customer"),
    }


def seed_customers(clear: bool = False) -> dict:
    """Insert demo customers whose email is not already taken."""
    repo = CustomerRepository()
    if clear:
        removed = repo.delete_many()
        logger.info(f"Cleared {removed} customer(s)")

    candidates = [Customer.validate_document(c).to_document() for c in DEMO_CUSTOMERS]
    existing = repo.existing_emails(c["email"] for c in candidates)
    fresh = [c for c in candidates if c["email"] not in existing]

    inserted: List[dict] = repo.insert_many(fresh, duplicate_message=DUPLICATE_MESSAGE) if fresh else []
    logger.info(f"Seeded {len(inserted)} customer(s), skipped {len(candidates) - len(fresh)}")
    return {
        "count": len(inserted),
        "skipped": len(candidates) - len(fresh),
        "data": [customer_summary(doc) for doc in inserted],
    }


def seed_projects(clear: bool = False) -> dict:
    """Replace the project collection with the demo projects; refuses when not empty unless ``clear``."""
    repo = ProjectRepository()
    existing_count = repo.count()
    if existing_count > 0 and not clear:
        raise SeedConflict(existing_count)
    if clear and existing_count > 0:
        repo.delete_many()
        logger.info(f"Cleared {existing_count} project(s)")

    documents = [Project.validate_document(p).to_document() for p in DEMO_PROJECTS]
    inserted = repo.insert_many(documents, duplicate_message=DUPLICATE_MESSAGE)
    logger.info(f"Seeded {len(inserted)} project(s)")
    return {"count": len(inserted), "data": [project_summary(doc) for doc in inserted]}


def all_customers_exist(result: dict, clear: bool = False) -> bool:
    """True when customers were requested, none were new, and nothing was cleared."""
    customers = result["customers"]
    return not clear and customers is not None and customers["count"] == 0


def seed_database(clear: bool = False, seed_type: str = "all") -> dict:
    """Seed the requested collections; stops before projects when every demo customer already exists."""
    result = {"customers": None, "projects": None}
    if seed_type in ("all", "customers"):
        result["customers"] = seed_customers(clear)
        if all_customers_exist(result, clear):
            logger.info("All demo customers already exist, nothing seeded")
            return result
    if seed_type in ("all", "projects"):
        result["projects"] = seed_projects(clear)
    return result


def seed_status() -> dict:
    """Current counts plus a small sample of each seeded collection."""
    customers = CustomerRepository()
    projects = ProjectRepository()
    return {
        "customers": {
            "count": customers.count(),
            "data": [
                customer_summary(doc)
                for doc in customers.collection.find({}, {"name": 1, "email": 1}).limit(SAMPLE_SIZE)
            ],
        },
        "projects": {
            "count": projects.count(),
            "data": [
                project_summary(doc)
                for doc in projects.collection.find(
                    {}, {"name": 1, "projectNumber": 1, "customer": 1}
                ).limit(SAMPLE_SIZE)
            ],
        },
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load BuildPro demo customers and projects.")
    parser.add_argument("--clear", action="store_true", help="delete existing records before seeding")
    parser.add_argument("--type", choices=SEED_TYPES, default="all", dest="seed_type")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    database.connect()
    try:
        result = seed_database(clear=args.clear, seed_type=args.seed_type)
    except SeedConflict as exc:
        logger.error(str(exc))
        return 1
    except ApiError as exc:
        logger.error(exc.detail)
        return 1
    finally:
        database.disconnect()

    for doc in (result["customers"] or {}).get("data", []):
        logger.info(f"Customer {doc['name']} ({doc['email']})")
    for doc in (result["projects"] or {}).get("data", []):
        logger.info(f"Project {doc['name']} ({doc['projectNumber']}) - {doc['customer']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
