from typing import Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

import seeding
from errors import error_body, failure_message
from schemas import SeedRequest

router = APIRouter(prefix="/api/seed", tags=["Seed"])


@router.post("")
def seed(payload: Optional[SeedRequest] = Body(None)):
    with failure_message("Failed to seed database"):
        request = payload or SeedRequest()
        try:
            result = seeding.seed_database(clear=request.clear, seed_type=request.type)
        except seeding.SeedConflict as exc:
            return JSONResponse(
                {**error_body(str(exc)), "existingCount": exc.existing_count},
                status_code=400,
            )

        customers = result["customers"]
        if seeding.all_customers_exist(result, request.clear):
            return JSONResponse(
                {
                    "success": True,
                    "message": "All customers already exist in the database",
                    "customers": customers,
                    "projects": None,
                },
                status_code=200,
            )
        return JSONResponse(
            {"success": True, "message": "Successfully seeded database", **result},
            status_code=201,
        )


@router.get("")
def seed_status():
    with failure_message("Failed to check seed status"):
        return {"success": True, **seeding.seed_status()}
