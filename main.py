import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
import database
from errors import register_exception_handlers
from routes import customers, files, projects, seed, tasks, uploads

logging.basicConfig(level=config.log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="BuildPro Project Management API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for module in (customers, projects, tasks, files, uploads, seed):
    app.include_router(module.router)
app.include_router(uploads.files_router)


# Root endpoints
@app.get("/")
def read_root():
    return {"message": "BuildPro backend is running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": "Set" if os.getenv("DATABASE_URL") else "Not Set",
        "database_name": config.database_name(),
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        db = database.get_db()
        response["connection_status"] = "Connected"
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "Connected & Working"
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        response["database"] = f"Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.port())
