"""
Runtime configuration for the BuildPro backend.

Every value is read from the environment at call time so tests and
deployments can override it without re-importing modules.
"""
import os
from typing import List


def database_url() -> str:
    return os.getenv("DATABASE_URL", "mongodb://localhost:27017")


def database_name() -> str:
    return os.getenv("DATABASE_NAME", "buildpro")


def upload_dir() -> str:
    """Directory that receives uploaded files; served at /uploads."""
    return os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "public", "uploads"))


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def port() -> int:
    return int(os.getenv("PORT", 8000))
