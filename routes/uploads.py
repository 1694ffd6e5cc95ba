"""
Binary uploads.

Files land in the upload directory as ``<ms-timestamp>-<sanitized name>`` and
are served from /uploads, resolved against the upload directory on every
request. Size and media-type checks run before
anything touches the filesystem; the declared media type is trusted as-is.
"""
import logging
import os
import re
import time
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import FileResponse

import config
from errors import bad_request, failure_message, not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Uploads"])
files_router = APIRouter(prefix="/uploads", tags=["Uploads"])

IMAGE_MAX_BYTES = 5 * 1024 * 1024
FILE_MAX_BYTES = 10 * 1024 * 1024
UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(name: str) -> str:
    return UNSAFE_CHARS.sub("_", name)


def stored_filename(original: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}-{sanitize_filename(original)}"


@router.post("")
async def upload_file(file: Optional[UploadFile] = File(None), fileType: Optional[str] = Form(None)):
    with failure_message("Failed to upload file"):
        if file is None:
            raise bad_request("No file provided")

        is_image = fileType == "image"
        if is_image and not (file.content_type or "").startswith("image/"):
            raise bad_request("File must be an image")

        max_size = IMAGE_MAX_BYTES if is_image else FILE_MAX_BYTES
        content = await file.read()
        if len(content) > max_size:
            raise bad_request(f"File size must be less than {'5MB' if is_image else '10MB'}")

        filename = stored_filename(file.filename or "upload")
        target_dir = config.upload_dir()
        os.makedirs(target_dir, exist_ok=True)
        with open(os.path.join(target_dir, filename), "wb") as f:
            f.write(content)

        logger.info(f"Stored upload {filename} ({len(content)} bytes)")
        return {"success": True, "data": {"url": f"/uploads/{filename}", "filename": filename}}


@files_router.get("/{filename}")
def serve_upload(filename: str) -> FileResponse:
    root = os.path.realpath(config.upload_dir())
    path = os.path.realpath(os.path.join(root, filename))
    if os.path.dirname(path) != root or not os.path.isfile(path):
        raise not_found("File")
    return FileResponse(path)
