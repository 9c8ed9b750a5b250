"""Image uploads for category icons and the site logo."""

import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from fastapi.responses import FileResponse

from ..config import get_config
from ..services.auth import Session
from .auth import get_current_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])

CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}


def get_upload_dir() -> Path:
    """Uploads live next to the database file."""
    data_dir = Path(get_config().database.path).parent
    upload_dir = data_dir / "uploads"
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


@router.post("/api/admin/uploads")
async def upload_image(
    file: UploadFile = File(...),
    session: Session = Depends(get_current_session),
):
    """Upload an image and return the URL to store as icon or logo."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    uploads = get_config().uploads
    ext = Path(file.filename).suffix.lower()
    if ext not in uploads.allowed_extensions:
        raise HTTPException(
            status_code=400,
            detail=f"File type not allowed. Allowed: {', '.join(uploads.allowed_extensions)}"
        )

    content = await file.read()
    if len(content) > uploads.max_file_size:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {uploads.max_file_size // 1024} KB"
        )

    safe_filename = f"{uuid.uuid4().hex[:12]}{ext}"
    file_path = get_upload_dir() / safe_filename
    file_path.write_bytes(content)
    logger.info(f"User '{session.username}' uploaded {file.filename} as {safe_filename}")

    return {
        "url": f"/api/uploads/{safe_filename}",
        "filename": file.filename,
        "size": len(content),
    }


@router.get("/api/uploads/{filename}")
async def get_image(filename: str):
    """Serve an uploaded image (public: icons and logos appear on reader pages)."""
    # Prevent path traversal
    if "/" in filename or "\\" in filename or ".." in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    file_path = get_upload_dir() / filename
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    ext = Path(filename).suffix.lower()
    return FileResponse(
        file_path,
        media_type=CONTENT_TYPES.get(ext, "application/octet-stream"),
    )
