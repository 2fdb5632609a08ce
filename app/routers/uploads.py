"""
Uploads Router - store logo/background images before generation.

The returned path (/uploads/<name>) is what clients put in
assets.logo / assets.background of a generate request.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.core.config import Settings
from app.deps import get_settings, get_site_store
from app.schemas.site import ErrorResponse, UploadResponse
from app.services.site_store import SiteStore


router = APIRouter(tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Empty or unsupported file"},
        413: {"model": ErrorResponse, "description": "File too large"},
    },
)
async def upload_asset(
    file: UploadFile = File(...),
    store: SiteStore = Depends(get_site_store),
    config: Settings = Depends(get_settings),
):
    # one byte past the limit is enough for save_upload to reject the file
    content = await file.read(store.max_upload_bytes + 1)
    path = store.save_upload(file.filename, content)
    return UploadResponse(path=path, url=f"{config.public_base_url}{path}")
