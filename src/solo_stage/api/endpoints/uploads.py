# src/solo_stage/api/endpoints/uploads.py
"""Image upload and retrieval endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from solo_stage.api.dependencies import AdminDep
from solo_stage.schemas.upload import UploadResponse
from solo_stage.services.images import (
    ImageStore,
    ImageValidationError,
    content_type_for,
    get_image_store,
)

router = APIRouter(prefix="/upload", tags=["uploads"])
images_router = APIRouter(prefix="/images", tags=["uploads"])

ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]

_CACHE_CONTROL = "public, max-age=31536000"


@router.post("", response_model=UploadResponse)
async def upload_image(
    _admin: AdminDep,
    store: ImageStoreDep,
    image: UploadFile | None = File(None),
) -> UploadResponse:
    """Store an uploaded image and return its public URL."""
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No image file provided",
        )
    # Read one byte past the limit so oversized files are rejected without buffering them whole.
    data = await image.read(store.max_bytes + 1)
    try:
        stored = store.save(data, image.content_type)
    except ImageValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return UploadResponse(url=stored.url, filename=stored.filename)


@images_router.get("/{filename}")
async def get_image(filename: str, store: ImageStoreDep) -> FileResponse:
    """Serve a previously uploaded image."""
    path = store.path_for(filename)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return FileResponse(
        path,
        media_type=content_type_for(filename),
        headers={"Cache-Control": _CACHE_CONTROL},
    )
