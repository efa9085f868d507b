from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ..deps import get_image_storage
from ..errors import ErrorResponse
from ..models import AuthenticatedUser
from ..schemas import ImageUploadOut
from ..security import require_user
from ..services.images import ImageStorage

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post(
    "/images",
    response_model=ImageUploadOut,
    status_code=201,
    summary="Subir imagen de receta (jpeg/png/gif/webp, máx. 5MB)",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def upload_image(
    image: UploadFile = File(...),
    images: ImageStorage = Depends(get_image_storage),
    user: AuthenticatedUser = Depends(require_user),
):
    data = await image.read()
    ref = images.save(image.filename or "", image.content_type, data)
    return ImageUploadOut(image_url=ref)
