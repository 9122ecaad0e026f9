from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from image_uploader.api.deps import get_upload_service
from image_uploader.core.exceptions import MissingFile, UnexpectedFile
from image_uploader.schemas import (
    MessageResponse,
    UploadErrorResponse,
    UploadRequest,
    UploadResponse,
)
from image_uploader.services.upload import UploadService

router = APIRouter(tags=["uploads"])

IMAGE_FIELD = "image"


@router.put(
    "/upload-image",
    response_model=UploadResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
        413: {"model": UploadErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": UploadErrorResponse},
    },
)
async def upload_image(
    request: Request,
    uploads: UploadService = Depends(get_upload_service),
):
    # Uploaded parts are spooled by Starlette and closed when the form block exits.
    async with request.form() as form:
        files = [item for item in form.getlist(IMAGE_FIELD) if isinstance(item, UploadFile)]
        if not files:
            raise MissingFile()
        if len(files) > 1:
            raise UnexpectedFile(IMAGE_FIELD, len(files))

        image = files[0]
        upload = UploadRequest(
            body=image.file,
            filename=image.filename or "",
            content_type=image.content_type or "application/octet-stream",
            size=image.size,
        )
        result = await uploads.handle_upload(upload)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=UploadErrorResponse(error=result.error or "Unknown error").model_dump(),
        )
    return UploadResponse(file_url=result.file_url)
