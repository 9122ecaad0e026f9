"""FastAPI exception handlers for client-side upload errors."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from image_uploader.core.exceptions import MissingFile, PayloadTooLarge, UnexpectedFile
from image_uploader.schemas import MessageResponse, UploadErrorResponse

logger = logging.getLogger(__name__)


async def file_field_handler(
    request: Request, exc: MissingFile | UnexpectedFile
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=MessageResponse(message=str(exc)).model_dump(),
    )


async def payload_too_large_handler(request: Request, exc: PayloadTooLarge) -> JSONResponse:
    logger.warning("Rejected upload of %d bytes (limit %d)", exc.size, exc.limit)
    return JSONResponse(
        status_code=413,
        content=UploadErrorResponse(message="File too large.", error=str(exc)).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MissingFile, file_field_handler)
    app.add_exception_handler(UnexpectedFile, file_field_handler)
    app.add_exception_handler(PayloadTooLarge, payload_too_large_handler)
