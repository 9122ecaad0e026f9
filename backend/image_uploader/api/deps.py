from fastapi import Request

from image_uploader.services.upload import UploadService


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service
