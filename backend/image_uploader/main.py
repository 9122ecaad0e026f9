import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from image_uploader.api.exception_handlers import register_exception_handlers
from image_uploader.api.routers import uploads as uploads_router
from image_uploader.core.config import get_settings
from image_uploader.services.upload import UploadService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.upload_service = UploadService()
    logger.info("Server is running on http://localhost:%d", settings.port)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        debug=settings.debug,
        title="Image Upload API",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(uploads_router.router)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
