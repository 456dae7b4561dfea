# Filename: mediavault/main.py
from contextlib import asynccontextmanager
from typing import Iterable, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

# Routers
from .routers import files as files_router, root as root_router
from .config import Settings, settings as default_settings
from .errors import MediaVaultError
from .logging_config import setup_logging
from .storage import MediaStorage, extension_of

logger = logging.getLogger("mediavault")


class MediaStaticFiles(StaticFiles):
    """Static view of the storage root that only serves allow-listed extensions."""

    def __init__(self, *, allowed_extensions: Iterable[str], **kwargs):
        super().__init__(**kwargs)
        self.allowed_extensions = frozenset(e.lower() for e in allowed_extensions)

    async def get_response(self, path: str, scope):
        if extension_of(path) not in self.allowed_extensions:
            raise StarletteHTTPException(status_code=404)
        return await super().get_response(path, scope)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    # failure here aborts startup
    app.state.storage.ensure_root()
    logger.info("Upload directory: %s", settings.storage_path.resolve())
    logger.info("Max upload size: %d MB", settings.max_upload_size_mb)
    logger.info("Allowed extensions: %s", ", ".join(settings.extension_allow_list))
    yield


async def media_error_handler(request: Request, exc: MediaVaultError):
    if exc.status_code < 500:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": "Invalid request"}, status_code=400)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse({"error": message}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = MediaStorage.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    app.add_exception_handler(MediaVaultError, media_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(files_router.router)
    app.include_router(root_router.router)

    # storage root is created in lifespan
    app.mount(
        settings.public_prefix.rstrip("/"),
        MediaStaticFiles(
            directory=settings.storage_path,
            check_dir=False,
            allowed_extensions=settings.extension_allow_list,
        ),
        name="uploads",
    )
    return app


app = create_app()
