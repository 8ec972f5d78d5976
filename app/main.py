import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.exceptions import AppException
from app.core.logging import StructuredLogger, setup_logging
from app.infrastructure.cache import create_otp_store
from app.infrastructure.db.connection import database_manager
from app.infrastructure.sms import LoggingSmsGateway
from app.infrastructure.storage import LocalFileStorage
from app.interfaces.http.middleware import LoggingMiddleware
from app.interfaces.http.routes import api_router
from app.schemas.base import HealthCheckSchema

logger = logging.getLogger(__name__)
events = StructuredLogger(__name__)

SERVER_ERROR_BODY = {"success": False, "message": "Server error", "error": "INTERNAL_SERVER_ERROR"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info(f"Starting {settings.project_name} ({settings.environment})")

    database_manager.create_tables()

    app.state.otp_store = create_otp_store(settings.otp)
    app.state.storage = LocalFileStorage(
        base_path=settings.storage.local_storage_path,
        public_base_url=settings.storage.public_base_url,
    )
    app.state.sms_gateway = LoggingSmsGateway()

    try:
        yield
    finally:
        logger.info("Shutting down...")
        database_manager.disconnect()


def create_application() -> FastAPI:
    settings = get_settings()
    setup_logging()

    app = FastAPI(
        title=settings.project_name,
        description="Administrative backend for retailer and employee onboarding",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_origins],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle application-specific exceptions."""
        if exc.status_code >= 500:
            # store and storage failures keep their detail in the log only
            events.error(
                "Server-side failure",
                method=request.method,
                path=request.url.path,
                error=exc.error_code,
                reason=exc.message,
                details=exc.details,
            )
            return JSONResponse(status_code=exc.status_code, content=SERVER_ERROR_BODY)

        content = {
            "success": False,
            "message": exc.message,
            "error": exc.error_code,
        }
        if exc.details:
            content["details"] = jsonable_encoder(exc.details)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": "Request validation failed",
                "error": "VALIDATION_ERROR",
                "details": {"errors": jsonable_encoder(exc.errors())},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle general exceptions."""
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=SERVER_ERROR_BODY)

    @app.get("/health", response_model=HealthCheckSchema)
    def health_check() -> HealthCheckSchema:
        """Health check endpoint."""
        return HealthCheckSchema(
            status="healthy" if database_manager.health_check() else "unhealthy",
            version=settings.version,
            environment=settings.environment,
        )

    app.include_router(api_router)

    return app


app = create_application()


def main():
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
        access_log=True,
        server_header=False,
    )


if __name__ == "__main__":
    main()
