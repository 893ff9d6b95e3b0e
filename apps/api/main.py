"""
FastAPI application entrypoint.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from apps.api.config import get_settings
from apps.api.jobs.dispatcher import ArqJobSink, JobDispatcher
from apps.api.routers import app as app_routes
from apps.api.routers import auth, files, users
from packages.shared.exceptions import (
    AppException,
    app_exception_handler,
    request_validation_handler,
)

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start and stop the post-upload job dispatcher."""
    logging.basicConfig(level=settings.log_level)
    logger.info(f"Starting {settings.app_name} on port {settings.port}")

    dispatcher = JobDispatcher(
        ArqJobSink(settings.redis_url),
        max_pending=settings.dispatcher_queue_size,
    )
    await dispatcher.start()
    app.state.dispatcher = dispatcher

    yield

    await dispatcher.stop()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# Error rendering
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(SQLAlchemyError, app_exception_handler)
app.add_exception_handler(OSError, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

# Include routers
app.include_router(app_routes.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(files.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("apps.api.main:app", host=settings.host, port=settings.port)
