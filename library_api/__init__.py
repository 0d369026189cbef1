# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from fastapi import FastAPI
from starlette.middleware.authentication import AuthenticationMiddleware

from library_api.auth import AuthBackend, on_auth_error
from library_api.logging import logger
from library_api.middlewares.correlation_id import CorrelationIDMiddleware
from library_api.middlewares.logging_context import LoggingContextMiddleware
from library_api.repositories.retry import RetryPolicy
from library_api.routing import collect_subrouters
from library_api.settings import app_settings
from library_api.storage.db import engine, wait_and_init_db
from library_api.storage.images import ImageStorage
from library_api.utils.error_handler import register_exception_handlers


def startup():
    """
    Application startup handler
    """

    async def wrapper():
        logger.info("Application startup initiated")
        await wait_and_init_db()
        logger.info("Application startup complete")

    return wrapper


def shutdown():
    """
    Application shutdown handler
    """

    async def wrapper():
        logger.info("Application shutdown initiated")
        await engine.dispose()
        logger.info("Application shutdown complete")

    return wrapper


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Sets up:
    - Startup handler waiting for the database, shutdown handler
      disposing the engine pool
    - Shared configuration on ``app.state``: the repository retry policy
      and the image storage, created once and handed to services
    - Routers collected by `collect_subrouters()`
    - Exception handlers rendering errors as ``{Message}`` bodies
    - Middlewares: correlation ID, logging context and bearer token
      authentication
    """
    app = FastAPI(
        title="Library API",
        description="Authors, books and categories",
        version="1.0.0",
    )

    app.state.retry_policy = RetryPolicy.from_settings(app_settings)
    app.state.image_storage = ImageStorage(app_settings.MEDIA_ROOT)

    app.add_event_handler("startup", startup())
    app.add_event_handler("shutdown", shutdown())

    app.include_router(collect_subrouters())

    register_exception_handlers(app)

    # Middlewares (execute in REVERSE order of registration)
    # Execution flow: CorrelationIDMiddleware → LoggingContextMiddleware → AuthenticationMiddleware
    app.add_middleware(
        AuthenticationMiddleware, backend=AuthBackend(), on_error=on_auth_error
    )
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
