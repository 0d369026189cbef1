import asyncio
from typing import Any

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
)
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from library_api.logging import logger
from library_api.settings import app_settings


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Build `create_async_engine` keyword arguments for a database URL.

    Pool sizing only applies to server databases; statement and connect
    timeouts are handed to asyncpg when it is the driver.

    Args:
        database_url: SQLAlchemy URL of the database.

    Returns:
        Keyword arguments for `create_async_engine`.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options: dict[str, Any] = {
        "pool_size": app_settings.DB_POOL_SIZE,
        "max_overflow": app_settings.DB_MAX_OVERFLOW,
        "pool_recycle": app_settings.DB_POOL_RECYCLE,
        "pool_pre_ping": app_settings.DB_POOL_PRE_PING,
    }
    if "+asyncpg" in database_url:
        options["connect_args"] = {
            "command_timeout": app_settings.DB_COMMAND_TIMEOUT,
            "timeout": app_settings.DB_CONNECT_TIMEOUT,
        }
    return options


engine: AsyncEngine = create_async_engine(
    app_settings.DATABASE_URL,
    echo=False,
    **engine_options(app_settings.DATABASE_URL),
)
async_session = sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def wait_and_init_db(
    retry_interval: int | None = None,
    max_retries: int | None = None,
) -> None:
    """
    Wait until the database is available.

    Note: Database schema is managed by Alembic migrations.
    Run 'alembic upgrade head' once the database is reachable.

    Args:
        retry_interval: Time in seconds between retries.
            Defaults to app_settings.DB_INIT_RETRY_INTERVAL
        max_retries: Maximum number of retries before giving up.
            Defaults to app_settings.DB_INIT_MAX_RETRIES

    Raises:
        RuntimeError: If the database is still unreachable after all retries.
    """
    if retry_interval is None:
        retry_interval = app_settings.DB_INIT_RETRY_INTERVAL
    if max_retries is None:
        max_retries = app_settings.DB_INIT_MAX_RETRIES
    for attempt in range(max_retries):
        try:
            async with engine.connect() as conn:
                await conn.exec_driver_sql("SELECT 1")
            logger.info("Database is now ready.")
            return
        except (OperationalError, OSError):
            logger.warning(
                f"Database not ready, retrying in {retry_interval} seconds... (Attempt {attempt + 1}/{max_retries})"
            )
            await asyncio.sleep(retry_interval)

    logger.error("Failed to connect to the database after multiple attempts.")
    raise RuntimeError("Database connection could not be established.")
