"""Database engine factory for the remote document store."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from backend.formflow.config import Settings


def normalise_async_url(database_url: str) -> str:
    """Convert sync driver URLs to their async equivalents."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return database_url


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string "
            "when remote_backend is 'sql'."
        )

    return create_async_engine(
        normalise_async_url(settings.database_url), pool_pre_ping=True, echo=False
    )

