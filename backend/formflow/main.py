"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.formflow.api.deps import Services, build_services
from backend.formflow.api.errors import register_error_handlers
from backend.formflow.api.routes.drafts import router as drafts_router
from backend.formflow.api.routes.forms import router as forms_router
from backend.formflow.api.routes.health import router as health_router
from backend.formflow.api.routes.metrics import router as metrics_router
from backend.formflow.api.routes.submissions import router as submissions_router
from backend.formflow.api.routes.validations import router as validations_router
from backend.formflow.config import get_settings
from backend.formflow.db.sql_store import SqlDocumentStore


def create_app(services: Services | None = None) -> FastAPI:
    """Create the application; tests pass pre-built services."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is None:
            app.state.services = build_services(get_settings())
        else:
            app.state.services = services

        store = app.state.services.store
        if isinstance(store, SqlDocumentStore):
            await store.ensure_schema()

        yield

        await app.state.services.persistence.mirror.drain()
        if isinstance(store, SqlDocumentStore):
            await store.dispose()

    app = FastAPI(title="Formflow API", version="0.1.0", lifespan=lifespan)
    register_error_handlers(app)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(forms_router)
    app.include_router(drafts_router)
    app.include_router(submissions_router)
    app.include_router(validations_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "Formflow API", "version": "0.1.0"}

    return app


app = create_app()
