"""Health check endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.formflow.api.deps import Services, get_services
from backend.formflow.db.repositories import DRAFTS_COLLECTION

router = APIRouter()


async def check_remote(services: Services) -> tuple[bool, str]:
    """Check remote document store reachability.

    Returns:
        (is_ok, status_message)
    """
    try:
        await services.store.get(DRAFTS_COLLECTION, "__healthcheck__")
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple liveness check.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(
    services: Annotated[Services, Depends(get_services)],
) -> dict[str, Any]:
    """Readiness check.

    The remote store is reported but does not fail readiness: drafts keep
    working from the local tier while it is down.
    """
    remote_ok, remote_status = await check_remote(services)

    return {
        "status": "ok" if remote_ok else "degraded",
        "components": {
            "remote_store": remote_status,
            "pending_mirror_writes": services.persistence.mirror.pending,
            "mirror_failures": services.persistence.mirror.failure_count,
        },
    }
