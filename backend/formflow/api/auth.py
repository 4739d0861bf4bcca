"""Minimal auth dependency.

The identity provider lives outside this service; requests carry the opaque
user id it issued as a bearer token.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from backend.formflow.api.deps import Services, get_services

DEFAULT_USER_ID = "anonymous-dev-user"


async def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the user id from the authorization header.

    Args:
        authorization: Authorization header (e.g., "Bearer <user_id>")

    Returns:
        Opaque user id; a fixed development id when no header is sent

    Raises:
        HTTPException: If the header is malformed
    """
    if not authorization:
        return DEFAULT_USER_ID

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = authorization[7:].strip()  # Strip "Bearer "

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Empty bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


async def get_reviewer_id(
    user_id: Annotated[str, Depends(get_current_user_id)],
    services: Annotated[Services, Depends(get_services)],
) -> str:
    """Resolve the caller as a reviewer.

    Raises:
        HTTPException: 403 if the caller is not a configured reviewer
    """
    if user_id not in services.reviewer_ids:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only reviewers can change a submission's status",
        )
    return user_id
