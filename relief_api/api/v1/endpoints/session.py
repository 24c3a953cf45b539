"""Caller identity endpoints."""

from typing import Any, Optional

from fastapi import APIRouter, Depends

from relief_api.core.deps import authenticate, optional_authenticate, require_authenticated
from relief_api.core.rbac import Identity
from relief_api.core.responses import success_response
from relief_api.schemas.session import IdentityResponse, SessionResponse

router = APIRouter()


@router.get("/users/me", dependencies=[Depends(authenticate), Depends(require_authenticated())])
async def read_current_user(current: Identity = Depends(authenticate)) -> Any:
    """Resolved identity of the caller, including explicit permissions."""
    return success_response(IdentityResponse.from_identity(current))


@router.get("/session")
async def read_session(current: Optional[Identity] = Depends(optional_authenticate)) -> Any:
    """Never fails: anonymous callers get authenticated=false."""
    if current is None:
        return success_response(SessionResponse(authenticated=False))
    return success_response(
        SessionResponse(authenticated=True, user=IdentityResponse.from_identity(current))
    )
