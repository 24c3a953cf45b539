"""
FastAPI Dependencies
Identity resolution and role/permission gates

Gates are attached to routes in order, e.g.

    dependencies=[
        Depends(authenticate),
        Depends(require_admin()),
        Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
    ]

and the first failing stage short-circuits the request.
"""

from typing import Callable, Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from relief_api.core.database import get_db
from relief_api.core.exceptions import (
    AccountDisabledError,
    AuthenticationFailedError,
    AuthRequiredError,
    ForbiddenError,
    InvalidTokenError,
    ReliefAPIError,
)
from relief_api.core.handlers import ACCESS_DENIED_MESSAGE
from relief_api.core.permission_resolver import permission_resolver
from relief_api.core.rbac import (
    Identity,
    Permission,
    UserRole,
    UserStatus,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from relief_api.core.security import verify_token
from relief_api.repositories.user import user_repository

logger = structlog.get_logger()

MISSING_HEADER_MESSAGE = "Authorization header is missing"
INVALID_HEADER_MESSAGE = "Invalid authorization header format. Expected: Bearer <token>"
INVALID_TOKEN_MESSAGE = "Invalid or expired access token"
USER_NOT_FOUND_MESSAGE = "User not found"
AUTH_REQUIRED_MESSAGE = "Authentication required"


def _extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise AuthRequiredError(MISSING_HEADER_MESSAGE)

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthRequiredError(INVALID_HEADER_MESSAGE)

    return parts[1]


async def _resolve_identity(request: Request, db: AsyncSession) -> Identity:
    token = _extract_bearer_token(request)

    try:
        subject = verify_token(token, token_type="access")
        user_id = int(subject)
    except (InvalidTokenError, ValueError):
        raise AuthRequiredError(INVALID_TOKEN_MESSAGE)

    user = await user_repository.get(db, id=user_id)
    if not user:
        logger.warning("Token subject not found", user_id=user_id)
        raise AuthRequiredError(USER_NOT_FOUND_MESSAGE)

    identity = permission_resolver.resolve_identity(user)
    if identity.status != UserStatus.ACTIVE:
        logger.warning("Inactive account attempted access", user_id=user_id, status=identity.status.value)
        raise AccountDisabledError()

    return identity


def get_request_identity(request: Request) -> Optional[Identity]:
    return getattr(request.state, "identity", None)


async def authenticate(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Resolve the caller from its bearer token and attach it to the request

    Raises:
        AuthRequiredError: Missing/malformed header, bad token or unknown user
        AccountDisabledError: User exists but is not ACTIVE
        AuthenticationFailedError: Anything unexpected while resolving
    """
    try:
        identity = await _resolve_identity(request, db)
    except ReliefAPIError as exc:
        logger.info("Authentication rejected", path=request.url.path, reason=exc.message)
        raise
    except Exception as e:
        logger.error("Authentication error", path=request.url.path, error=str(e))
        raise AuthenticationFailedError()

    request.state.identity = identity
    logger.debug("User authenticated successfully", user_id=identity.id, role=identity.role.value)
    return identity


async def optional_authenticate(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[Identity]:
    """Same as authenticate, but any failure leaves the request anonymous"""
    identity = None
    if request.headers.get("authorization"):
        try:
            identity = await _resolve_identity(request, db)
        except Exception as e:
            logger.debug("Optional authentication failed", error=str(e))
            identity = None

    request.state.identity = identity
    return identity


def _require_identity(request: Request) -> Identity:
    identity = get_request_identity(request)
    if identity is None:
        logger.warning("Gate reached without an authenticated identity", path=request.url.path)
        raise AuthRequiredError(AUTH_REQUIRED_MESSAGE)
    return identity


def authorize(*allowed_roles: UserRole) -> Callable:
    """
    Dependency factory for role gates

    Args:
        allowed_roles: Roles allowed through

    Returns:
        Dependency function
    """
    allowed = frozenset(allowed_roles)

    async def role_checker(request: Request) -> Identity:
        identity = _require_identity(request)

        if identity.role not in allowed:
            logger.warning(
                "User lacks required role",
                user_id=identity.id,
                role=identity.role.value,
                required_roles=sorted(r.value for r in allowed),
            )
            raise ForbiddenError(ACCESS_DENIED_MESSAGE)

        return identity

    return role_checker


def require_admin() -> Callable:
    return authorize(UserRole.SYSTEM_ADMINISTRATOR, UserRole.ADMIN)


def require_volunteer_club() -> Callable:
    return authorize(UserRole.VOLUNTEER_CLUB)


def require_admin_or_volunteer_club() -> Callable:
    return authorize(UserRole.SYSTEM_ADMINISTRATOR, UserRole.ADMIN, UserRole.VOLUNTEER_CLUB)


def require_authenticated() -> Callable:
    async def presence_checker(request: Request) -> Identity:
        return _require_identity(request)

    return presence_checker


def _permission_gate(
    permissions: list[Permission],
    check: Callable[[Optional[Identity], Iterable[Permission]], bool],
    api_message: str,
    hint: str,
) -> Callable:
    async def permission_checker(request: Request) -> Identity:
        identity = _require_identity(request)

        if not check(identity, permissions):
            logger.warning(
                "User lacks required permission",
                user_id=identity.id,
                role=identity.role.value,
                required=[p.value for p in permissions],
            )
            raise ForbiddenError(api_message, hint=hint)

        return identity

    return permission_checker


def require_permission(permission: Permission) -> Callable:
    """Dependency factory: identity must hold the permission"""
    return _permission_gate(
        [permission],
        lambda identity, required: has_permission(identity, required[0]),
        f"Insufficient permissions. Required permission: {permission.value}",
        f"This action requires the following permission: {permission.value}",
    )


def require_any_permission(*permissions: Permission) -> Callable:
    """Dependency factory: identity must hold at least one of the permissions"""
    names = ", ".join(p.value for p in permissions)
    return _permission_gate(
        list(permissions),
        has_any_permission,
        f"Insufficient permissions. Required one of: {names}",
        f"This action requires one of the following permissions: {names}",
    )


def require_all_permissions(*permissions: Permission) -> Callable:
    """Dependency factory: identity must hold every one of the permissions"""
    names = ", ".join(p.value for p in permissions)
    return _permission_gate(
        list(permissions),
        has_all_permissions,
        f"Insufficient permissions. Required all of: {names}",
        f"This action requires all of the following permissions: {names}",
    )
