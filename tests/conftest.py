"""
Shared fixtures: in-memory sqlite database, ASGI client and user factories
"""

import os

# Must be set before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["JWT_SECRET_KEY"] = "relief-test-secret-key-with-more-than-32-characters"
os.environ["AUTH_TRUSTED_ISSUERS"] = "relief-api"
os.environ["LOGIN_URL"] = "/login"

from datetime import timedelta
from typing import Optional

import httpx
import pytest_asyncio
from sqlalchemy import select
from starlette.requests import Request

import relief_api.models  # noqa: F401
from relief_api.core.database import AsyncSessionLocal, Base, engine
from relief_api.core.rbac import UserRole, UserStatus
from relief_api.core.security import create_access_token
from relief_api.main import app
from relief_api.models.audit_log import AuditLog
from relief_api.models.user import User


@pytest_asyncio.fixture
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client(database):
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


async def create_user(
    username: str,
    role: UserRole = UserRole.USER,
    status: UserStatus = UserStatus.ACTIVE,
    permissions: Optional[list] = None,
) -> User:
    async with AsyncSessionLocal() as session:
        user = User(
            username=username,
            hashed_password="not-a-real-hash",
            role=role.value,
            status=status.value,
            permissions=[getattr(p, "value", p) for p in (permissions or [])],
        )
        session.add(user)
        await session.commit()
        return user


def api_headers(user: Optional[User] = None, expires_delta: Optional[timedelta] = None, **extra) -> dict:
    """Headers of a programmatic (JSON) caller, optionally authenticated"""
    headers = {"Accept": "application/json"}
    if user is not None:
        headers["Authorization"] = f"Bearer {create_access_token(user.id, expires_delta=expires_delta)}"
    headers.update(extra)
    return headers


def browser_headers(user: Optional[User] = None) -> dict:
    headers = {"Accept": "text/html,application/xhtml+xml"}
    if user is not None:
        headers["Authorization"] = f"Bearer {create_access_token(user.id)}"
    return headers


def make_request(headers: Optional[dict] = None, client: Optional[tuple] = ("10.0.0.1", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest_asyncio.fixture
async def admin(database) -> User:
    return await create_user("root-admin", role=UserRole.ADMIN)


async def create_audit_log(**fields) -> AuditLog:
    """Insert an audit row directly, allowing an explicit created_at"""
    fields.setdefault("ip_address", "10.0.0.1")
    fields.setdefault("user_agent", "pytest")
    async with AsyncSessionLocal() as session:
        entry = AuditLog(**fields)
        session.add(entry)
        await session.commit()
        return entry


async def audit_entries(**filters) -> list:
    """Stored audit rows matching the column filters, oldest first"""
    async with AsyncSessionLocal() as session:
        query = select(AuditLog).filter_by(**filters).order_by(AuditLog.id)
        return list((await session.execute(query)).scalars().all())
