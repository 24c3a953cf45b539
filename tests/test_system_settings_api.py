"""
System settings endpoints
"""

import pytest
import pytest_asyncio

from conftest import api_headers, audit_entries, create_user
from relief_api.core.database import AsyncSessionLocal
from relief_api.core.rbac import Permission, UserRole
from relief_api.models.audit_log import AuditLog
from relief_api.models.system_setting import SystemSetting
from relief_api.repositories.system_setting import system_setting_repository

SETTINGS_URL = "/api/v1/admin/system-settings"


async def stored_setting(key: str):
    async with AsyncSessionLocal() as session:
        return await system_setting_repository.get_by_key(session, key)


@pytest_asyncio.fixture
async def platform_settings(database):
    rows = [
        SystemSetting(key="support_email", value="help@relief.example", type="string", category="general"),
        SystemSetting(key="maintenance_mode", value="false", type="boolean", category="general"),
        SystemSetting(key="max_upload_mb", value="10", type="number", category="uploads"),
        SystemSetting(key="allowed_types", value='["jpg", "png"]', type="json", category="uploads"),
    ]
    async with AsyncSessionLocal() as session:
        session.add_all(rows)
        await session.commit()
    return {row.key: row for row in rows}


def keys(response) -> list:
    return [s["key"] for s in response.json()["data"]]


class TestReadSettings:
    @pytest.mark.asyncio
    async def test_list_ordered_by_category_then_key(self, client, admin, platform_settings):
        response = await client.get(SETTINGS_URL, headers=api_headers(admin))

        assert response.status_code == 200
        assert keys(response) == ["maintenance_mode", "support_email", "allowed_types", "max_upload_mb"]

    @pytest.mark.asyncio
    async def test_list_by_category(self, client, admin, platform_settings):
        response = await client.get(f"{SETTINGS_URL}/uploads", headers=api_headers(admin))

        assert keys(response) == ["allowed_types", "max_upload_mb"]

    @pytest.mark.asyncio
    async def test_unknown_category_is_empty(self, client, admin, platform_settings):
        response = await client.get(f"{SETTINGS_URL}/nothing-here", headers=api_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_get_by_key(self, client, admin, platform_settings):
        response = await client.get(f"{SETTINGS_URL}/key/max_upload_mb", headers=api_headers(admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["value"] == "10"
        assert data["type"] == "number"
        assert data["category"] == "uploads"

    @pytest.mark.asyncio
    async def test_unknown_key(self, client, admin, platform_settings):
        response = await client.get(f"{SETTINGS_URL}/key/missing", headers=api_headers(admin))

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "System setting not found"}

    @pytest.mark.asyncio
    async def test_requires_manage_system_settings(self, client, platform_settings):
        sysadmin = await create_user(
            "auditor",
            role=UserRole.SYSTEM_ADMINISTRATOR,
            permissions=[Permission.VIEW_AUDIT_LOGS],
        )

        response = await client.get(SETTINGS_URL, headers=api_headers(sysadmin))

        assert response.status_code == 403
        assert response.json()["error"] == (
            "Insufficient permissions. Required permission: MANAGE_SYSTEM_SETTINGS"
        )

    @pytest.mark.asyncio
    async def test_system_administrator_with_permission(self, client, platform_settings):
        sysadmin = await create_user(
            "settings-admin",
            role=UserRole.SYSTEM_ADMINISTRATOR,
            permissions=[Permission.MANAGE_SYSTEM_SETTINGS],
        )

        response = await client.get(SETTINGS_URL, headers=api_headers(sysadmin))

        assert response.status_code == 200


class TestUpdateSetting:
    @pytest.mark.asyncio
    async def test_update_value(self, client, admin, platform_settings):
        response = await client.put(
            f"{SETTINGS_URL}/max_upload_mb",
            json={"value": "25"},
            headers=api_headers(admin, **{"X-Forwarded-For": "198.51.100.4"}),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "System setting updated successfully"
        assert response.json()["data"]["value"] == "25"
        assert response.json()["data"]["updatedBy"] == admin.id

        stored = await stored_setting("max_upload_mb")
        assert stored.value == "25"
        assert stored.updated_by == admin.id

        entries = await audit_entries(action="SYSTEM_SETTING_UPDATED")
        assert len(entries) == 1
        assert entries[0].resource_type == "system_setting"
        assert entries[0].resource_id == "max_upload_mb"
        assert entries[0].details == {"value": "25"}
        assert entries[0].ip_address == "198.51.100.4"

    @pytest.mark.asyncio
    async def test_longest_key_is_audited_in_full(self, client, admin, database):
        key = "notifications.escalation_contact_" + "x" * 67
        assert len(key) == SystemSetting.__table__.c.key.type.length
        async with AsyncSessionLocal() as session:
            session.add(SystemSetting(key=key, value="ops@relief.example", type="string", category="general"))
            await session.commit()

        response = await client.put(
            f"{SETTINGS_URL}/{key}",
            json={"value": "desk@relief.example"},
            headers=api_headers(admin),
        )

        assert response.status_code == 200
        entries = await audit_entries(action="SYSTEM_SETTING_UPDATED")
        assert len(entries) == 1
        assert entries[0].resource_id == key
        assert AuditLog.__table__.c.resource_id.type.length >= len(key)

    @pytest.mark.asyncio
    async def test_value_must_match_type(self, client, admin, platform_settings):
        response = await client.put(
            f"{SETTINGS_URL}/max_upload_mb",
            json={"value": "lots"},
            headers=api_headers(admin),
        )

        assert response.status_code == 400
        assert (await stored_setting("max_upload_mb")).value == "10"
        assert await audit_entries() == []

    @pytest.mark.asyncio
    async def test_changing_type_revalidates_current_value(self, client, admin, platform_settings):
        response = await client.put(
            f"{SETTINGS_URL}/support_email",
            json={"type": "number"},
            headers=api_headers(admin),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_key(self, client, admin, platform_settings):
        response = await client.put(
            f"{SETTINGS_URL}/missing",
            json={"value": "x"},
            headers=api_headers(admin),
        )

        assert response.status_code == 404
        assert await audit_entries() == []


class TestBulkUpdate:
    @pytest.mark.asyncio
    async def test_bulk_update(self, client, admin, platform_settings):
        response = await client.post(
            f"{SETTINGS_URL}/bulk",
            json={
                "settings": [
                    {"key": "maintenance_mode", "value": "true"},
                    {"key": "max_upload_mb", "value": "50"},
                ]
            },
            headers=api_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "System settings updated successfully"
        assert [s["value"] for s in response.json()["data"]] == ["true", "50"]
        assert (await stored_setting("maintenance_mode")).value == "true"
        assert (await stored_setting("max_upload_mb")).value == "50"

        entries = await audit_entries(action="SYSTEM_SETTING_UPDATED")
        assert len(entries) == 1
        assert entries[0].resource_id == "bulk"
        assert entries[0].details == {"count": 2}

    @pytest.mark.asyncio
    async def test_unknown_key_rejects_whole_batch(self, client, admin, platform_settings):
        response = await client.post(
            f"{SETTINGS_URL}/bulk",
            json={
                "settings": [
                    {"key": "maintenance_mode", "value": "true"},
                    {"key": "ghost", "value": "1"},
                    {"key": "phantom", "value": "2"},
                ]
            },
            headers=api_headers(admin),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "System settings not found: ghost, phantom"
        assert (await stored_setting("maintenance_mode")).value == "false"
        assert await audit_entries() == []

    @pytest.mark.asyncio
    async def test_invalid_value_rejects_whole_batch(self, client, admin, platform_settings):
        response = await client.post(
            f"{SETTINGS_URL}/bulk",
            json={
                "settings": [
                    {"key": "max_upload_mb", "value": "50"},
                    {"key": "allowed_types", "value": "[not json"},
                ]
            },
            headers=api_headers(admin),
        )

        assert response.status_code == 400
        assert (await stored_setting("max_upload_mb")).value == "10"
        assert await audit_entries() == []

    @pytest.mark.asyncio
    async def test_empty_batch(self, client, admin, platform_settings):
        response = await client.post(f"{SETTINGS_URL}/bulk", json={"settings": []}, headers=api_headers(admin))

        assert response.status_code == 400
