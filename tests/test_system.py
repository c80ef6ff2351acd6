"""
Tests for the system API surface.

This module exercises the resource families through a fully wired client
(listing, creating, updating and deleting records), plus system
configuration, the environment endpoint and application downloads.
"""

from typing import Any

import pytest

from dreamfactory.client import DreamFactoryClient
from dreamfactory.errors import InvalidArgumentError, NotFoundError
from dreamfactory.http.facade import HttpMethod
from dreamfactory.models import (
    AppRequest,
    AppResponse,
    ConfigRequest,
    EventScriptRequest,
    LookupRequest,
    RoleResponse,
    ServiceResponse,
    UserResponse,
)
from dreamfactory.query import SqlQuery
from tests.fakes import FakeFacade

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def roles_payload() -> dict[str, Any]:
    """A single role."""
    return {
        "resource": [
            {
                "id": 1,
                "name": "TestRole",
                "description": "Role used by the test suite",
                "is_active": True,
                "role_service_access": [
                    {"service_id": 5, "component": "*", "verb_mask": 31, "requestor_mask": 1}
                ],
            }
        ]
    }


@pytest.fixture
def services_payload() -> dict[str, Any]:
    """Four services of a stock installation."""
    return {
        "resource": [
            {"id": 5, "name": "Database", "label": "Local SQL Database", "type": "sql_db"},
            {"id": 2, "name": "files", "label": "Local File Storage", "type": "local_file"},
            {"id": 3, "name": "email", "label": "Local Email Service", "type": "local_email"},
            {
                "id": 1,
                "name": "system",
                "label": "System Management",
                "type": "system",
                "mutable": False,
                "deletable": False,
            },
        ]
    }


def new_app() -> AppRequest:
    return AppRequest(
        name="Todo List jQuery",
        api_name="todojquery",
        description="Sample app",
        is_active=True,
        url="index.html",
        storage_service_id=3,
        storage_container="applications",
    )


# =============================================================================
# LISTING TESTS
# =============================================================================


class TestListFamilies:
    """Tests for listing the system resource families."""

    @pytest.mark.asyncio
    async def test_get_apps(self, client: DreamFactoryClient, facade: FakeFacade, apps_payload):
        """Test listing applications."""
        facade.add("GET", "system/app", json=apps_payload)

        apps = await client.system.apps.list()

        assert len(apps) == 4
        assert isinstance(apps[0], AppResponse)
        assert apps[0].api_name == "todojquery"

    @pytest.mark.asyncio
    async def test_get_users(self, client, facade, users_payload):
        """Test listing users."""
        facade.add("GET", "system/user", json=users_payload)

        users = await client.system.users.list()

        assert len(users) == 2
        assert isinstance(users[0], UserResponse)
        assert users[0].display_name == "Andrei Smirnov"

    @pytest.mark.asyncio
    async def test_returned_users_carry_no_password(self, client, facade):
        """Test that a password echoed by the server is dropped from the user record."""
        facade.add(
            "GET", "system/user", json={"resource": [{"id": 1, "password": "hunter2"}]}
        )

        users = await client.system.users.list()

        assert "password" not in UserResponse.model_fields
        assert not hasattr(users[0], "password")
        assert "hunter2" not in repr(users[0])
        assert "password" not in users[0].model_dump()

    @pytest.mark.asyncio
    async def test_get_roles(self, client, facade, roles_payload):
        """Test listing roles."""
        facade.add("GET", "system/role", json=roles_payload)

        roles = await client.system.roles.list()

        assert len(roles) == 1
        assert isinstance(roles[0], RoleResponse)
        assert roles[0].name == "TestRole"
        assert roles[0].role_service_access[0]["verb_mask"] == 31

    @pytest.mark.asyncio
    async def test_get_services(self, client, facade, services_payload):
        """Test listing services."""
        facade.add("GET", "system/service", json=services_payload)

        services = await client.system.services.list()

        assert len(services) == 4
        assert isinstance(services[0], ServiceResponse)
        assert services[0].name == "Database"
        assert services[3].deletable is False

    @pytest.mark.asyncio
    async def test_get_admins(self, client, facade, users_payload):
        """Test that admins are listed from their own path."""
        facade.add("GET", "system/admin", json=users_payload)

        admins = await client.system.admins.list(SqlQuery(fields=["id", "email"]))

        assert len(admins) == 2
        assert facade.last_call.params == [("fields", "id,email")]

    @pytest.mark.asyncio
    async def test_empty_family(self, client, facade):
        """Test that an empty family yields an empty list."""
        facade.add("GET", "system/lookup", json={"resource": []})

        assert await client.system.lookups.list() == []


# =============================================================================
# CREATE / UPDATE / DELETE TESTS
# =============================================================================


class TestModifyFamilies:
    """Tests for changing records of the system families."""

    @pytest.mark.asyncio
    async def test_create_app(self, client, facade):
        """Test creating an application."""
        facade.add(
            "POST",
            "system/app",
            json={"resource": [{"id": 10, "name": "Todo List jQuery", "api_name": "todojquery"}]},
        )

        created = await client.system.apps.create(new_app())

        assert created[0].id == 10
        assert created[0].name == "Todo List jQuery"
        assert facade.last_call.json[0]["storage_container"] == "applications"
        assert "id" not in facade.last_call.json[0]

    def test_create_app_without_records(self, client, facade):
        """Test that create() with nothing to create raises before any call."""
        with pytest.raises(InvalidArgumentError):
            client.system.apps.create()

        assert facade.call_count == 0

    @pytest.mark.asyncio
    async def test_update_app(self, client, facade):
        """Test updating an application."""
        facade.add("PATCH", "system/app", json={"resource": [{"id": 10, "is_active": False}]})

        updated = await client.system.apps.update(AppRequest(id=10, is_active=False))

        assert updated[0].is_active is False
        assert facade.last_call.json == [{"id": 10, "is_active": False}]

    @pytest.mark.asyncio
    async def test_delete_users(self, client, facade):
        """Test that deleting user 1 echoes exactly that record."""
        facade.add("DELETE", "system/user", json={"resource": [{"id": 1}]})

        deleted = await client.system.users.delete(1)

        assert [user.id for user in deleted] == [1]
        assert facade.last_call.params == [("ids", "1")]

    @pytest.mark.asyncio
    async def test_delete_apps_with_storage(self, client, facade):
        """Test deleting applications together with their stored files."""
        facade.add("DELETE", "system/app", json={"resource": [{"id": 1}, {"id": 2}, {"id": 3}]})

        deleted = await client.system.apps.delete(1, 2, 3, params={"delete_storage": "true"})

        assert len(deleted) == 3
        assert facade.last_call.params == [("ids", "1,2,3"), ("delete_storage", "true")]

    @pytest.mark.asyncio
    async def test_delete_lookups_by_filter(self, client, facade):
        """Test that lookups can be deleted by filter."""
        facade.add("DELETE", "system/lookup", json={"resource": [{"id": 4}]})

        deleted = await client.system.lookups.delete(query=SqlQuery(filter="name like 'tmp%'"))

        assert deleted[0].id == 4
        assert facade.last_call.params == [("filter", "name like 'tmp%'")]

    def test_cors_rejects_filter_delete(self, client, facade):
        """Test that CORS rules can only be deleted by identifier."""
        with pytest.raises(InvalidArgumentError, match="does not support"):
            client.system.cors.delete(query=SqlQuery(filter="enabled = false"))

        assert facade.call_count == 0

    @pytest.mark.asyncio
    async def test_create_lookup_from_mapping(self, client, facade):
        """Test that plain mappings are accepted as records."""
        facade.add(
            "POST", "system/lookup", json={"resource": [{"id": 8, "name": "region", "value": "eu"}]}
        )

        created = await client.system.lookups.create({"name": "region", "value": "eu"})

        assert created[0].value == "eu"
        assert facade.last_call.json == [{"name": "region", "value": "eu"}]
        assert isinstance(LookupRequest.model_validate(facade.last_call.json[0]), LookupRequest)


class TestEventScripts:
    """Tests for event scripts, which are keyed by event name."""

    @pytest.mark.asyncio
    async def test_get_by_name(self, client, facade):
        """Test fetching a script by its event name."""
        facade.add(
            "GET",
            "system/event_script/user.session.post.post_process",
            json={"name": "user.session.post.post_process", "type": "v8js", "content": "//"},
        )

        script = await client.system.event_scripts.get("user.session.post.post_process")

        assert script.name == "user.session.post.post_process"
        assert script.type == "v8js"

    def test_update_requires_name(self, client, facade):
        """Test that event script updates are matched by name."""
        with pytest.raises(InvalidArgumentError, match="'name' is not set"):
            client.system.event_scripts.update(EventScriptRequest(content="//"))

        assert facade.call_count == 0

    def test_filter_delete_not_supported(self, client):
        """Test that event scripts cannot be deleted by filter."""
        with pytest.raises(InvalidArgumentError):
            client.system.event_scripts.delete(query=SqlQuery(filter="type = 'v8js'"))


# =============================================================================
# CONFIGURATION AND ENVIRONMENT TESTS
# =============================================================================


class TestConfigAndEnvironment:
    """Tests for system configuration and environment."""

    @pytest.mark.asyncio
    async def test_get_config(self, client, facade):
        """Test reading the system configuration."""
        facade.add(
            "GET",
            "system/config",
            json={"db_version": "2.0.0", "allow_guest_user": False, "restricted_verbs": ["PATCH"]},
        )

        config = await client.system.get_config()

        assert config.db_version == "2.0.0"
        assert config.allow_guest_user is False
        assert config.restricted_verbs == ["PATCH"]

    @pytest.mark.asyncio
    async def test_set_config_sends_set_fields(self, client, facade):
        """Test that only explicitly set configuration fields are sent."""
        facade.add("POST", "system/config", json={"allow_guest_user": True})

        result = await client.system.set_config(ConfigRequest(allow_guest_user=True))

        assert result.allow_guest_user is True
        assert facade.last_call.method is HttpMethod.POST
        assert facade.last_call.json == {"allow_guest_user": True}

    def test_set_config_requires_value(self, client, facade):
        """Test that set_config(None) raises before any call."""
        with pytest.raises(InvalidArgumentError):
            client.system.set_config(None)  # type: ignore[arg-type]

        assert facade.call_count == 0

    @pytest.mark.asyncio
    async def test_get_environment(self, client, facade):
        """Test reading the environment."""
        facade.add(
            "GET",
            "system/environment",
            json={"platform": {"version_current": "2.0.4", "is_hosted": False}},
        )

        environment = await client.system.get_environment()

        assert environment.platform["version_current"] == "2.0.4"
        assert environment.server is None


# =============================================================================
# DOWNLOAD TESTS
# =============================================================================


class TestDownloads:
    """Tests for application package and SDK downloads."""

    @pytest.mark.asyncio
    async def test_download_package(self, client, facade):
        """Test downloading an application package."""
        facade.add("GET", "system/app/1", body=b"PK\x03\x04package")

        data = await client.system.download_app_package(1)

        assert data.startswith(b"PK")
        assert facade.last_call.params == [("pkg", "true")]

    @pytest.mark.asyncio
    async def test_download_sdk(self, client, facade):
        """Test downloading an application SDK."""
        facade.add("GET", "system/app/1", body=b"PK\x03\x04sdk")

        data = await client.system.download_app_sdk(1)

        assert len(data) > 0
        assert facade.last_call.params == [("sdk", "true")]

    @pytest.mark.asyncio
    async def test_download_unknown_app(self, client, facade):
        """Test that a missing application raises NotFoundError."""
        facade.add("GET", "system/app/99", status=404, json={"error": {"message": "Not found"}})

        with pytest.raises(NotFoundError):
            await client.system.download_app_package(99)

    @pytest.mark.parametrize("app_id", [0, -1, "1", None, True])
    def test_invalid_app_id(self, client, facade, app_id):
        """Test that invalid application identifiers raise before any call."""
        with pytest.raises(InvalidArgumentError):
            client.system.download_app_sdk(app_id)

        assert facade.call_count == 0
