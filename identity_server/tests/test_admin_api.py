"""
Tests for the API resource admin endpoints and application startup.
"""
import json

import pytest
from fastapi.testclient import TestClient

from identity_server.config import API_RESOURCE_NAME
from identity_server.configuration_models import ApiResource
from identity_server.database import ApplicationSession, ConfigurationSession
from identity_server.main import app
from identity_server.models import ApplicationUser, Todo
from identity_server.seed import seed_database


@pytest.fixture
def client():
    seed_database()
    return TestClient(app)


def _stored_resource() -> ApiResource:
    db = ConfigurationSession()
    try:
        return db.query(ApiResource).filter(ApiResource.name == API_RESOURCE_NAME).one()
    finally:
        db.close()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "identity_server"}


def test_startup_seeds_databases():
    with TestClient(app) as c:
        assert c.get("/health").status_code == 200
    db = ApplicationSession()
    try:
        assert db.query(ApplicationUser).count() == 2
        assert db.query(Todo).count() == 2
    finally:
        db.close()


def test_list_api_resources(client):
    r = client.get("/admin/api-resources")
    assert r.status_code == 200
    data = r.json()
    assert len(data) == 1
    resource = data[0]
    assert resource["name"] == API_RESOURCE_NAME
    assert resource["scopes"] == [API_RESOURCE_NAME]
    assert resource["user_claims_text"] == "name\nemail\nphone_number\nrole"
    assert "_state" not in resource


def test_get_api_resource_not_found(client):
    r = client.get("/admin/api-resources/unknown")
    assert r.status_code == 404
    assert r.json()["detail"]["error"] == "not_found"


def test_update_api_resource_user_claims_text(client):
    r = client.put(
        f"/admin/api-resources/{API_RESOURCE_NAME}",
        json={"display_name": "Renamed API", "user_claims_text": "name; email,role  website\n"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["display_name"] == "Renamed API"
    assert data["user_claims"] == ["name", "email", "role", "website"]

    stored = _stored_resource()
    assert stored.display_name == "Renamed API"
    assert json.loads(stored.user_claims) == ["name", "email", "role", "website"]
    assert stored.updated_at is not None

    r = client.get(f"/admin/api-resources/{API_RESOURCE_NAME}")
    assert r.json()["user_claims_text"] == "name\nemail\nrole\nwebsite"


def test_update_api_resource_rejects_empty_scopes(client):
    r = client.put(
        f"/admin/api-resources/{API_RESOURCE_NAME}",
        json={"display_name": "Broken", "scopes": []},
    )
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "invalid_request"
    # Rejected edit is rolled back on the returned resource
    assert detail["resource"]["scopes"] == [API_RESOURCE_NAME]
    assert detail["resource"]["display_name"] != "Broken"

    stored = _stored_resource()
    assert json.loads(stored.scopes) == [API_RESOURCE_NAME]
    assert stored.display_name != "Broken"


def test_update_api_resource_rejects_rename(client):
    r = client.put(f"/admin/api-resources/{API_RESOURCE_NAME}", json={"name": "other"})
    assert r.status_code == 400
    assert r.json()["detail"]["resource"]["name"] == API_RESOURCE_NAME


def test_update_api_resource_rejects_string_scopes(client):
    r = client.put(f"/admin/api-resources/{API_RESOURCE_NAME}", json={"scopes": "abc"})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "invalid_request"
    assert detail["error_description"].startswith("scopes")
    assert detail["resource"]["scopes"] == [API_RESOURCE_NAME]
    assert json.loads(_stored_resource().scopes) == [API_RESOURCE_NAME]


def test_update_api_resource_rejects_non_boolean_enabled(client):
    r = client.put(f"/admin/api-resources/{API_RESOURCE_NAME}", json={"enabled": "yes"})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "invalid_request"
    assert detail["resource"]["enabled"] is True
    assert _stored_resource().enabled is True


def test_update_api_resource_rejects_non_string_claims_text(client):
    before = json.loads(_stored_resource().user_claims)
    r = client.put(
        f"/admin/api-resources/{API_RESOURCE_NAME}",
        json={"display_name": "Typed", "user_claims_text": 5},
    )
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "invalid_request"
    assert detail["resource"]["display_name"] != "Typed"
    stored = _stored_resource()
    assert json.loads(stored.user_claims) == before
    assert stored.display_name != "Typed"
