"""Tests for the /requests endpoints through the Flask test client."""

import json

import pytest

from app.core.audit.audit_entities import AuditEntity
from app.core.roles import UserRole
from app.infrastructure.database.session import db_session
from app.repositories.audit_log_repository import AuditLogRepository
from tests.fixtures.app_fixtures import API_BASE
from tests.fixtures.db_fixtures import future

REQUESTS = f"{API_BASE}/requests"


@pytest.fixture
def as_client(committed_world, auth_header):
    return auth_header(committed_world.client_id, UserRole.CLIENT)


@pytest.fixture
def as_employee(committed_world, auth_header):
    return auth_header(committed_world.employee_id, UserRole.EMPLOYEE)


@pytest.fixture
def as_admin(committed_world, auth_header):
    return auth_header(committed_world.admin_id, UserRole.ADMIN)


def create(client, world, headers, **overrides):
    body = {
        "service_id": world.service_id,
        "location_id": world.location_id,
        "execution_date_time": future().isoformat(),
    }
    body.update(overrides)
    return client.post(REQUESTS, json=body, headers=headers)


class TestCreateRoute:
    def test_client_creates_request(self, client, committed_world, as_client):
        response = create(client, committed_world, as_client, template_responses={"pia": "cozinha"})

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "PENDING"
        assert data["custom_id"] == "PLB-0001"
        assert data["service"]["name"] == "Encanamento"
        assert data["user"]["full_name"] == "Carla Cliente"
        assert data["template_responses"] == {"pia": "cozinha"}
        assert data["execution_date_time"].endswith("+00:00")

    def test_creation_is_audited(self, client, committed_world, as_client):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        with db_session() as session:
            rows = AuditLogRepository(session).list_for_entity(entity_name=AuditEntity.REQUEST, entity_id=request_id)
            assert [r.action_name for r in rows] == ["CREATED"]
            assert rows[0].user_id == committed_world.client_id

    def test_employee_cannot_create(self, client, committed_world, as_employee):
        assert create(client, committed_world, as_employee).status_code == 403

    def test_invalid_body_is_400(self, client, committed_world, as_client):
        response = client.post(REQUESTS, json={"location_id": committed_world.location_id}, headers=as_client)

        assert response.status_code == 400
        assert "details" in response.get_json()

    def test_past_date_is_400(self, client, committed_world, as_client):
        response = create(client, committed_world, as_client, execution_date_time=future(-1).isoformat())
        assert response.status_code == 400

    def test_foreign_location_is_404(self, client, committed_world, as_client):
        response = create(client, committed_world, as_client, location_id=committed_world.other_location_id)
        assert response.status_code == 404


class TestReadRoutes:
    def test_list_is_scoped_and_paged(self, client, committed_world, as_client, as_admin, auth_header):
        create(client, committed_world, as_client)
        create(client, committed_world, as_client)
        other = auth_header(committed_world.other_client_id, UserRole.CLIENT)
        create(client, committed_world, other, location_id=committed_world.other_location_id)

        mine = client.get(REQUESTS, headers=as_client).get_json()
        assert mine["total"] == 2
        assert len(mine["items"]) == 2

        page = client.get(f"{REQUESTS}?limit=1&offset=0", headers=as_admin).get_json()
        assert page["total"] == 3
        assert len(page["items"]) == 1
        assert page["limit"] == 1

    def test_status_filter(self, client, committed_world, as_client, as_admin):
        create(client, committed_world, as_client)

        assert client.get(f"{REQUESTS}?status=pending", headers=as_admin).get_json()["total"] == 1
        assert client.get(f"{REQUESTS}?status=ONGOING", headers=as_admin).get_json()["total"] == 0

    def test_invalid_query_params_are_400(self, client, committed_world, as_admin):
        assert client.get(f"{REQUESTS}?status=ARCHIVED", headers=as_admin).status_code == 400
        assert client.get(f"{REQUESTS}?limit=abc", headers=as_admin).status_code == 400
        assert client.get(f"{REQUESTS}?start_date=ontem", headers=as_admin).status_code == 400

    def test_count(self, client, committed_world, as_client):
        create(client, committed_world, as_client)
        response = client.get(f"{REQUESTS}/stats/count", headers=as_client)

        assert response.status_code == 200
        data = response.get_json()
        assert data["count"] == 1
        assert data["by_status"] == {"PENDING": 1, "ONGOING": 0, "COMPLETED": 0, "CANCELLED": 0}
        # ordem dos campos do modelo preservada
        assert list(json.loads(response.data)) == ["count", "by_status"]

    def test_count_by_status_is_scoped(self, client, committed_world, as_client, as_admin, auth_header):
        create(client, committed_world, as_client)
        other = auth_header(committed_world.other_client_id, UserRole.CLIENT)
        create(client, committed_world, other, location_id=committed_world.other_location_id)

        mine = client.get(f"{REQUESTS}/stats/count", headers=as_client).get_json()
        everyone = client.get(f"{REQUESTS}/stats/count", headers=as_admin).get_json()

        assert mine["by_status"]["PENDING"] == 1
        assert everyone["by_status"]["PENDING"] == 2
        assert everyone["count"] == 2

    def test_get_out_of_scope_is_404(self, client, committed_world, as_client, auth_header):
        request_id = create(client, committed_world, as_client).get_json()["id"]
        other = auth_header(committed_world.other_client_id, UserRole.CLIENT)

        assert client.get(f"{REQUESTS}/{request_id}", headers=as_client).status_code == 200
        assert client.get(f"{REQUESTS}/{request_id}", headers=other).status_code == 404


class TestLifecycleRoutes:
    def test_patch_only_touches_sent_keys(self, client, committed_world, as_client):
        created = create(client, committed_world, as_client, note={"a": 1}).get_json()

        response = client.patch(
            f"{REQUESTS}/{created['id']}", json={"template_responses": {"pia": "banheiro"}}, headers=as_client
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["template_responses"] == {"pia": "banheiro"}
        assert data["note"] == {"a": 1}

    def test_client_patching_status_is_403(self, client, committed_world, as_client):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        response = client.patch(f"{REQUESTS}/{request_id}", json={"status": "CANCELLED"}, headers=as_client)
        assert response.status_code == 403

    def test_unknown_status_value_is_400(self, client, committed_world, as_client, as_admin):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        response = client.patch(f"{REQUESTS}/{request_id}", json={"status": "DONE"}, headers=as_admin)
        assert response.status_code == 400

    @pytest.mark.parametrize("key", ["status", "location_id", "execution_date_time"])
    def test_null_for_required_key_leaves_it_untouched(self, client, committed_world, as_client, as_admin, key):
        created = create(client, committed_world, as_client).get_json()

        response = client.patch(
            f"{REQUESTS}/{created['id']}", json={key: None, "note": {"visto": True}}, headers=as_admin
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data[key] == created[key]
        assert data["note"] == {"visto": True}

    def test_patch_assignee_must_be_staff(self, client, committed_world, as_client, as_admin):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        to_client = client.patch(
            f"{REQUESTS}/{request_id}",
            json={"status": "ONGOING", "assigned_to_id": committed_world.other_client_id},
            headers=as_admin,
        )
        to_nobody = client.patch(f"{REQUESTS}/{request_id}", json={"assigned_to_id": 999999}, headers=as_admin)

        assert to_client.status_code == 400
        assert to_nobody.status_code == 404
        after = client.get(f"{REQUESTS}/{request_id}", headers=as_admin).get_json()
        assert after["status"] == "PENDING"
        assert after["assigned_to_id"] is None

    def test_assign_then_complete(self, client, committed_world, as_client, as_employee):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        assigned = client.post(
            f"{REQUESTS}/{request_id}/assign",
            json={"assigned_to_id": committed_world.employee_id},
            headers=as_employee,
        )
        assert assigned.status_code == 200
        assert assigned.get_json()["status"] == "ONGOING"
        assert assigned.get_json()["assigned_to"]["full_name"] == "Eduardo Tecnico"

        done = client.post(f"{REQUESTS}/{request_id}/complete", json={"notes": "ok"}, headers=as_employee)
        assert done.status_code == 200
        assert done.get_json()["status"] == "COMPLETED"
        assert done.get_json()["note"] == {"completionNotes": "ok"}

        with db_session() as session:
            actions = [
                r.action_name
                for r in AuditLogRepository(session).list_for_entity(entity_name=AuditEntity.REQUEST, entity_id=request_id)
            ]
        assert actions == ["CREATED", "ASSIGNED", "COMPLETED"]

    def test_client_cannot_assign_or_complete(self, client, committed_world, as_client):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        assign = client.post(
            f"{REQUESTS}/{request_id}/assign",
            json={"assigned_to_id": committed_world.employee_id},
            headers=as_client,
        )
        complete = client.post(f"{REQUESTS}/{request_id}/complete", json={}, headers=as_client)

        assert assign.status_code == 403
        assert complete.status_code == 403

    def test_employee_cannot_cancel(self, client, committed_world, as_client, as_employee):
        request_id = create(client, committed_world, as_client).get_json()["id"]
        assert client.post(f"{REQUESTS}/{request_id}/cancel", headers=as_employee).status_code == 403

    def test_cancel_without_body(self, client, committed_world, as_client):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        response = client.post(f"{REQUESTS}/{request_id}/cancel", headers=as_client)

        assert response.status_code == 200
        assert response.get_json()["status"] == "CANCELLED"
        assert response.get_json()["cancellation_requested"] is True

    def test_cancel_completed_is_400(self, client, committed_world, as_client, as_admin):
        request_id = create(client, committed_world, as_client).get_json()["id"]
        client.post(
            f"{REQUESTS}/{request_id}/assign", json={"assigned_to_id": committed_world.admin_id}, headers=as_admin
        )
        client.post(f"{REQUESTS}/{request_id}/complete", json={}, headers=as_admin)

        response = client.post(f"{REQUESTS}/{request_id}/cancel", json={"reason": "tarde"}, headers=as_client)
        assert response.status_code == 400
        assert "COMPLETED" in response.get_json()["error"]

    def test_delete_then_get_is_404(self, client, committed_world, as_client):
        request_id = create(client, committed_world, as_client).get_json()["id"]

        assert client.delete(f"{REQUESTS}/{request_id}", headers=as_client).status_code == 204
        assert client.get(f"{REQUESTS}/{request_id}", headers=as_client).status_code == 404
