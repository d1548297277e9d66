"""Tests for health, services, locations, users and notifications endpoints."""

from app.config.settings import settings
from app.core.roles import UserRole
from tests.fixtures.app_fixtures import API_BASE
from tests.fixtures.db_fixtures import future


def test_health(client):
    response = client.get(f"{settings.app_prefix}/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_health_db(client):
    response = client.get(f"{settings.app_prefix}/health/db")

    assert response.status_code == 200
    assert response.get_json() == {"db": "ok"}


class TestServices:
    def test_everyone_lists_active_services(self, client, committed_world, auth_header):
        response = client.get(f"{API_BASE}/services", headers=auth_header(committed_world.client_id, UserRole.CLIENT))

        assert response.status_code == 200
        names = [s["name"] for s in response.get_json()]
        assert names == ["Encanamento", "Limpeza"]

    def test_only_admin_creates(self, client, committed_world, auth_header):
        body = {"name": "Elétrica", "code": "ele"}

        denied = client.post(
            f"{API_BASE}/services", json=body, headers=auth_header(committed_world.client_id, UserRole.CLIENT)
        )
        created = client.post(
            f"{API_BASE}/services", json=body, headers=auth_header(committed_world.admin_id, UserRole.ADMIN)
        )

        assert denied.status_code == 403
        assert created.status_code == 201
        assert created.get_json()["code"] == "ELE"

    def test_duplicate_code_is_409(self, client, committed_world, auth_header):
        response = client.post(
            f"{API_BASE}/services",
            json={"name": "Outro encanamento", "code": "PLB"},
            headers=auth_header(committed_world.admin_id, UserRole.ADMIN),
        )
        assert response.status_code == 409

    def test_deleted_service_disappears(self, client, committed_world, auth_header):
        admin = auth_header(committed_world.admin_id, UserRole.ADMIN)

        assert client.delete(f"{API_BASE}/services/{committed_world.uncoded_service_id}", headers=admin).status_code == 204
        names = [s["name"] for s in client.get(f"{API_BASE}/services", headers=admin).get_json()]
        assert names == ["Encanamento"]
        assert client.delete(f"{API_BASE}/services/{committed_world.uncoded_service_id}", headers=admin).status_code == 404


class TestLocations:
    def test_create_and_list_own(self, client, committed_world, auth_header):
        headers = auth_header(committed_world.client_id, UserRole.CLIENT)

        created = client.post(
            f"{API_BASE}/locations",
            json={"street": "Av. Boa Viagem, 100", "city": "Recife", "state": "PE", "floor": "3"},
            headers=headers,
        )
        assert created.status_code == 201
        assert created.get_json()["user_id"] == committed_world.client_id

        listed = client.get(f"{API_BASE}/locations", headers=headers).get_json()
        assert [x["street"] for x in listed] == ["Rua A, 10", "Av. Boa Viagem, 100"]


class TestUsers:
    def test_admin_creates_user(self, client, committed_world, auth_header):
        response = client.post(
            f"{API_BASE}/users",
            json={"full_name": "Nova Tecnica", "email": "Nova@Servicos.com.br", "role": "EMPLOYEE"},
            headers=auth_header(committed_world.admin_id, UserRole.ADMIN),
        )

        assert response.status_code == 201
        assert response.get_json()["email"] == "nova@servicos.com.br"
        assert response.get_json()["role"] == "EMPLOYEE"

    def test_duplicate_email_is_409(self, client, committed_world, auth_header):
        response = client.post(
            f"{API_BASE}/users",
            json={"full_name": "Carla de Novo", "email": "carla.cliente@servicos.com.br"},
            headers=auth_header(committed_world.admin_id, UserRole.ADMIN),
        )
        assert response.status_code == 409

    def test_list_by_role(self, client, committed_world, auth_header):
        response = client.get(
            f"{API_BASE}/users?role=employee", headers=auth_header(committed_world.admin_id, UserRole.ADMIN)
        )

        data = response.get_json()
        assert data["total"] == 2
        assert {u["full_name"] for u in data["items"]} == {"Eduardo Tecnico", "Elisa Tecnica"}

    def test_non_admin_is_403(self, client, committed_world, auth_header):
        response = client.get(f"{API_BASE}/users", headers=auth_header(committed_world.employee_id, UserRole.EMPLOYEE))
        assert response.status_code == 403


class TestNotifications:
    def test_creation_notifies_and_mark_read(self, client, committed_world, auth_header):
        headers = auth_header(committed_world.client_id, UserRole.CLIENT)
        client.post(
            f"{API_BASE}/requests",
            json={
                "service_id": committed_world.service_id,
                "location_id": committed_world.location_id,
                "execution_date_time": future().isoformat(),
            },
            headers=headers,
        )

        listed = client.get(f"{API_BASE}/notifications", headers=headers).get_json()
        assert listed["unread_count"] == 1
        assert listed["items"][0]["type"] == "REQUEST_CREATED"
        assert listed["items"][0]["link"].startswith("/requests/")

        notification_id = listed["items"][0]["id"]
        assert client.patch(f"{API_BASE}/notifications/{notification_id}/read", headers=headers).status_code == 204

        after = client.get(f"{API_BASE}/notifications?unread=true", headers=headers).get_json()
        assert after["unread_count"] == 0
        assert after["items"] == []

    def test_admin_is_notified_too(self, client, committed_world, auth_header):
        client.post(
            f"{API_BASE}/requests",
            json={
                "service_id": committed_world.service_id,
                "location_id": committed_world.location_id,
                "execution_date_time": future().isoformat(),
            },
            headers=auth_header(committed_world.client_id, UserRole.CLIENT),
        )

        listed = client.get(
            f"{API_BASE}/notifications", headers=auth_header(committed_world.admin_id, UserRole.ADMIN)
        ).get_json()
        assert listed["unread_count"] == 1
        assert "Carla Cliente" in listed["items"][0]["message"]

    def test_marking_unknown_notification_is_404(self, client, committed_world, auth_header):
        response = client.patch(
            f"{API_BASE}/notifications/999/read", headers=auth_header(committed_world.client_id, UserRole.CLIENT)
        )
        assert response.status_code == 404
