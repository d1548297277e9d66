"""Tests for the request lifecycle notification drafts."""

from types import SimpleNamespace

from app.core.interfaces.request_notifier import NotificationType
from app.core.status_transition import RequestStatus
from app.services.builders.request_notification_builder import RequestNotificationBuilder


def make_req(**overrides):
    base = dict(
        id=40,
        custom_id="PLB-0007",
        user_id=12,
        service_id=3,
        assigned_to_id=None,
        status="PENDING",
        service=SimpleNamespace(name="Encanamento"),
        user=SimpleNamespace(full_name="Carla Cliente"),
        assigned_to=None,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_created_for_client():
    draft = RequestNotificationBuilder.build_created(make_req(), "client")

    assert draft.user_id == 12
    assert draft.type == NotificationType.REQUEST_CREATED
    assert "Encanamento" in draft.message
    assert draft.link == "/requests/40"
    assert draft.data["requestId"] == 40
    assert draft.data["customId"] == "PLB-0007"


def test_created_for_admin_has_no_fixed_recipient():
    draft = RequestNotificationBuilder.build_created(make_req(), "admin")

    assert draft.user_id is None
    assert "Carla Cliente" in draft.message


def test_missing_names_fall_back():
    draft = RequestNotificationBuilder.build_created(make_req(service=None, user=None, custom_id=None), "admin")

    assert "um cliente" in draft.message
    assert "serviço" in draft.message
    assert "customId" not in draft.data


def test_assigned_for_employee_and_client():
    req = make_req(assigned_to_id=5, assigned_to=SimpleNamespace(full_name="Eduardo Tecnico"), status="ONGOING")

    employee = RequestNotificationBuilder.build_assigned(req, "employee")
    client = RequestNotificationBuilder.build_assigned(req, "client")

    assert employee.user_id == 5
    assert client.user_id == 12
    assert "Eduardo Tecnico" in client.message
    assert client.data["newStatus"] == RequestStatus.ONGOING.value
    assert client.data["employeeName"] == "Eduardo Tecnico"


def test_cancellation_requested_includes_reason():
    req = make_req(assigned_to_id=5, status="ONGOING")

    admin = RequestNotificationBuilder.build_cancellation_requested(req, "mudei de ideia", "admin")
    employee = RequestNotificationBuilder.build_cancellation_requested(req, None, "employee")

    assert admin.user_id is None
    assert "Motivo: mudei de ideia" in admin.message
    assert admin.data["cancellationReason"] == "mudei de ideia"
    assert employee.user_id == 5
    assert "Motivo" not in employee.message


def test_cancelled_and_completed_go_to_client():
    req = make_req()

    cancelled = RequestNotificationBuilder.build_cancelled(req, RequestStatus.PENDING)
    completed = RequestNotificationBuilder.build_completed(req, "ok")

    assert cancelled.user_id == 12
    assert cancelled.data["previousStatus"] == "PENDING"
    assert completed.type == NotificationType.REQUEST_COMPLETED
    assert completed.data["completionNotes"] == "ok"
