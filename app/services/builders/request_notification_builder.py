# app/services/builders/request_notification_builder.py
"""
Monta as notificações do ciclo de vida de uma solicitação.

Funções puras: recebem o RequestModel (com relacionamentos carregados) e devolvem
um NotificationDraft. Para drafts de admin, `user_id` fica None e é preenchido
por destinatário.
"""
from __future__ import annotations

from typing import Any, Literal

from app.core.interfaces.request_notifier import NotificationDraft, NotificationType
from app.core.status_transition import RequestStatus
from app.infrastructure.database.models.request_model import RequestModel


def _link(req: RequestModel) -> str:
    return f"/requests/{req.id}"


def _service_name(req: RequestModel) -> str | None:
    svc = getattr(req, "service", None)
    return getattr(svc, "name", None) or None


def _client_name(req: RequestModel) -> str | None:
    user = getattr(req, "user", None)
    return getattr(user, "full_name", None) or None


def _employee_name(req: RequestModel) -> str | None:
    emp = getattr(req, "assigned_to", None)
    return getattr(emp, "full_name", None) or None


def _base_data(req: RequestModel) -> dict[str, Any]:
    data: dict[str, Any] = {"requestId": req.id}
    if req.custom_id:
        data["customId"] = req.custom_id
    return data


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, RequestStatus) else str(status)


class RequestNotificationBuilder:
    @staticmethod
    def build_created(req: RequestModel, audience: Literal["client", "admin"]) -> NotificationDraft:
        service = _service_name(req) or "serviço"
        if audience == "client":
            message = f"Sua solicitação de {service} foi criada com sucesso."
        else:
            message = f"Nova solicitação de {_client_name(req) or 'um cliente'} para {service}."

        data = _base_data(req)
        data.update(
            {
                "serviceId": req.service_id,
                "serviceName": _service_name(req),
                "clientId": req.user_id,
                "clientName": _client_name(req),
            }
        )
        return NotificationDraft(
            user_id=req.user_id if audience == "client" else None,
            type=NotificationType.REQUEST_CREATED,
            message=message,
            data=data,
            link=_link(req),
        )

    @staticmethod
    def build_assigned(req: RequestModel, audience: Literal["employee", "client"]) -> NotificationDraft:
        service = _service_name(req) or "serviço"
        if audience == "employee":
            message = f"Você foi atribuído à solicitação de {service}."
            user_id = req.assigned_to_id
        else:
            message = f"Sua solicitação de {service} foi atribuída a {_employee_name(req) or 'um funcionário'}."
            user_id = req.user_id

        data = _base_data(req)
        data.update(
            {
                "previousStatus": RequestStatus.PENDING.value,
                "newStatus": RequestStatus.ONGOING.value,
                "employeeId": req.assigned_to_id,
            }
        )
        if _employee_name(req):
            data["employeeName"] = _employee_name(req)

        return NotificationDraft(
            user_id=user_id,
            type=NotificationType.REQUEST_ASSIGNED,
            message=message,
            data=data,
            link=_link(req),
        )

    @staticmethod
    def build_cancellation_requested(
        req: RequestModel,
        reason: str | None,
        audience: Literal["admin", "employee"],
    ) -> NotificationDraft:
        service = _service_name(req) or "serviço"
        message = f"Cancelamento solicitado para {service} por {_client_name(req) or 'um cliente'}."
        if reason:
            message += f" Motivo: {reason}"

        data = _base_data(req)
        data.update(
            {
                "cancellationReason": reason,
                "status": _status_value(req.status),
            }
        )
        if req.assigned_to_id is not None:
            data["employeeId"] = req.assigned_to_id
            if _employee_name(req):
                data["employeeName"] = _employee_name(req)

        return NotificationDraft(
            user_id=req.assigned_to_id if audience == "employee" else None,
            type=NotificationType.REQUEST_CANCELLATION_REQUESTED,
            message=message,
            data=data,
            link=_link(req),
        )

    @staticmethod
    def build_cancelled(req: RequestModel, previous_status: RequestStatus | str) -> NotificationDraft:
        service = _service_name(req) or "serviço"

        data = _base_data(req)
        data.update(
            {
                "previousStatus": _status_value(previous_status),
                "newStatus": RequestStatus.CANCELLED.value,
            }
        )
        return NotificationDraft(
            user_id=req.user_id,
            type=NotificationType.REQUEST_CANCELLED,
            message=f"Sua solicitação de {service} foi cancelada.",
            data=data,
            link=_link(req),
        )

    @staticmethod
    def build_completed(req: RequestModel, notes: str | None = None) -> NotificationDraft:
        service = _service_name(req) or "serviço"

        data = _base_data(req)
        data.update(
            {
                "previousStatus": RequestStatus.ONGOING.value,
                "newStatus": RequestStatus.COMPLETED.value,
            }
        )
        if notes:
            data["completionNotes"] = notes

        return NotificationDraft(
            user_id=req.user_id,
            type=NotificationType.REQUEST_COMPLETED,
            message=f"Sua solicitação de {service} foi concluída.",
            data=data,
            link=_link(req),
        )
