# app/services/request_service.py

from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError, service_boundary
from app.core.interfaces.request_notifier import NotificationDraft, NotificationSender
from app.core.roles import STAFF_ROLES, UserRole
from app.core.status_transition import (
    RequestStatus,
    validate_transition,
    validate_transition_with_rules,
)
from app.core.time_utils import as_utc, utcnow
from app.infrastructure.database.models.request_model import RequestModel
from app.infrastructure.database.models.service_model import ServiceModel
from app.repositories.counter_repository import CounterRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.request_repository import RequestFilters, RequestRepository, RequestScope
from app.repositories.service_repository import ServiceRepository
from app.repositories.user_repository import UserRepository
from app.services.builders.request_notification_builder import RequestNotificationBuilder
from app.services.folder_service import RequestFolderService

# campos que podem vir num PATCH
UPDATABLE_FIELDS = frozenset(
    {
        "location_id",
        "execution_date_time",
        "template_responses",
        "note",
        "status",
        "assigned_to_id",
    }
)
CLIENT_FORBIDDEN_FIELDS = frozenset({"status", "assigned_to_id"})


def _role(role: UserRole | str) -> UserRole:
    return role if isinstance(role, UserRole) else UserRole(str(role))


def _status(value: RequestStatus | str) -> RequestStatus:
    return value if isinstance(value, RequestStatus) else RequestStatus(str(value))


class RequestService:
    def __init__(
        self,
        *,
        req_repo: RequestRepository,
        service_repo: ServiceRepository,
        location_repo: LocationRepository,
        user_repo: UserRepository,
        counter_repo: CounterRepository,
        notifications: NotificationSender | None = None,
        folders: RequestFolderService | None = None,
    ) -> None:
        self._req_repo = req_repo
        self._service_repo = service_repo
        self._location_repo = location_repo
        self._user_repo = user_repo
        self._counter_repo = counter_repo
        self._notifications = notifications
        self._folders = folders

    # -------- Side effects (best-effort) --------
    def _deliver(self, draft: NotificationDraft, user_id: int | None, *, request_id: int) -> None:
        if not self._notifications or user_id is None:
            return
        try:
            self._notifications.create_notification(
                user_id=int(user_id),
                type=draft.type,
                message=draft.message,
                data=draft.data,
                link=draft.link,
            )
        except Exception:
            # nunca derruba a operação principal
            logger.exception(
                f"Falha ao enviar notificação {draft.type.value} para o usuário {user_id} "
                f"(request {request_id} segue válida)"
            )

    def _deliver_to_admins(self, draft: NotificationDraft, *, request_id: int) -> None:
        try:
            admin_ids = self._user_repo.list_ids_by_role(UserRole.ADMIN)
        except Exception:
            logger.exception(f"Falha ao buscar admins para notificar a request {request_id}")
            return

        for admin_id in admin_ids:
            self._deliver(draft, admin_id, request_id=request_id)

    def _provision_folder(self, req: RequestModel) -> None:
        if not self._folders:
            return
        try:
            self._folders.ensure_request_folder(request_id=int(req.id), user_id=int(req.user_id))
        except Exception as e:
            logger.warning(f"Falha ao criar pasta da request {req.id}: {e}")

    # -------- Helpers --------
    def _get_or_404(self, request_id: int) -> RequestModel:
        req = self._req_repo.get_by_id(request_id)
        if req is None:
            raise NotFoundError(f'Solicitação "{request_id}" não encontrada.')
        return req

    def _get_staff_or_error(self, user_id: int):
        assignee = self._user_repo.get_by_id(user_id)
        if assignee is None:
            raise NotFoundError(f'Usuário "{user_id}" não encontrado.')
        if _role(assignee.role) not in STAFF_ROLES:
            raise BadRequestError("Só é possível atribuir a usuários EMPLOYEE ou ADMIN.")
        return assignee

    def _ensure_future(self, value: datetime | None) -> datetime:
        if value is None:
            raise BadRequestError("A data de execução é obrigatória.")
        dt = as_utc(value)
        if dt <= utcnow():
            raise BadRequestError("A data de execução deve estar no futuro.")
        return dt

    def _next_custom_id(self, service: ServiceModel) -> str | None:
        if not service.code:
            return None
        seq = self._counter_repo.next_value(f"request:{service.code}")
        return f"{service.code}-{seq:04d}"

    # ---------------- create ----------------
    @service_boundary("Falha ao criar a solicitação.")
    def create(
        self,
        *,
        client_id: int,
        service_id: int,
        location_id: int,
        execution_date_time: datetime,
        template_responses: dict[str, Any] | None = None,
        note: dict[str, Any] | None = None,
    ) -> RequestModel:
        service = self._service_repo.get_by_id(service_id)
        if service is None:
            raise NotFoundError(f'Serviço "{service_id}" não encontrado.')

        location = self._location_repo.get_owned(location_id=location_id, user_id=client_id)
        if location is None:
            raise NotFoundError(f'Local "{location_id}" não encontrado ou não pertence a você.')

        execution = self._ensure_future(execution_date_time)

        # TODO: validar template_responses contra service.request_template quando o formato do template for definido

        req = RequestModel(
            custom_id=self._next_custom_id(service),
            user_id=client_id,
            service_id=service.id,
            location_id=location.id,
            execution_date_time=execution,
            template_responses=template_responses,
            note=note,
            status=RequestStatus.PENDING.value,
            cancellation_requested=False,
            created_by=client_id,
            updated_by=client_id,
        )
        req = self._req_repo.add(req)
        logger.info(f"Request {req.id} criada pelo cliente {client_id} (service {service.id})")

        self._provision_folder(req)

        self._deliver(RequestNotificationBuilder.build_created(req, "client"), client_id, request_id=req.id)
        self._deliver_to_admins(RequestNotificationBuilder.build_created(req, "admin"), request_id=req.id)

        return req

    # ---------------- leitura ----------------
    @service_boundary("Falha ao buscar solicitações.")
    def find_all(
        self,
        *,
        actor_id: int,
        role: UserRole | str,
        filters: RequestFilters | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[RequestModel]:
        scope = RequestScope(actor_id=actor_id, role=_role(role))
        return self._req_repo.list_visible(scope=scope, filters=filters, limit=limit, offset=offset)

    @service_boundary("Falha ao buscar a solicitação.")
    def find_one(self, *, request_id: int, actor_id: int, role: UserRole | str) -> RequestModel:
        req = self._get_or_404(request_id)

        # fora do escopo = "não encontrada" (não revela existência)
        if not RequestScope(actor_id=actor_id, role=_role(role)).can_see(req):
            raise NotFoundError(f'Solicitação "{request_id}" não encontrada.')
        return req

    @service_boundary("Falha ao contar solicitações.")
    def count(
        self,
        *,
        actor_id: int,
        role: UserRole | str,
        filters: RequestFilters | None = None,
    ) -> int:
        scope = RequestScope(actor_id=actor_id, role=_role(role))
        return self._req_repo.count(scope=scope, filters=filters)

    @service_boundary("Falha ao contar solicitações.")
    def count_by_status(
        self,
        *,
        actor_id: int,
        role: UserRole | str,
        filters: RequestFilters | None = None,
    ) -> dict[str, int]:
        """Contagem por status (todos os status presentes, zero quando não há nenhuma)."""
        scope = RequestScope(actor_id=actor_id, role=_role(role))
        found = self._req_repo.count_by_status(scope=scope, filters=filters)
        return {s.value: found.get(s.value, 0) for s in RequestStatus}

    # ---------------- update ----------------
    @service_boundary("Falha ao atualizar a solicitação.")
    def update(
        self,
        *,
        request_id: int,
        values: dict[str, Any],
        actor_id: int,
        role: UserRole | str,
    ) -> RequestModel:
        role = _role(role)
        req = self._get_or_404(request_id)

        unknown = set(values) - UPDATABLE_FIELDS
        if unknown:
            raise BadRequestError(f"Campos não permitidos: {', '.join(sorted(unknown))}.")

        if role == UserRole.CLIENT:
            if req.user_id != actor_id:
                raise ForbiddenError("Você só pode alterar suas próprias solicitações.")
            if req.status != RequestStatus.PENDING.value:
                raise ForbiddenError("Você só pode alterar solicitações com status PENDING.")
            if CLIENT_FORBIDDEN_FIELDS & set(values):
                raise ForbiddenError("Cliente não pode alterar status ou responsável.")
        elif role == UserRole.EMPLOYEE:
            if req.assigned_to_id is not None and req.assigned_to_id != actor_id:
                raise ForbiddenError("Você só pode alterar solicitações atribuídas a você.")

        data = dict(values)

        if data.get("location_id") is not None:
            location = self._location_repo.get_owned(location_id=data["location_id"], user_id=req.user_id)
            if location is None:
                raise NotFoundError(
                    f'Local "{data["location_id"]}" não encontrado ou não pertence ao dono da solicitação.'
                )

        if data.get("assigned_to_id") is not None:
            self._get_staff_or_error(data["assigned_to_id"])

        if "execution_date_time" in data:
            data["execution_date_time"] = self._ensure_future(data["execution_date_time"])

        now = utcnow()
        if "status" in data:
            new_status = _status(data["status"])
            new_assignee = data["assigned_to_id"] if "assigned_to_id" in data else req.assigned_to_id
            validate_transition_with_rules(req.status, new_status, new_assignee)

            data["status"] = new_status.value
            if new_status == RequestStatus.COMPLETED:
                data["completed_at"] = now

        data["updated_by"] = actor_id
        data["updated_at"] = now

        req = self._req_repo.update_fields(req, data)
        logger.info(f"Request {req.id} atualizada por {actor_id} ({role.value}): {sorted(values)}")
        return req

    # ---------------- remove (soft delete) ----------------
    @service_boundary("Falha ao excluir a solicitação.")
    def remove(self, *, request_id: int, actor_id: int, role: UserRole | str) -> RequestModel:
        role = _role(role)
        req = self._get_or_404(request_id)

        if role != UserRole.ADMIN:
            if req.user_id != actor_id:
                raise ForbiddenError("Você só pode excluir suas próprias solicitações.")
            if req.status != RequestStatus.PENDING.value:
                raise ForbiddenError("Você só pode excluir solicitações com status PENDING.")

        now = utcnow()
        req = self._req_repo.update_fields(
            req,
            {"deleted_at": now, "updated_at": now, "updated_by": actor_id},
        )
        logger.info(f"Request {req.id} excluída (soft) por {actor_id}")
        return req

    # ---------------- assign ----------------
    @service_boundary("Falha ao atribuir a solicitação.")
    def assign(
        self,
        *,
        request_id: int,
        assigned_to_id: int,
        actor_id: int,
        role: UserRole | str,
    ) -> RequestModel:
        # antes de qualquer busca: não revela se a request existe
        if _role(role) not in STAFF_ROLES:
            raise ForbiddenError("Apenas EMPLOYEE/ADMIN podem atribuir solicitações.")

        req = self._get_or_404(request_id)
        if req.status != RequestStatus.PENDING.value:
            raise BadRequestError("Só é possível atribuir solicitações com status PENDING.")

        assignee = self._get_staff_or_error(assigned_to_id)

        validate_transition_with_rules(req.status, RequestStatus.ONGOING, assignee.id)

        req = self._req_repo.update_fields(
            req,
            {
                "assigned_to_id": assignee.id,
                "status": RequestStatus.ONGOING.value,
                "updated_by": actor_id,
                "updated_at": utcnow(),
            },
        )
        logger.info(f"Request {req.id} atribuída a {assignee.id} por {actor_id}")

        self._deliver(RequestNotificationBuilder.build_assigned(req, "employee"), assignee.id, request_id=req.id)
        self._deliver(RequestNotificationBuilder.build_assigned(req, "client"), req.user_id, request_id=req.id)
        return req

    # ---------------- cancelamento ----------------
    @service_boundary("Falha ao solicitar o cancelamento.")
    def request_cancellation(
        self,
        *,
        request_id: int,
        actor_id: int,
        role: UserRole | str,
        reason: str | None = None,
    ) -> RequestModel:
        role = _role(role)
        req = self._get_or_404(request_id)

        is_admin = role == UserRole.ADMIN
        if req.user_id != actor_id and not is_admin:
            raise ForbiddenError("Você só pode solicitar o cancelamento das suas próprias solicitações.")

        previous = _status(req.status)
        if previous in (RequestStatus.COMPLETED, RequestStatus.CANCELLED):
            raise BadRequestError(f"Não é possível cancelar uma solicitação com status {previous.value}.")

        now = utcnow()
        values: dict[str, Any] = {
            "cancellation_requested": True,
            "cancellation_requested_at": now,
            "cancellation_reason": reason,
            "updated_by": actor_id,
            "updated_at": now,
        }

        # PENDING ou ADMIN: aprovado na hora, na mesma escrita
        auto_approved = previous == RequestStatus.PENDING or is_admin
        if auto_approved:
            validate_transition(previous, RequestStatus.CANCELLED)
            values["status"] = RequestStatus.CANCELLED.value

        req = self._req_repo.update_fields(req, values)
        logger.info(
            f"Cancelamento da request {req.id} solicitado por {actor_id} "
            f"({'aprovado' if auto_approved else 'aguardando aprovação'})"
        )

        self._deliver_to_admins(
            RequestNotificationBuilder.build_cancellation_requested(req, reason, "admin"),
            request_id=req.id,
        )
        if req.assigned_to_id is not None:
            self._deliver(
                RequestNotificationBuilder.build_cancellation_requested(req, reason, "employee"),
                req.assigned_to_id,
                request_id=req.id,
            )
        if auto_approved:
            self._deliver(RequestNotificationBuilder.build_cancelled(req, previous), req.user_id, request_id=req.id)

        return req

    # ---------------- complete ----------------
    @service_boundary("Falha ao concluir a solicitação.")
    def complete(
        self,
        *,
        request_id: int,
        actor_id: int,
        role: UserRole | str,
        notes: str | None = None,
    ) -> RequestModel:
        role = _role(role)
        if role not in STAFF_ROLES:
            raise ForbiddenError("Apenas EMPLOYEE/ADMIN podem concluir solicitações.")

        req = self._get_or_404(request_id)
        if req.status != RequestStatus.ONGOING.value:
            raise BadRequestError("Só é possível concluir solicitações com status ONGOING.")

        if role == UserRole.EMPLOYEE and req.assigned_to_id != actor_id:
            raise ForbiddenError("Você só pode concluir solicitações atribuídas a você.")

        validate_transition(req.status, RequestStatus.COMPLETED)

        now = utcnow()
        values: dict[str, Any] = {
            "status": RequestStatus.COMPLETED.value,
            "completed_at": now,
            "updated_by": actor_id,
            "updated_at": now,
        }
        if notes:
            # merge, não substitui o note existente
            values["note"] = {**(req.note or {}), "completionNotes": notes}

        req = self._req_repo.update_fields(req, values)
        logger.info(f"Request {req.id} concluída por {actor_id}")

        self._deliver(RequestNotificationBuilder.build_completed(req, notes), req.user_id, request_id=req.id)
        return req
