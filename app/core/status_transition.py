# app/core/status_transition.py
"""
Máquina de estados do ciclo de vida de uma solicitação.

    PENDING   -> ONGOING, CANCELLED
    ONGOING   -> COMPLETED, CANCELLED
    COMPLETED -> (terminal)
    CANCELLED -> (terminal)

Funções puras, sem I/O. Transição para o mesmo status é sempre permitida (no-op),
inclusive a partir de um estado terminal.
"""
from __future__ import annotations

from enum import Enum

from app.core.exceptions import BadRequestError


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# ordem: [caminho de sucesso, cancelamento]
_TRANSITIONS: dict[RequestStatus, tuple[RequestStatus, ...]] = {
    RequestStatus.PENDING: (RequestStatus.ONGOING, RequestStatus.CANCELLED),
    RequestStatus.ONGOING: (RequestStatus.COMPLETED, RequestStatus.CANCELLED),
    RequestStatus.COMPLETED: (),
    RequestStatus.CANCELLED: (),
}


def _coerce(status: RequestStatus | str) -> RequestStatus:
    try:
        return RequestStatus(status)
    except ValueError:
        raise BadRequestError(f"Status desconhecido: {status}.")


def valid_transitions_from(status: RequestStatus | str) -> list[RequestStatus]:
    return list(_TRANSITIONS[_coerce(status)])


def is_terminal(status: RequestStatus | str) -> bool:
    return not _TRANSITIONS[_coerce(status)]


def validate_transition(current: RequestStatus | str, new: RequestStatus | str) -> None:
    cur = _coerce(current)
    nxt = _coerce(new)
    if cur == nxt:
        return

    allowed = _TRANSITIONS[cur]
    if nxt in allowed:
        return

    allowed_txt = ", ".join(s.value for s in allowed) if allowed else "nenhuma (estado terminal)"
    raise BadRequestError(
        f"Transição de status inválida: {cur.value} -> {nxt.value}. Permitidas: {allowed_txt}."
    )


def validate_transition_with_rules(
    current: RequestStatus | str,
    new: RequestStatus | str,
    assigned_to_id: int | None,
) -> None:
    validate_transition(current, new)

    # atribuição é pré-requisito para o trabalho começar
    if _coerce(new) == RequestStatus.ONGOING and assigned_to_id is None:
        raise BadRequestError("Não é possível iniciar (ONGOING) uma solicitação sem responsável atribuído.")
