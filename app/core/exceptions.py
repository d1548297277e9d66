# app/core/exceptions.py
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class ConflictError(AppError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=409)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=403)


class InternalError(AppError):
    """Falha inesperada (ex.: banco). `detail` guarda a mensagem original para diagnóstico."""

    def __init__(self, message: str = "Internal server error", *, detail: str | None = None) -> None:
        super().__init__(message, status_code=500)
        self.detail = detail


def service_boundary(message: str) -> Callable[[F], F]:
    """
    Erros de domínio (AppError) passam intactos; qualquer outra exceção
    vira InternalError(message) encadeada com a original.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except AppError:
                raise
            except Exception as e:
                raise InternalError(message, detail=str(e)) from e

        return wrapper  # type: ignore[return-value]

    return decorator
