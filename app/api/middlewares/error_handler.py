# app/api/middlewares/error_handler.py
from flask import Flask, jsonify
from loguru import logger
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from app.config.settings import settings
from app.core.exceptions import AppError, InternalError


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        body = {"error": str(err)}

        if isinstance(err, InternalError):
            logger.opt(exception=err).error(f"{err} ({err.detail})")
            if settings.debug and err.detail:
                body["detail"] = err.detail  # ✅ só em dev

        return jsonify(body), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return jsonify(
            {
                "error": "Dados inválidos.",
                "details": err.errors(include_url=False, include_context=False, include_input=False),
            }
        ), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        logger.exception("Erro inesperado")  # ✅ stack trace no log

        if settings.debug:
            return jsonify({"error": str(err)}), 500  # ✅ mostra a msg em dev

        return jsonify({"error": "Internal server error"}), 500
