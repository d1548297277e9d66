# app/bootstrap.py
from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from loguru import logger

import app.infrastructure.database.models  # noqa: F401
from app.api.middlewares.error_handler import register_error_handlers
from app.api.realtime.socket_handlers import register_socket_handlers
from app.api.routes import register_routes
from app.config.flask_config import configure_app
from app.config.logging_config import configure_logger
from app.config.settings import settings
from app.infrastructure.realtime.socketio_server import socketio


def create_app() -> Flask:
    configure_logger(level=settings.log_level, serialize=settings.log_json)

    app = Flask(__name__)

    # ✅ CORS aplicado cedo (antes das rotas lidarem com OPTIONS)
    CORS(
        app,
        resources={rf"{settings.api_prefix}/*": {"origins": settings.cors_origins}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app)

    register_routes(app, api_prefix=settings.api_prefix, app_prefix=settings.app_prefix.rstrip("/"))

    register_error_handlers(app)

    # ✅ Socket.IO no subpath
    socketio.init_app(app, path=settings.socket_path)
    register_socket_handlers()

    logger.info(f"App pronta em {settings.api_prefix} (socket: {settings.socket_path})")
    return app
