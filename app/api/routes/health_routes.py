# app/api/routes/health_routes.py
from flask import Blueprint, jsonify
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config.settings import settings
from app.infrastructure.database.session import db_session

bp_health = Blueprint("health", __name__)


@bp_health.get("")
def health():
    return jsonify({"status": "ok", "environment": settings.environment}), 200


@bp_health.get("/db")
def health_db():
    try:
        with db_session() as session:
            session.execute(text("select 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check do banco falhou: {e}")
        return jsonify({"db": "unavailable"}), 503
    return jsonify({"db": "ok"}), 200
