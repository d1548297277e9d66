# app/api/routes/__init__.py

from flask import Flask

from app.api.routes.health_routes import bp_health
from app.api.routes.location_routes import bp_locations
from app.api.routes.notification_routes import bp_notifications
from app.api.routes.request_routes import bp_req
from app.api.routes.service_routes import bp_services
from app.api.routes.user_routes import bp_users


def register_routes(app: Flask, *, api_prefix: str, app_prefix: str) -> None:
    # health fora de /api (mas dentro do app)
    app.register_blueprint(bp_health, url_prefix=f"{app_prefix}/health")

    # tudo de API padronizado
    app.register_blueprint(bp_req, url_prefix=f"{api_prefix}/requests")
    app.register_blueprint(bp_services, url_prefix=f"{api_prefix}/services")
    app.register_blueprint(bp_locations, url_prefix=f"{api_prefix}/locations")
    app.register_blueprint(bp_users, url_prefix=f"{api_prefix}/users")
    app.register_blueprint(bp_notifications, url_prefix=f"{api_prefix}/notifications")
