# app/config/settings.py
import os
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # 🔵 Banco principal (PostgreSQL)
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_ssl: bool = False

    # URL completa (ex.: sqlite:// nos testes); tem prioridade sobre db_*
    db_url: str | None = None

    environment: str = "development"
    debug: bool = True

    app_prefix: str = os.getenv("APP_PREFIX", "/apps/service-requests")

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_access_minutes: int = int(os.getenv("JWT_ACCESS_MINUTES", "60"))

    jwt_issuer: str = os.getenv("JWT_ISSUER", "service-requests-api")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "service-requests-front")

    cors_origins_raw: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    )

    socketio_async_mode: str = os.getenv("SOCKETIO_ASYNC_MODE", "eventlet")

    # Features liberadas para as rotas que declaram `feature=...`
    enabled_features_raw: str = os.getenv("ENABLED_FEATURES", "requests,notifications")

    folders_base_path: str = os.getenv("FOLDERS_BASE_PATH", "./_folders")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @property
    def api_prefix(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/api"

    @property
    def socket_path(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/socket.io"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def enabled_features(self) -> set[str]:
        return {f.strip().lower() for f in self.enabled_features_raw.split(",") if f.strip()}

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        host = self.db_host
        port = self.db_port
        db = self.db_name

        url = f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"
        if self.db_ssl:
            url += "?sslmode=require"
        return url


settings = Settings()
