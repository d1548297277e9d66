# app/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.settings import settings


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)

    # sqlite (testes): conexão única compartilhada entre threads
    engine = create_engine(
        url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite não emite BEGIN sozinho; sem isso SAVEPOINT não funciona
    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


_engine = _build_engine(settings.database_url)

_SessionLocal = sessionmaker(
    bind=_engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_engine() -> Engine:
    return _engine


@contextmanager
def db_session() -> Iterator[Session]:
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
