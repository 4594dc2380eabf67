"""Base de datos del ledger de notificaciones electorales."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import Engine, String, Text, UniqueConstraint, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .config import Settings


class Base(DeclarativeBase):
    """Clase base declarativa."""


class ElectionEvent(Base):
    """Notificación emitida por una elección, encadenada por hash."""

    __tablename__ = "election_events"
    __table_args__ = (UniqueConstraint("election_id", "sequence"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    election_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    sequence: Mapped[int] = mapped_column(nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    previous_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    timestamp: Mapped[str] = mapped_column(
        String(32), nullable=False, default=lambda: datetime.now(timezone.utc).isoformat()
    )


def create_session_factory(db_url: str) -> sessionmaker[Session]:
    """Crea un engine para ``db_url`` y la fábrica de sesiones ligada a él."""
    engine = create_engine(db_url, echo=False, future=True)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def engine_of(factory: sessionmaker[Session]) -> Engine:
    return factory.kw["bind"]


def init_db(settings: Settings) -> sessionmaker[Session]:
    """Prepara la base de datos configurada; las tablas solo se crean en dev."""
    factory = create_session_factory(settings.db_url)
    if settings.env == "dev":
        Base.metadata.create_all(bind=engine_of(factory))
    return factory


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provee una sesión de base de datos gestionada."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:  # pragma: no cover - la excepción se relanza para trazabilidad
        session.rollback()
        raise
    finally:
        session.close()
