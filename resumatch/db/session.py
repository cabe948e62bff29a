# resumatch/db/session.py
from __future__ import annotations
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from resumatch.core.config import settings as cfg
from resumatch.core.logging import get_logger

log = get_logger(__name__)

DEFAULT_URL = "sqlite:///./resumatch.db"

def _normalize_url(url: str | None) -> str:
    # Treat None or empty/whitespace as unset and fall back to local SQLite
    if not url or not url.strip():
        return DEFAULT_URL
    return url.strip()

def make_engine(url: str | None) -> Engine:
    url = _normalize_url(url)
    # SQLite needs special connect args; Postgres does not
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    kwargs = {}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # in-memory DB must share one connection across sessions
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=False, future=True, connect_args=connect_args, **kwargs)

def make_sessionmaker(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True, expire_on_commit=False)

DATABASE_URL = _normalize_url(getattr(cfg, "database_url", None))

engine = make_engine(DATABASE_URL)
SessionLocal = make_sessionmaker(engine)
Base = declarative_base()

log.info("[DB] Using %s", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
